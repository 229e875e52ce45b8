# insights.py
import re
from enum import Enum
from typing import List, Optional, Sequence

from gateway import INSIGHTS_FAILURE_MESSAGE
from logger import get_logger
from models import Transaction

logger = get_logger(__name__)

_BULLET = re.compile(r"^\s*[-*]\s+(.*)$")


class InsightState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class InsightPanel:
    """
    Drives the "analyze spending" affordance.

    Idle/Ready -> Loading -> Ready, or back to Idle with an error message.
    Requests made while Loading are dropped.
    """

    def __init__(self, gateway):
        self.gateway = gateway
        self.state = InsightState.IDLE
        self.text: Optional[str] = None
        self.error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.state is InsightState.LOADING

    async def refresh(self, transactions: Sequence[Transaction]) -> bool:
        """Fetch new advice. Returns False when a fetch is already running."""
        if self.busy:
            logger.debug("Insight request ignored, one is already in flight")
            return False
        self.state = InsightState.LOADING
        self.error = None
        try:
            text = await self.gateway.generate_insights(list(transactions))
        except Exception as e:
            logger.error(f"Insight fetch failed: {e}")
            self.error = INSIGHTS_FAILURE_MESSAGE
            self.state = InsightState.IDLE
            return True
        self.text = text
        self.state = InsightState.READY
        return True


def _clean_item(item: str) -> str:
    item = item.strip()
    if item.startswith("**") and item.endswith("**") and len(item) > 4:
        item = item[2:-2].strip()
    return item


def parse_advice(text: Optional[str]) -> Optional[List[str]]:
    """
    Pull Markdown bullet items out of advice text.

    Returns None when no line starts with '-' or '*', so callers show the raw text.
    """
    if not text:
        return None
    items = []
    for line in text.splitlines():
        m = _BULLET.match(line)
        if m and m.group(1).strip():
            items.append(_clean_item(m.group(1)))
    return items or None
