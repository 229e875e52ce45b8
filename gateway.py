# gateway.py
"""
Google Gemini backed category suggestions and spending advice.

Both calls are single-shot: no retries and no caching. Failures never reach
the caller; they degrade to Category.OTHER or to a fixed advisory string.
"""

from typing import Optional, Sequence

import google.generativeai as genai
from pydantic import BaseModel, ConfigDict, ValidationError

from config import GEMINI_API_KEY, GEMINI_MODEL, INSIGHT_HISTORY_LIMIT
from logger import get_logger
from models import ALL_CATEGORIES, Category, Transaction

logger = get_logger(__name__)

NO_TRANSACTIONS_MESSAGE = "No transactions to analyze yet."
EMPTY_INSIGHTS_MESSAGE = "Could not generate insights at this time."
INSIGHTS_FAILURE_MESSAGE = "Unable to generate insights. Please try again later."

_CLASSIFY_PROMPT = """Classify the transaction described as "{description}" into exactly one of these categories: [{categories}].
Context: the user is in India and describes everyday Indian transactions.
Examples: "Swiggy" -> Food & Drink, "Ola/Uber" -> Transportation, "Bescom/Tata Power" -> Utilities, "Kirana" -> Food & Drink, "UPI" -> decide from the rest of the text.
If unsure, choose 'Other'."""

_ADVISOR_INSTRUCTION = (
    "You are a friendly Indian financial advisor. Use Indian terminology where it fits "
    "(Lakhs, Crores) and a warm tone. Keep every point under 20 words. "
    "Format the answer as a Markdown list."
)

_INSIGHTS_PROMPT = """Analyze these recent financial transactions for an Indian user and give 3 short, actionable bullet points of advice.
Focus on spending habits (for example frequent Zomato/Swiggy orders), savings opportunities or budget tracking.

Transactions:
{lines}"""

_CATEGORY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "category": {
            "type": "STRING",
            "format": "enum",
            "enum": [c.value for c in ALL_CATEGORIES],
        },
    },
    "required": ["category"],
}


class CategoryResponse(BaseModel):
    """The only response shape accepted from the classifier."""
    model_config = ConfigDict(extra="forbid")

    category: Category


def _strip_code_fence(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
    if raw.endswith("```"):
        raw = raw[:-3]
    return raw.strip()


def parse_category_response(raw: Optional[str]) -> Category:
    """Validate classifier output; anything but {"category": <label>} is OTHER."""
    if not raw or not raw.strip():
        return Category.OTHER
    try:
        return CategoryResponse.model_validate_json(_strip_code_fence(raw)).category
    except ValidationError as e:
        logger.warning(f"Rejected classifier response {raw!r}: {e.error_count()} validation error(s)")
        return Category.OTHER


def format_transaction_line(tx: Transaction) -> str:
    return f"{tx.date.isoformat()}: {tx.description} ({tx.type.value}) - ₹{tx.amount:g} [{tx.category.value}]"


class GeminiGateway:
    """
    Category classifier and spending advisor backed by Gemini.

    The credential is passed in explicitly. Pre-built model objects may be
    injected (tests pass fakes exposing ``generate_content_async``); otherwise
    they are created from ``api_key`` and ``model_name``.
    """

    def __init__(self, api_key: str, model_name: str = GEMINI_MODEL,
                 classifier=None, advisor=None,
                 history_limit: int = INSIGHT_HISTORY_LIMIT):
        self.api_key = api_key or ""
        self.model_name = model_name
        self.history_limit = history_limit
        if self.api_key and (classifier is None or advisor is None):
            genai.configure(api_key=self.api_key)
        if classifier is None and self.api_key:
            classifier = genai.GenerativeModel(model_name)
        if advisor is None and self.api_key:
            advisor = genai.GenerativeModel(model_name, system_instruction=_ADVISOR_INSTRUCTION)
        self._classifier = classifier
        self._advisor = advisor

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def predict_category(self, description: str) -> Category:
        text = (description or "").strip()
        if not text or not self.available or self._classifier is None:
            return Category.OTHER

        prompt = _CLASSIFY_PROMPT.format(
            description=text,
            categories=", ".join(c.value for c in ALL_CATEGORIES),
        )
        try:
            response = await self._classifier.generate_content_async(
                prompt,
                generation_config=genai.GenerationConfig(
                    temperature=0.1,
                    response_mime_type="application/json",
                    response_schema=_CATEGORY_SCHEMA,
                ),
            )
            raw = response.text
        except Exception as e:
            logger.error(f"Gemini categorization error: {e}")
            return Category.OTHER

        category = parse_category_response(raw)
        logger.info(f"Gemini classified {text!r} as {category.value}")
        return category

    async def generate_insights(self, transactions: Sequence[Transaction]) -> str:
        if not transactions or not self.available or self._advisor is None:
            return NO_TRANSACTIONS_MESSAGE

        recent = list(transactions)[: self.history_limit]
        prompt = _INSIGHTS_PROMPT.format(lines="\n".join(format_transaction_line(t) for t in recent))
        try:
            response = await self._advisor.generate_content_async(prompt)
            text = response.text
        except Exception as e:
            logger.error(f"Gemini insights error: {e}")
            return INSIGHTS_FAILURE_MESSAGE

        if not text or not text.strip():
            logger.warning("Gemini returned an empty insight response")
            return EMPTY_INSIGHTS_MESSAGE
        return text.strip()


def build_gateway(api_key: Optional[str] = None, model_name: Optional[str] = None) -> GeminiGateway:
    return GeminiGateway(
        api_key=GEMINI_API_KEY if api_key is None else api_key,
        model_name=model_name or GEMINI_MODEL,
    )
