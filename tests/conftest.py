"""Shared fixtures: a per-test storage file and fake Gemini models.

The fakes mimic the one method the gateway uses,
``generate_content_async(contents, **kwargs)``, and record every call so tests
can assert on prompts or on the absence of a call.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from models import Category, Transaction, TransactionType
from storage import KeyValueFile, TransactionStore


class FakeResponse:
    def __init__(self, text: str | None) -> None:
        self.text = text


class FakeModel:
    """Stand-in for ``genai.GenerativeModel`` returning canned text or raising."""

    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self._text = text
        self._error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content_async(self, contents, **kwargs):
        self.calls.append({"contents": contents, **kwargs})
        if self._error is not None:
            raise self._error
        return FakeResponse(self._text)


@pytest.fixture
def slot_path(tmp_path: Path) -> str:
    return str(tmp_path / "finance_store.json")


@pytest.fixture
def backend(slot_path: str) -> KeyValueFile:
    return KeyValueFile(slot_path)


@pytest.fixture
def store(backend: KeyValueFile) -> TransactionStore:
    s = TransactionStore(backend)
    s.load_initial()
    return s


def make_tx(amount: float, tx_type: str = "expense", category=Category.OTHER,
            on: str = "2024-05-01", description: str = "", tx_id: str | None = None) -> Transaction:
    make_tx.counter += 1
    return Transaction(
        id=tx_id or f"tx-{make_tx.counter}",
        amount=amount,
        description=description or f"{tx_type} {amount}",
        date=date.fromisoformat(on),
        type=TransactionType(tx_type),
        category=category,
    )


make_tx.counter = 0


@pytest.fixture
def tx_factory():
    return make_tx
