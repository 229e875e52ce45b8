# models.py

import math
from dataclasses import dataclass, field, replace
import datetime as dt
from enum import Enum
from typing import Optional, Dict, Any


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    FOOD = "Food & Drink"
    TRANSPORT = "Transportation"
    SHOPPING = "Shopping"
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health & Wellness"
    INCOME = "Salary & Income"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value) -> "Category":
        """Map a member, member name or label onto the enumeration; anything else is OTHER."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.OTHER
        key = value.strip().lower()
        for c in cls:
            if key == c.value.lower() or key == c.name.lower():
                return c
        return cls.OTHER


EXPENSE_CATEGORIES = [
    Category.FOOD,
    Category.TRANSPORT,
    Category.SHOPPING,
    Category.HOUSING,
    Category.UTILITIES,
    Category.ENTERTAINMENT,
    Category.HEALTH,
    Category.OTHER,
]

ALL_CATEGORIES = [Category.INCOME] + EXPENSE_CATEGORIES

CATEGORY_COLORS: Dict[Category, str] = {
    Category.FOOD: "#ea580c",
    Category.TRANSPORT: "#0284c7",
    Category.SHOPPING: "#db2777",
    Category.HOUSING: "#7c3aed",
    Category.UTILITIES: "#475569",
    Category.ENTERTAINMENT: "#9333ea",
    Category.HEALTH: "#16a34a",
    Category.INCOME: "#15803d",
    Category.OTHER: "#94a3b8",
}


def parse_date(value) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    # accept full ISO timestamps as well as plain dates
    return dt.datetime.fromisoformat(str(value).strip()[:10]).date()


def _resolve_category(tx_type: TransactionType, category) -> Category:
    # income is always filed under the income category
    if tx_type is TransactionType.INCOME:
        return Category.INCOME
    return Category.coerce(category)


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    description: str
    date: dt.date
    type: TransactionType
    category: Category = Category.OTHER

    def __post_init__(self):
        amount = float(self.amount)
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"amount must be a finite non-negative magnitude, got {self.amount!r}")
        tx_type = TransactionType(self.type)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "type", tx_type)
        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "category", _resolve_category(tx_type, self.category))

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def signed_amount(self) -> float:
        return self.amount if self.is_income else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "category": self.category.value,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Transaction":
        return Transaction(
            id=str(d["id"]),
            amount=float(d["amount"]),
            description=str(d.get("description", "")),
            date=parse_date(d["date"]),
            type=TransactionType(d["type"]),
            category=d.get("category", Category.OTHER),
        )

    def __str__(self) -> str:
        sign = "+" if self.is_income else "-"
        return f"{sign}{self.amount:.2f} | {self.category.value} | {self.description} | {self.date}"


@dataclass(frozen=True)
class TransactionDraft:
    """A transaction that has not been given an id yet."""
    amount: float
    description: str
    type: TransactionType = TransactionType.EXPENSE
    category: Category = Category.OTHER
    date: dt.date = field(default_factory=dt.date.today)

    def with_category(self, category) -> "TransactionDraft":
        """
        Seed a suggested category into the draft.

        Suggesting the income category turns the draft into income, any other
        category turns it into an expense.
        """
        category = Category.coerce(category)
        tx_type = TransactionType.INCOME if category is Category.INCOME else TransactionType.EXPENSE
        return replace(self, category=category, type=tx_type)

    def to_transaction(self, id: str) -> Transaction:
        return Transaction(
            id=id,
            amount=self.amount,
            description=self.description,
            date=self.date,
            type=self.type,
            category=self.category,
        )


def should_autosuggest(draft: Optional[TransactionDraft]) -> bool:
    """Only ask the classifier when there is some text and no category was picked yet."""
    if draft is None:
        return False
    return len(draft.description.strip()) > 2 and draft.category is Category.OTHER
