# analysis.py
import datetime as dt
from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd

from models import Category, Transaction, TransactionType

DF_COLUMNS = ["id", "amount", "description", "date", "type", "category"]
ACTIVITY_MONTHS = 6


@dataclass(frozen=True)
class Summary:
    total_income: float
    total_expense: float
    balance: float


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: float


@dataclass(frozen=True)
class CategoryShare:
    category: str
    amount: float
    percent: int


@dataclass(frozen=True)
class MonthActivity:
    month: str
    income: float
    expense: float


def txs_to_df(txs: Sequence[Transaction]) -> pd.DataFrame:
    """
    Tabulate transactions. Amounts that are not numeric count as 0 and
    unparsable dates become NaT.
    """
    records = [t.to_dict() if isinstance(t, Transaction) else dict(t) for t in txs]
    df = pd.DataFrame(records, columns=DF_COLUMNS)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0).astype(float)
    df["date"] = pd.to_datetime(df["date"], errors="coerce", format="mixed")
    df["type"] = df["type"].map(_type_value)
    df["category"] = df["category"].map(_category_value)
    return df


def _type_value(v) -> Optional[str]:
    if isinstance(v, TransactionType):
        return v.value
    return v if isinstance(v, str) else None


def _category_value(v) -> str:
    # labels outside the enumeration are filed under Other, as Transaction does
    return Category.coerce(v).value


def _total(df: pd.DataFrame, tx_type: TransactionType) -> float:
    return float(df.loc[df["type"] == tx_type.value, "amount"].sum())


def summarize(txs: Sequence[Transaction]) -> Summary:
    df = txs_to_df(txs)
    income = _total(df, TransactionType.INCOME)
    expense = _total(df, TransactionType.EXPENSE)
    return Summary(total_income=income, total_expense=expense, balance=income - expense)


def breakdown_by_category(txs: Sequence[Transaction]) -> List[CategoryTotal]:
    """Expense totals per category, largest first; ties keep first-seen order."""
    df = txs_to_df(txs)
    expenses = df[df["type"] == TransactionType.EXPENSE.value]
    if expenses.empty:
        return []
    grouped = expenses.groupby("category", sort=False)["amount"].sum()
    grouped = grouped.sort_values(ascending=False, kind="stable")
    return [CategoryTotal(category=str(name), amount=float(value)) for name, value in grouped.items()]


def category_shares(txs: Sequence[Transaction]) -> List[CategoryShare]:
    """Breakdown entries with their rounded share of total expense."""
    breakdown = breakdown_by_category(txs)
    total = sum(c.amount for c in breakdown)
    shares = []
    for c in breakdown:
        pct = int(round(c.amount / total * 100)) if total > 0 else 0
        shares.append(CategoryShare(category=c.category, amount=c.amount, percent=pct))
    return shares


def trailing_months(reference_date: dt.date, count: int = ACTIVITY_MONTHS) -> List[pd.Period]:
    """The `count` calendar months ending at reference_date's month, oldest first."""
    end = pd.Period(year=reference_date.year, month=reference_date.month, freq="M")
    return [end - i for i in range(count - 1, -1, -1)]


def monthly_activity(txs: Sequence[Transaction], reference_date: Optional[dt.date] = None,
                     match_by_month_name: bool = False) -> List[MonthActivity]:
    """
    Income and expense per month over the trailing six months, zero-filled.

    Months are matched on (year, month). With match_by_month_name=True a
    transaction counts toward every window month sharing its short month
    name, whatever its year.
    """
    reference_date = reference_date or dt.date.today()
    months = trailing_months(reference_date)
    df = txs_to_df(txs)
    df = df.dropna(subset=["date"]).copy()
    if match_by_month_name:
        df["bucket"] = df["date"].dt.strftime("%b")
        keys = [m.strftime("%b") for m in months]
    else:
        df["bucket"] = df["date"].dt.strftime("%Y-%m")
        keys = [m.strftime("%Y-%m") for m in months]

    totals = df.groupby(["bucket", "type"])["amount"].sum()
    activity = []
    for month, key in zip(months, keys):
        activity.append(MonthActivity(
            month=month.strftime("%b"),
            income=float(totals.get((key, TransactionType.INCOME.value), 0.0)),
            expense=float(totals.get((key, TransactionType.EXPENSE.value), 0.0)),
        ))
    return activity


def activity_to_df(activity: Sequence[MonthActivity]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"month": a.month, "Income": a.income, "Expense": a.expense} for a in activity],
        columns=["month", "Income", "Expense"],
    )
