from datetime import date

import pytest

from analysis import (
    CategoryTotal, Summary, breakdown_by_category, category_shares, monthly_activity, summarize,
    trailing_months, txs_to_df,
)
from conftest import make_tx
from models import Category


@pytest.fixture
def scenario():
    return [
        make_tx(500, "expense", Category.FOOD, "2024-05-01"),
        make_tx(10000, "income", Category.INCOME, "2024-05-03"),
    ]


def test_summarize_empty():
    assert summarize([]) == Summary(total_income=0.0, total_expense=0.0, balance=0.0)


def test_summarize_scenario(scenario):
    s = summarize(scenario)
    assert s.total_income == 10000
    assert s.total_expense == 500
    assert s.balance == 9500


def test_balance_is_income_minus_expense():
    txs = [make_tx(0.1, "income"), make_tx(0.2, "income"), make_tx(0.3, "expense"),
           make_tx(1234.56, "expense"), make_tx(99.99, "income")]
    s = summarize(txs)
    assert s.balance == s.total_income - s.total_expense


def test_breakdown_scenario(scenario):
    assert breakdown_by_category(scenario) == [CategoryTotal(category="Food & Drink", amount=500.0)]


def test_breakdown_empty_and_income_only():
    assert breakdown_by_category([]) == []
    assert breakdown_by_category([make_tx(100, "income")]) == []


def test_breakdown_sums_sorts_and_excludes_income():
    txs = [
        make_tx(100, "expense", Category.FOOD),
        make_tx(50, "expense", Category.TRANSPORT),
        make_tx(5000, "income"),
        make_tx(70, "expense", Category.TRANSPORT),
        make_tx(300, "expense", Category.HOUSING),
        make_tx(25, "expense", Category.FOOD),
    ]
    result = breakdown_by_category(txs)
    assert [(c.category, c.amount) for c in result] == [
        ("Housing", 300.0),
        ("Food & Drink", 125.0),
        ("Transportation", 120.0),
    ]
    assert "Salary & Income" not in {c.category for c in result}


def test_breakdown_ties_keep_first_seen_order():
    txs = [
        make_tx(100, "expense", Category.HEALTH),
        make_tx(100, "expense", Category.SHOPPING),
        make_tx(200, "expense", Category.UTILITIES),
    ]
    assert [c.category for c in breakdown_by_category(txs)] == [
        "Utilities", "Health & Wellness", "Shopping",
    ]


def test_category_shares_percentages():
    txs = [
        make_tx(300, "expense", Category.HOUSING),
        make_tx(100, "expense", Category.FOOD),
        make_tx(1000, "income"),
    ]
    shares = category_shares(txs)
    assert [(s.category, s.percent) for s in shares] == [("Housing", 75), ("Food & Drink", 25)]


def test_category_shares_empty():
    assert category_shares([]) == []


def test_trailing_months_crosses_year_boundary():
    months = trailing_months(date(2024, 2, 10))
    assert [str(m) for m in months] == ["2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02"]


def test_monthly_activity_empty_is_zero_filled():
    activity = monthly_activity([], date(2024, 5, 15))
    assert [a.month for a in activity] == ["Dec", "Jan", "Feb", "Mar", "Apr", "May"]
    assert all(a.income == 0 and a.expense == 0 for a in activity)


def test_monthly_activity_buckets_by_month():
    txs = [
        make_tx(500, "expense", Category.FOOD, "2024-05-01"),
        make_tx(10000, "income", Category.INCOME, "2024-05-03"),
        make_tx(200, "expense", Category.TRANSPORT, "2024-03-31"),
        make_tx(50, "expense", Category.FOOD, "2024-03-01"),
        make_tx(999, "expense", Category.FOOD, "2023-11-30"),  # outside the window
        make_tx(77, "expense", Category.FOOD, "2024-06-01"),  # after the reference month
    ]
    activity = {a.month: a for a in monthly_activity(txs, date(2024, 5, 20))}
    assert len(activity) == 6
    assert (activity["May"].income, activity["May"].expense) == (10000, 500)
    assert (activity["Mar"].income, activity["Mar"].expense) == (0, 250)
    assert (activity["Dec"].income, activity["Dec"].expense) == (0, 0)


def test_monthly_activity_always_six_entries():
    dense = [make_tx(n, "expense", on=f"2024-{m:02d}-{d:02d}") for n, (m, d) in
             enumerate([(m, d) for m in range(1, 13) for d in (1, 15, 28)], start=1)]
    assert len(monthly_activity(dense, date(2024, 12, 1))) == 6
    assert len(monthly_activity(dense[:1], date(2024, 12, 1))) == 6


def test_monthly_activity_keeps_years_apart_by_default():
    txs = [make_tx(400, "expense", on="2023-05-10"), make_tx(100, "expense", on="2024-05-10")]
    may = monthly_activity(txs, date(2024, 5, 31))[-1]
    assert may.month == "May"
    assert may.expense == 100


def test_monthly_activity_name_only_matching_merges_years():
    txs = [make_tx(400, "expense", on="2023-05-10"), make_tx(100, "expense", on="2024-05-10")]
    may = monthly_activity(txs, date(2024, 5, 31), match_by_month_name=True)[-1]
    assert may.expense == 500


def test_malformed_records_do_not_abort_aggregation():
    records = [
        {"id": "1", "amount": "not a number", "description": "?", "date": "2024-05-01",
         "type": "expense", "category": "Food & Drink"},
        {"id": "2", "amount": 40, "description": "?", "date": "someday",
         "type": "expense", "category": "Food & Drink"},
        {"id": "3", "amount": 60, "description": "ok", "date": "2024-05-02",
         "type": "expense", "category": "Food & Drink"},
    ]
    assert summarize(records).total_expense == 100
    may = monthly_activity(records, date(2024, 5, 31))[-1]
    assert may.expense == 60


def test_txs_to_df_columns(scenario):
    df = txs_to_df(scenario)
    assert list(df.columns) == ["id", "amount", "description", "date", "type", "category"]
    assert df["amount"].dtype == float
    assert list(df["type"]) == ["expense", "income"]


def test_raw_records_with_unknown_category_fall_under_other():
    records = [
        {"id": "1", "amount": 30, "description": "?", "date": "2024-05-01",
         "type": "expense", "category": "Groceries"},
        {"id": "2", "amount": 20, "description": "?", "date": "2024-05-01", "type": "expense"},
        {"id": "3", "amount": 15, "description": "?", "date": "2024-05-01",
         "type": "expense", "category": "food & drink"},
    ]
    assert [(c.category, c.amount) for c in breakdown_by_category(records)] == [
        ("Other", 50.0), ("Food & Drink", 15.0),
    ]
