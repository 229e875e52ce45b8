# cli.py
import argparse
import asyncio
from dataclasses import replace
from datetime import date

from analysis import breakdown_by_category, category_shares, monthly_activity, summarize
from config import STORAGE_KEY, STORAGE_PATH
from formatting import format_inr, signed_inr
from gateway import build_gateway
from insights import parse_advice
from models import Category, TransactionDraft, TransactionType, parse_date
from storage import open_store, sorted_by_date


def cmd_add(args, parser):
    store = open_store(args.store, args.key)
    tx_type = TransactionType(args.type) if args.type else TransactionType.EXPENSE
    try:
        draft = TransactionDraft(
            amount=args.amount,
            description=args.description,
            type=tx_type,
            category=Category.coerce(args.category),
            date=parse_date(args.date) if args.date else date.today(),
        )
        if args.suggest:
            suggested = asyncio.run(build_gateway().predict_category(args.description))
            print(f"Suggested category: {suggested.value}")
            if args.type is None:
                draft = draft.with_category(suggested)
            elif suggested is not Category.INCOME:
                # an explicit --type wins over the type implied by the suggestion
                draft = replace(draft, category=suggested)
        tx = store.add(draft)
    except ValueError as e:
        parser.error(str(e))
    print(f"Saved: {tx.id} {tx}")


def cmd_remove(args, parser):
    store = open_store(args.store, args.key)
    if store.get(args.id) is None:
        print(f"No transaction with id {args.id}")
    store.remove(args.id)


def cmd_list(args, parser):
    store = open_store(args.store, args.key)
    if not len(store):
        print("No transactions yet.")
        return
    for tx in sorted_by_date(store.transactions):
        print(f"{tx.date:%d %b %Y}  {signed_inr(tx):>14}  {tx.category.value:<18} {tx.description}  [{tx.id}]")


def cmd_summary(args, parser):
    store = open_store(args.store, args.key)
    txs = store.transactions
    s = summarize(txs)
    print(f"Total balance: {format_inr(s.balance)}")
    print(f"Income:        {format_inr(s.total_income)}")
    print(f"Expenses:      {format_inr(s.total_expense)}")
    shares = category_shares(txs)
    if shares:
        print("\nExpenses by category")
        for c in shares:
            print(f"  {c.category:<18} {format_inr(c.amount):>12}  {c.percent:>3}%")
    ref = parse_date(args.reference_date) if args.reference_date else None
    print("\nMonthly activity")
    for m in monthly_activity(txs, ref, match_by_month_name=args.by_month_name):
        print(f"  {m.month:<4} income {format_inr(m.income):>12}  expense {format_inr(m.expense):>12}")


def cmd_suggest(args, parser):
    category = asyncio.run(build_gateway().predict_category(args.description))
    print(category.value)


def cmd_insights(args, parser):
    store = open_store(args.store, args.key)
    text = asyncio.run(build_gateway().generate_insights(store.transactions))
    items = parse_advice(text)
    if items is None:
        print(text)
        return
    for item in items:
        print(f"- {item}")


def cmd_chart(args, parser):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from viz import plot_category_donut, plot_monthly_activity

    store = open_store(args.store, args.key)
    txs = store.transactions
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
    plot_monthly_activity(monthly_activity(txs), ax=ax1)
    plot_category_donut(breakdown_by_category(txs), ax=ax2)
    fig.savefig(args.output)
    plt.close(fig)
    print(f"Chart written to {args.output}")


def build_parser():
    p = argparse.ArgumentParser("finance")
    p.add_argument("--store", default=STORAGE_PATH, help="Path of the local storage file")
    p.add_argument("--key", default=STORAGE_KEY, help="Storage slot holding the transactions")
    sub = p.add_subparsers(dest="cmd")

    a = sub.add_parser("add", help="Record a transaction")
    a.add_argument("amount", type=float, help="Amount (positive number).")
    a.add_argument("description", help="What the money was for, e.g. 'Swiggy order'")
    a.add_argument("--type", choices=[t.value for t in TransactionType], default=None,
                   help="expense (default) or income; overrides the type implied by --suggest")
    a.add_argument("--category", default=Category.OTHER.value, help="Category label, e.g. 'Food & Drink'")
    a.add_argument("--date", default=None, help="ISO date, e.g. 2025-08-29 (default: today)")
    a.add_argument("--suggest", action="store_true", help="Ask Gemini to pick the category")
    a.set_defaults(func=cmd_add)

    r = sub.add_parser("remove", help="Delete a transaction by id")
    r.add_argument("id")
    r.set_defaults(func=cmd_remove)

    ls = sub.add_parser("list", help="Show the transaction history")
    ls.set_defaults(func=cmd_list)

    s = sub.add_parser("summary", help="Totals, category breakdown and monthly activity")
    s.add_argument("--reference-date", default=None, help="Last month of the activity window (default: today)")
    s.add_argument("--by-month-name", action="store_true",
                   help="Match activity months by name only, ignoring the year")
    s.set_defaults(func=cmd_summary)

    g = sub.add_parser("suggest", help="Suggest a category for a description")
    g.add_argument("description")
    g.set_defaults(func=cmd_suggest)

    i = sub.add_parser("insights", help="Spending advice for recent transactions")
    i.set_defaults(func=cmd_insights)

    c = sub.add_parser("chart", help="Save activity and category charts as an image")
    c.add_argument("--output", default="finance_charts.png")
    c.set_defaults(func=cmd_chart)
    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "func", None) is None:
        parser.print_help()
        return
    args.func(args, parser)


if __name__ == "__main__":
    main()
