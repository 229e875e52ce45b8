# viz.py
import matplotlib.pyplot as plt

from analysis import activity_to_df
from models import CATEGORY_COLORS, Category

INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#f97316"


def plot_monthly_activity(activity, ax=None, title="Monthly Activity"):
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))
    df = activity_to_df(activity)
    positions = range(len(df))
    width = 0.4
    ax.bar([p - width / 2 for p in positions], df["Income"], width=width, color=INCOME_COLOR, label="Income")
    ax.bar([p + width / 2 for p in positions], df["Expense"], width=width, color=EXPENSE_COLOR, label="Expense")
    ax.set_xticks(list(positions))
    ax.set_xticklabels(df["month"])
    ax.set_title(title)
    ax.set_ylabel("Amount (₹)")
    ax.legend()
    plt.tight_layout()
    return ax


def plot_category_donut(breakdown, ax=None, title="Expenses by Category"):
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    if not breakdown:
        ax.text(0.5, 0.5, "No expenses yet", ha="center", va="center")
        ax.set_axis_off()
        ax.set_title(title)
        return ax
    labels = [c.category for c in breakdown]
    values = [c.amount for c in breakdown]
    colors = [CATEGORY_COLORS.get(Category.coerce(label), CATEGORY_COLORS[Category.OTHER]) for label in labels]
    ax.pie(values, labels=labels, colors=colors, autopct="%1.0f%%",
           wedgeprops={"width": 0.35}, startangle=90, counterclock=False)
    ax.set_title(title)
    return ax
