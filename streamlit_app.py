# streamlit_app.py
"""
FinanceFlow dashboard (Streamlit).

Transactions live in the local storage slot (see storage.py); every add or
delete rewrites it. Category suggestions and spending advice come from Gemini
when GEMINI_API_KEY is set.
"""

import asyncio
from datetime import datetime

import pandas as pd
import plotly.express as px
import streamlit as st

from analysis import activity_to_df, category_shares, monthly_activity, summarize
from config import STORAGE_KEY, STORAGE_PATH
from formatting import format_inr, signed_inr
from gateway import build_gateway
from insights import InsightPanel, InsightState, parse_advice
from models import (
    CATEGORY_COLORS, EXPENSE_CATEGORIES, Category, TransactionDraft, TransactionType, should_autosuggest,
)
from storage import open_store, sorted_by_date

st.set_page_config(page_title="FinanceFlow AI", layout="wide", initial_sidebar_state="expanded")


# -----------------------
# Session objects
# -----------------------
def get_store():
    if "store" not in st.session_state:
        st.session_state.store = open_store(STORAGE_PATH, STORAGE_KEY)
    return st.session_state.store


def get_gateway():
    if "gateway" not in st.session_state:
        st.session_state.gateway = build_gateway()
    return st.session_state.gateway


def get_insight_panel():
    if "insights" not in st.session_state:
        st.session_state.insights = InsightPanel(get_gateway())
    return st.session_state.insights


store = get_store()
gateway = get_gateway()
panel = get_insight_panel()
txs = store.transactions

# -----------------------
# Sidebar: add transaction
# -----------------------
st.sidebar.title("Add Transaction")

if "draft_category" not in st.session_state:
    st.session_state.draft_category = Category.OTHER.value
if "draft_type" not in st.session_state:
    st.session_state.draft_type = TransactionType.EXPENSE.value


def suggest_category(text: str) -> None:
    """Ask Gemini for a category and seed it (and the matching type) into the form."""
    draft = TransactionDraft(amount=0.0, description=text,
                             category=Category.coerce(st.session_state.draft_category))
    suggested = asyncio.run(gateway.predict_category(text))
    seeded = draft.with_category(suggested)
    st.session_state.draft_category = seeded.category.value
    st.session_state.draft_type = seeded.type.value


def on_description_change() -> None:
    # edit-finished equivalent of the form's blur handler
    draft = TransactionDraft(amount=0.0, description=st.session_state.description,
                             category=Category.coerce(st.session_state.draft_category))
    if gateway.available and should_autosuggest(draft):
        suggest_category(draft.description)


description = st.sidebar.text_input("Description", key="description", on_change=on_description_change,
                                     placeholder="e.g. Swiggy order, Uber to airport")

if st.sidebar.button("✨ Suggest category", disabled=not gateway.available):
    if not description.strip():
        st.sidebar.info("Type a description first.")
    else:
        with st.sidebar:
            with st.spinner("Asking Gemini..."):
                suggest_category(description)
        st.rerun()

type_options = [TransactionType.EXPENSE.value, TransactionType.INCOME.value]
with st.sidebar.form("add_tx", clear_on_submit=True):
    tx_type = st.radio("Type", options=type_options, horizontal=True,
                       index=type_options.index(st.session_state.draft_type))
    amount = st.number_input("Amount (₹)", min_value=0.0, step=0.01, format="%.2f")
    category_options = [c.value for c in EXPENSE_CATEGORIES] + [Category.INCOME.value]
    category = st.selectbox("Category", options=category_options,
                            index=category_options.index(st.session_state.draft_category))
    tx_date = st.date_input("Date", value=datetime.now().date())
    submitted = st.form_submit_button("Add")
    if submitted:
        if amount <= 0 or not description.strip():
            st.warning("Enter an amount and a description.")
        else:
            try:
                store.add(TransactionDraft(
                    amount=float(amount),
                    description=description.strip(),
                    type=TransactionType(tx_type),
                    category=Category.coerce(category),
                    date=tx_date,
                ))
            except OSError as e:
                st.error(f"Could not save the transaction: {e}")
            else:
                st.session_state.draft_category = Category.OTHER.value
                st.session_state.draft_type = TransactionType.EXPENSE.value
                st.success("Added!")
                st.rerun()

st.sidebar.markdown("---")
st.sidebar.markdown(
    "Describe expenses naturally, like *Swiggy order* or *Uber to airport*, and use "
    "**Suggest category**. UPI, Kirana and other Indian context is understood."
)

# -----------------------
# Top-level UI
# -----------------------
st.title("FinanceFlow AI")
tab_dashboard, tab_history = st.tabs(["Dashboard", "Transactions"])

with tab_dashboard:
    summary = summarize(txs)
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Balance", format_inr(summary.balance))
    col2.metric("Income", format_inr(summary.total_income))
    col3.metric("Expenses", format_inr(summary.total_expense))

    # AI insights
    st.subheader("✨ AI Financial Insights")
    if st.button("Analyze Spending", disabled=panel.busy or not txs):
        with st.spinner("Analyzing..."):
            asyncio.run(panel.refresh(txs))
    if panel.state is InsightState.READY and panel.text:
        items = parse_advice(panel.text)
        if items is None:
            st.write(panel.text)
        else:
            st.markdown("\n".join(f"- {item}" for item in items))
    elif panel.error:
        st.error(panel.error)
    else:
        st.info("Click \"Analyze Spending\" to get personalized advice from Gemini "
                "based on your recent transaction history.")

    # Charts
    chart1, chart2 = st.columns(2)
    with chart1:
        activity = activity_to_df(monthly_activity(txs))
        fig_activity = px.bar(activity, x="month", y=["Income", "Expense"], barmode="group",
                              title="Monthly Activity",
                              color_discrete_map={"Income": "#10b981", "Expense": "#f97316"},
                              labels={"month": "", "value": "Amount (₹)", "variable": ""})
        st.plotly_chart(fig_activity, use_container_width=True)
    with chart2:
        shares = category_shares(txs)
        if not shares:
            st.info("No expenses recorded yet.")
        else:
            cat_df = pd.DataFrame([{"category": c.category, "amount": c.amount, "percent": c.percent}
                                   for c in shares])
            color_map = {c.value: color for c, color in CATEGORY_COLORS.items()}
            fig_cat = px.pie(cat_df, names="category", values="amount", hole=0.6,
                             title="Expenses by Category", color="category", color_discrete_map=color_map)
            st.plotly_chart(fig_cat, use_container_width=True)
            for c in shares:
                st.write(f"{c.category}: {format_inr(c.amount)} ({c.percent}%)")

with tab_history:
    st.subheader("Transaction History")
    if not txs:
        st.info("No transactions yet. Add one from the sidebar.")
    for tx in sorted_by_date(txs):
        col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
        col1.write(f"**{tx.description}**  \n{tx.category.value}")
        col2.write(f"{tx.date:%d %b %Y}")
        col3.write(signed_inr(tx))
        if col4.button("Delete", key=f"delete_{tx.id}"):
            try:
                store.remove(tx.id)
            except OSError as e:
                st.error(f"Could not delete the transaction: {e}")
            else:
                st.rerun()
