# formatting.py
from models import Transaction


def group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(amount: float, symbol: str = "₹") -> str:
    """Format like the en-IN locale: at most two decimals, trailing zeros dropped."""
    negative = amount < 0
    text = f"{abs(amount):.2f}".rstrip("0").rstrip(".")
    whole, _, frac = text.partition(".")
    out = symbol + group_indian(whole) + ("." + frac if frac else "")
    return "-" + out if negative else out


def signed_inr(tx: Transaction) -> str:
    return ("+" if tx.is_income else "-") + format_inr(tx.amount)
