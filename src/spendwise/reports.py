# reports.py
"""
Derived figures over the full ledger.

Everything here is a linear pass over an in-memory list of entries and is
recomputed on every request; nothing is cached or stored. Inputs can be ORM
rows or schema objects: only `type`, `amount`, `category` and `date` are read.

Every entry whose type is not 'revenue' counts as an expense.
"""

from __future__ import annotations

from datetime import date as _date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from .schemas import CategoryTotal, MonthReport, Summary, Totals

TOP_CATEGORIES = 3
_Q2 = Decimal("0.01")


def _d0() -> Decimal:
    """Return Decimal zero."""
    return Decimal("0")


def _type_of(tx: Any) -> str:
    t = getattr(tx, "type", "")
    return str(getattr(t, "value", t)).lower()


def _is_revenue(tx: Any) -> bool:
    return _type_of(tx) == "revenue"


def _amount_of(tx: Any) -> Decimal:
    return Decimal(str(tx.amount))


def month_key(date_str: str) -> str:
    """'2024-03-15' -> '2024-03'."""
    return (date_str or "")[:7]


def month_label(month: str) -> str:
    """'2024-03' -> 'March 2024'; unparseable keys are returned unchanged."""
    try:
        year, month_num = month.split("-")
        return _date(int(year), int(month_num), 1).strftime("%B %Y")
    except ValueError:
        return month


def _share(amount: Decimal, total: Decimal) -> Decimal:
    if total <= 0:
        return _d0()
    return (amount / total * 100).quantize(_Q2, rounding=ROUND_HALF_UP)


def _sorted_categories(sums: Dict[str, Decimal], total: Decimal) -> List[CategoryTotal]:
    # largest first; equal amounts keep first-seen order (sort is stable)
    ordered = sorted(sums.items(), key=lambda kv: kv[1], reverse=True)
    return [CategoryTotal(category=c, amount=a, share=_share(a, total)) for c, a in ordered]


def compute_totals(transactions: Iterable[Any]) -> Totals:
    revenue = _d0()
    expense = _d0()
    for tx in transactions:
        if _is_revenue(tx):
            revenue += _amount_of(tx)
        else:
            expense += _amount_of(tx)
    return Totals(revenue=revenue, expense=expense, balance=revenue - expense)


def category_totals(transactions: Iterable[Any]) -> List[CategoryTotal]:
    """Expense-only totals per category, largest first, with share of all expense."""
    sums: Dict[str, Decimal] = {}
    for tx in transactions:
        if _is_revenue(tx):
            continue
        sums[tx.category] = sums.get(tx.category, _d0()) + _amount_of(tx)
    total = sum(sums.values(), _d0())
    return _sorted_categories(sums, total)


def summarize(transactions: Iterable[Any]) -> Summary:
    txs = list(transactions)
    return Summary(totals=compute_totals(txs), categories=category_totals(txs))


def monthly_report(transactions: Iterable[Any]) -> List[MonthReport]:
    """
    One report per month key (YYYY-MM), newest month first.

    Each report carries revenue and expense sums, the expense breakdown by
    category (largest first) and its top three entries.
    """
    per_month: Dict[str, Dict[str, Any]] = {}
    for tx in transactions:
        mkey = month_key(tx.date)
        agg = per_month.setdefault(mkey, {"revenue": _d0(), "expense": _d0(), "categories": {}})
        amount = _amount_of(tx)
        if _is_revenue(tx):
            agg["revenue"] += amount
        else:
            agg["expense"] += amount
            agg["categories"][tx.category] = agg["categories"].get(tx.category, _d0()) + amount

    reports: List[MonthReport] = []
    for mkey in sorted(per_month, reverse=True):
        agg = per_month[mkey]
        cats = _sorted_categories(agg["categories"], agg["expense"])
        reports.append(MonthReport(
            month=mkey,
            label=month_label(mkey),
            revenue=agg["revenue"],
            expense=agg["expense"],
            balance=agg["revenue"] - agg["expense"],
            categories=cats,
            top_categories=cats[:TOP_CATEGORIES],
        ))
    return reports


def month_transactions(
    transactions: Iterable[Any],
    month: str,
    type: Optional[str] = None,
) -> List[Any]:
    """Entries whose date starts with `month`, optionally of one type, in input order."""
    wanted = None if type is None else str(getattr(type, "value", type)).lower()
    out = []
    for tx in transactions:
        if not (tx.date or "").startswith(month):
            continue
        if wanted is not None and _type_of(tx) != wanted:
            continue
        out.append(tx)
    return out
