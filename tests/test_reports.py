from decimal import Decimal

from spendwise.reports import (
    category_totals,
    compute_totals,
    month_key,
    month_label,
    month_transactions,
    monthly_report,
)
from spendwise.schemas import TransactionCreate, TxType


def _tx(type, amount, category, date, note=None):
    return TransactionCreate(type=type, amount=amount, category=category, date=date, note=note)


LEDGER = [
    _tx("expense", "50", "Food", "2024-04-02"),
    _tx("revenue", "1000", "Salary", "2024-04-01"),
    _tx("expense", "30", "Transport", "2024-03-28"),
    _tx("expense", "70", "Food", "2024-03-15"),
    _tx("expense", "100", "Rent", "2024-03-01"),
    _tx("expense", "5", "Health", "2024-03-01"),
    _tx("revenue", "200", "Gift", "2024-03-01"),
]


def test_totals_split_by_type():
    totals = compute_totals(LEDGER)
    assert totals.revenue == Decimal("1200")
    assert totals.expense == Decimal("255")
    assert totals.balance == Decimal("945")


def test_totals_empty():
    totals = compute_totals([])
    assert totals.model_dump(mode="json") == {"revenue": "0.00", "expense": "0.00", "balance": "0.00"}


def test_category_totals_expense_only_and_sorted():
    cats = category_totals(LEDGER)
    assert [(c.category, c.amount) for c in cats] == [
        ("Food", Decimal("120")),
        ("Rent", Decimal("100")),
        ("Transport", Decimal("30")),
        ("Health", Decimal("5")),
    ]
    assert cats[0].share == Decimal("47.06")
    assert sum(c.share for c in cats) == Decimal("100.00")


def test_category_totals_without_expenses():
    assert category_totals([_tx("revenue", "10", "Salary", "2024-01-01")]) == []


def test_monthly_report_groups_by_month_newest_first():
    reports = monthly_report(LEDGER)
    assert [r.month for r in reports] == ["2024-04", "2024-03"]

    april, march = reports
    assert april.revenue == Decimal("1000")
    assert april.expense == Decimal("50")
    assert april.balance == Decimal("950")

    assert march.label == "March 2024"
    assert march.revenue == Decimal("200")
    assert march.expense == Decimal("205")
    assert [c.category for c in march.categories] == ["Rent", "Food", "Transport", "Health"]
    assert [c.category for c in march.top_categories] == ["Rent", "Food", "Transport"]


def test_monthly_report_revenue_only_month_has_no_categories():
    reports = monthly_report([_tx("revenue", "10", "Salary", "2024-01-05")])
    assert reports[0].categories == []
    assert reports[0].top_categories == []
    assert reports[0].expense == Decimal("0")


def test_month_transactions_filters_by_prefix_and_type():
    march = month_transactions(LEDGER, "2024-03")
    assert [t.category for t in march] == ["Transport", "Food", "Rent", "Health", "Gift"]
    expenses = month_transactions(LEDGER, "2024-03", type=TxType.EXPENSE)
    assert all(t.type == TxType.EXPENSE for t in expenses)
    assert len(expenses) == 4
    assert month_transactions(LEDGER, "2023-12") == []


def test_month_key_and_label():
    assert month_key("2024-11-30") == "2024-11"
    assert month_label("2024-11") == "November 2024"
    assert month_label("garbage") == "garbage"


def test_negative_amounts_flow_into_totals_and_shares():
    ledger = [
        _tx("expense", "50", "Rent", "2024-05-01"),
        _tx("expense", "-20", "Food", "2024-05-02"),
        _tx("revenue", "-5", "Gift", "2024-05-03"),
    ]
    totals = compute_totals(ledger)
    assert totals.revenue == Decimal("-5")
    assert totals.expense == Decimal("30")
    assert totals.balance == Decimal("-35")

    cats = category_totals(ledger)
    assert [(c.category, c.amount, c.share) for c in cats] == [
        ("Rent", Decimal("50"), Decimal("166.67")),
        ("Food", Decimal("-20"), Decimal("-66.67")),
    ]


def test_share_is_zero_when_total_expense_not_positive():
    refund_only = category_totals([_tx("expense", "-10", "Shopping", "2024-05-01")])
    assert refund_only[0].amount == Decimal("-10")
    assert refund_only[0].share == Decimal("0")

    cancelled_out = category_totals([
        _tx("expense", "10", "Food", "2024-05-01"),
        _tx("expense", "-10", "Shopping", "2024-05-02"),
    ])
    assert [c.share for c in cancelled_out] == [Decimal("0"), Decimal("0")]

    march = monthly_report([_tx("expense", "-3", "Food", "2024-03-01")])[0]
    assert march.expense == Decimal("-3")
    assert march.categories[0].share == Decimal("0")
