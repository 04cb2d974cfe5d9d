from decimal import Decimal

from sqlalchemy import create_engine

from spendwise import store
from spendwise.db import _ensure_columns
from spendwise.report_pdf import build_month_pdf
from spendwise.reports import monthly_report
from spendwise.schemas import TransactionCreate, TransactionUpdate


def _payload(**overrides):
    data = {"type": "expense", "amount": "9.99", "category": "Food", "date": "2024-03-01"}
    data.update(overrides)
    return data


def test_create_list_update_delete_cycle():
    row = store.create_transaction(TransactionCreate(**_payload(note="first")))
    assert row.id is not None
    assert row.amount == Decimal("9.99")

    updated = store.update_transaction(row.id, TransactionUpdate(**_payload(amount="1", category="Rent")))
    assert updated.id == row.id
    assert updated.category == "Rent"
    assert updated.note is None

    rows = store.list_transactions()
    assert [(r.id, r.amount) for r in rows] == [(row.id, Decimal("1.00"))]

    assert store.delete_transaction(row.id) is True
    assert store.delete_transaction(row.id) is False
    assert store.list_transactions() == []


def test_update_missing_returns_none():
    assert store.update_transaction(424242, TransactionUpdate(**_payload())) is None


def test_create_many_and_wipe_count():
    assert store.create_many([]) == 0
    items = [TransactionCreate(**_payload(date=f"2024-03-0{i}")) for i in range(1, 4)]
    assert store.create_many(items) == 3
    assert [r.date for r in store.list_transactions()] == ["2024-03-03", "2024-03-02", "2024-03-01"]
    assert store.delete_all_transactions() == 3


def test_legacy_table_gets_note_column():
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE transactions (id INTEGER PRIMARY KEY AUTOINCREMENT, type TEXT NOT NULL, "
            "amount REAL NOT NULL, category TEXT NOT NULL, date TEXT NOT NULL)"
        )
        _ensure_columns(conn, "transactions", {"note": "TEXT"})
        _ensure_columns(conn, "transactions", {"note": "TEXT"})  # idempotent
        cols = [r[1] for r in conn.exec_driver_sql("PRAGMA table_info('transactions')").fetchall()]
    assert cols[-1] == "note"
    assert cols.count("note") == 1


def test_month_pdf_renders():
    rows = [TransactionCreate(**_payload(note="<b>tags</b> & more"))]
    report = monthly_report(rows)[0]
    pdf = build_month_pdf(report, rows)
    assert pdf.startswith(b"%PDF")
