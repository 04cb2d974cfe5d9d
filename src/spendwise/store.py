# store.py
"""
Ledger persistence: one SQL statement per operation.

Every function opens its own session (see db.db_session), so callers never
hold a session across requests. Returned rows are detached but fully loaded.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select, update

from .db import db_session
from .models import TransactionRow
from .schemas import TransactionCreate, TransactionUpdate


def _row_values(data: TransactionCreate | TransactionUpdate) -> dict:
    return {
        "type": data.type.value,
        "amount": data.amount,
        "category": data.category,
        "date": data.date,
        "note": data.note,
    }


def list_transactions() -> List[TransactionRow]:
    """All entries, newest date first (ties: newest id first)."""
    with db_session() as session:
        stmt = select(TransactionRow).order_by(TransactionRow.date.desc(), TransactionRow.id.desc())
        return list(session.scalars(stmt).all())


def create_transaction(data: TransactionCreate) -> TransactionRow:
    with db_session() as session:
        row = TransactionRow(**_row_values(data))
        session.add(row)
        session.flush()  # assigns the autoincrement id
        return row


def create_many(items: List[TransactionCreate]) -> int:
    """Bulk insert used by the CSV import; returns the number of rows added."""
    if not items:
        return 0
    with db_session() as session:
        session.add_all([TransactionRow(**_row_values(item)) for item in items])
    return len(items)


def update_transaction(tx_id: int, data: TransactionUpdate) -> Optional[TransactionRow]:
    """
    Replace every field of entry `tx_id`.
    Returns the updated row, or None when no entry has that id.
    """
    values = _row_values(data)
    with db_session() as session:
        stmt = (
            update(TransactionRow)
            .where(TransactionRow.id == tx_id)
            .values(**values)
            .returning(TransactionRow)
        )
        return session.scalars(stmt).first()


def delete_transaction(tx_id: int) -> bool:
    """Delete one entry; False when no entry has that id."""
    with db_session() as session:
        result = session.execute(
            delete(TransactionRow)
            .where(TransactionRow.id == tx_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0


def delete_all_transactions() -> int:
    """Wipe the ledger; returns the number of deleted entries."""
    with db_session() as session:
        result = session.execute(delete(TransactionRow).execution_options(synchronize_session=False))
        return result.rowcount
