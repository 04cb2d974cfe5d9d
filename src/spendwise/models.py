from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import Integer, String, Text, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import Numeric, TypeDecorator

# ---------- Base ----------
class Base(DeclarativeBase):
    pass

# ---------- Decimal helper (fixed 2 dp, currency) ----------
class SqliteDecimal(TypeDecorator):
    impl = Numeric(12, 2, asdecimal=True)
    cache_ok = True
    SCALE = Decimal("0.01")
    def process_bind_param(self, value, dialect):
        if value is None: return None
        return Decimal(str(value)).quantize(self.SCALE, rounding=ROUND_HALF_UP)
    def process_result_value(self, value, dialect):
        if value is None: return None
        return Decimal(str(value)).quantize(self.SCALE, rounding=ROUND_HALF_UP)

# ---------- ORM models ----------
class Transaction(Base):
    __tablename__ = "transactions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 'expense' or 'revenue'; kept as String to avoid Enum friction with CSV imports
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    amount: Mapped[Decimal] = mapped_column(SqliteDecimal, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    # ISO calendar date (YYYY-MM-DD) stored as text; month grouping slices it
    date: Mapped[str] = mapped_column(String, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

Index("idx_transactions_date", Transaction.date)

# Alias used by the store and app
TransactionRow = Transaction
