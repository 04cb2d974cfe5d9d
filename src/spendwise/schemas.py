from __future__ import annotations

"""
Pydantic schemas (data models) used by the API.
- These define the structure, types, and validation rules for the data we accept/return.
- Pydantic gives clear error messages when data doesn't match the expected schema.

Core ideas:
- Keep schemas separate from database models (ORM) to avoid coupling the API to storage.
- Validation stops at presence: type must be expense/revenue, amount must be a
  number, category and date must be non-empty. Nothing else is enforced.
- Money travels as Decimal and is rendered as a fixed 2 dp string in JSON.
"""


from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from typing import Optional, List, Any, Dict
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from enum import Enum


class TxType(str, Enum):
    EXPENSE = "expense"
    REVENUE = "revenue"


_Q2 = Decimal("0.01")


def money_str(v: Decimal | None) -> str | None:
    """Render a Decimal as a plain 2 dp string ('12.50')."""
    if v is None:
        return None
    return format(Decimal(v).quantize(_Q2, rounding=ROUND_HALF_UP), "f")


class TransactionBase(BaseModel):
    """
    Fields shared by create/update payloads and the stored entry.

    Fields:
      type: 'expense' or 'revenue' (case-insensitive on input).
      amount: currency value; quantized to 2 dp. Sign is not checked.
      category: free text, usually one of the suggested categories.
      date: ISO calendar date 'YYYY-MM-DD'.
      note: optional free text; an empty note is stored as null.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    type: TxType
    amount: Decimal
    category: str
    date: str
    note: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def _quantize_2dp(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("amount is required")
        if isinstance(v, bool):
            raise ValueError(f"invalid amount: {v!r}")
        try:
            d = Decimal(str(v).strip())
        except InvalidOperation:
            raise ValueError(f"invalid amount: {v!r}")
        if not d.is_finite():
            raise ValueError(f"invalid amount: {v!r}")
        return d.quantize(_Q2, rounding=ROUND_HALF_UP)

    @field_validator("note", mode="before")
    @classmethod
    def _empty_note_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer("amount")
    def _amount_to_str(self, v: Decimal) -> str:
        return money_str(v)


class TransactionCreate(TransactionBase):
    """
    Payload for creating an entry.
    Category and date only have to be present (non-blank); length and
    format are not checked.
    """

    category: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1, examples=["2024-03-15"])


class TransactionUpdate(TransactionCreate):
    """
    Payload for updating an entry. Updates replace every field, so all the
    create fields are required here too.
    """

    pass


class TransactionRead(TransactionBase):
    # Built from stored rows: no input constraints on category/date, so rows
    # written by older versions still load.
    model_config = ConfigDict(from_attributes=True)  # enables SQLAlchemy ORM validation

    id: int


class DeleteResponse(BaseModel):
    success: bool = True


class WipeResponse(BaseModel):
    success: bool = True
    changes: int


# ---------- Derived figures ----------

class Totals(BaseModel):
    revenue: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")

    @field_serializer("revenue", "expense", "balance")
    def _dec_to_str(self, v: Decimal) -> str:
        return money_str(v)


class CategoryTotal(BaseModel):
    category: str
    amount: Decimal
    # percentage of all expense in scope, 2 dp
    share: Decimal = Decimal("0")

    @field_serializer("amount", "share")
    def _dec_to_str(self, v: Decimal) -> str:
        return money_str(v)


class Summary(BaseModel):
    totals: Totals
    categories: List[CategoryTotal]


class MonthReport(BaseModel):
    month: str = Field(..., examples=["2024-03"])
    label: str = Field(..., examples=["March 2024"])
    revenue: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    categories: List[CategoryTotal] = Field(default_factory=list)
    top_categories: List[CategoryTotal] = Field(default_factory=list)

    @field_serializer("revenue", "expense", "balance")
    def _dec_to_str(self, v: Decimal) -> str:
        return money_str(v)


# ---------- CSV import ----------

class CSVPreviewResponse(BaseModel):
    """
    API response model for /api/import/csv/preview (no DB writes).
    """

    filename: str
    total_valid: int
    total_errors: int
    preview_first_5: List[TransactionCreate]
    errors: List[Any]


class ImportCSVResponse(BaseModel):
    """
    API response model for /api/import/csv (persists to DB).
    """

    filename: str
    inserted: int
    skipped_errors: int
    errors: List[Dict[str, Any]]
