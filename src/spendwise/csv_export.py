# csv_export.py
import csv
import io
from typing import Any, Iterable

from .schemas import money_str

EXPORT_HEADER = ["Date", "Type", "Category", "Amount", "Note"]


def export_filename(month: str, ext: str = "csv") -> str:
    return f"SpendWise_Report_{month}.{ext}"


def build_month_csv(transactions: Iterable[Any]) -> bytes:
    """
    One row per entry, in the given order, under EXPORT_HEADER.
    The caller picks the month (see reports.month_transactions).
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for tx in transactions:
        t = getattr(tx.type, "value", tx.type)
        writer.writerow([tx.date, t, tx.category, money_str(tx.amount), tx.note or ""])
    return buf.getvalue().encode("utf-8")
