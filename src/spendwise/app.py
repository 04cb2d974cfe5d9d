# app.py
"""
Main FastAPI application.

This file wires together:
- the web server (FastAPI + Uvicorn)
- the ledger store (one SQL statement per mutation)
- derived reports (totals, categories, months) computed per request
- CSV/PDF export and CSV import
- the static browser client served at /

Endpoints:
  GET    /api/transactions                  → full ledger, newest first
  POST   /api/transactions                  → create an entry
  PUT    /api/transactions/{id}             → replace an entry
  DELETE /api/transactions/{id}             → delete one entry
  DELETE /api/transactions                  → wipe the ledger
  GET    /api/categories                    → suggested categories per type
  GET    /api/summary                       → totals + expense by category
  GET    /api/reports/monthly               → per-month reports
  GET    /api/reports/{month}/export.csv    → month entries as CSV
  GET    /api/reports/{month}/export.pdf    → month report as PDF
  POST   /api/import/csv/preview            → parse CSV, no writes
  POST   /api/import/csv                    → parse CSV and save valid rows
  GET    /health, /version

  Command to start the server: python -m spendwise
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, File, HTTPException, Path as PathParam, Query, Request, Response, UploadFile
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from . import store
from .__about__ import __title__, __version__
from .categories import CATEGORIES
from .config import LOG_LEVEL
from .csv_export import build_month_csv, export_filename
from .csv_normalizer import parse_csv
from .db import init_db
from .report_pdf import build_month_pdf
from .reports import month_label, month_transactions, monthly_report, summarize
from .schemas import (
    CSVPreviewResponse,
    DeleteResponse,
    ImportCSVResponse,
    MonthReport,
    Summary,
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    TxType,
    WipeResponse,
)

logging.basicConfig(level=LOG_LEVEL)
LOGGER = logging.getLogger("spendwise")

STATIC_DIR = Path(__file__).resolve().parent / "static"
MONTH_PATTERN = r"^\d{4}-\d{2}$"

init_db()

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _internal_error(what: str, exc: Exception) -> HTTPException:
    LOGGER.exception("%s failed: %s", what, exc)
    return HTTPException(status_code=500, detail="Internal server error")


def _load_ledger() -> List[TransactionRead]:
    try:
        rows = store.list_transactions()
    except SQLAlchemyError as exc:
        raise _internal_error("Ledger read", exc)
    try:
        return [TransactionRead.model_validate(r) for r in rows]
    except ValidationError as exc:
        # a stored row the read schema cannot represent (e.g. unknown type)
        raise _internal_error("Ledger read", exc)


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Transaction not found")


async def _read_csv_upload(file: UploadFile) -> bytes:
    filename = file.filename or ""
    if not filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Please upload a .csv file")
    data = await file.read()
    if len(data) == 0:
        raise HTTPException(status_code=400, detail="Empty file")
    return data


def _parse_upload(data: bytes) -> Tuple[List[TransactionCreate], List[Dict[str, Any]]]:
    try:
        return parse_csv(data)
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")

# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------
app = FastAPI(
    title=__title__,
    version=__version__,
    description="Personal finance tracker: record income and expenses, see totals and monthly reports.",
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    LOGGER.info("Request: %s %s", request.method, request.url)
    try:
        response = await call_next(request)
        LOGGER.info("Response: %s", response.status_code)
        return response
    except Exception as e:
        LOGGER.error("Request failed: %s", e)
        raise

# -----------------------------------------------------------------------------
# Health + version endpoints (simple sanity checks)
# -----------------------------------------------------------------------------
@app.get("/health")
def health() -> Dict[str, str]:
    """Quick liveness check for monitoring or manual testing."""
    return {"status": "ok"}


@app.get("/version")
def version() -> Dict[str, str]:
    """Show the backend name and version (useful to confirm deployments)."""
    return {"name": __title__, "version": __version__}

# -----------------------------------------------------------------------------
# Ledger CRUD
# -----------------------------------------------------------------------------
@app.get("/api/transactions", response_model=List[TransactionRead])
def list_transactions() -> List[TransactionRead]:
    """The whole ledger, newest date first. No paging: the client derives everything from it."""
    return _load_ledger()


@app.post("/api/transactions", response_model=TransactionRead)
def create_transaction(payload: TransactionCreate) -> TransactionRead:
    try:
        row = store.create_transaction(payload)
    except SQLAlchemyError as exc:
        raise _internal_error("Create", exc)
    return TransactionRead.model_validate(row)


@app.put("/api/transactions/{tx_id}", response_model=TransactionRead)
def update_transaction(tx_id: int, payload: TransactionUpdate) -> TransactionRead:
    """Replace every field of an entry."""
    try:
        row = store.update_transaction(tx_id, payload)
    except SQLAlchemyError as exc:
        raise _internal_error("Update", exc)
    if row is None:
        raise _not_found()
    return TransactionRead.model_validate(row)


@app.delete("/api/transactions", response_model=WipeResponse)
def delete_all_transactions() -> WipeResponse:
    LOGGER.info("Bulk delete request received")
    try:
        changes = store.delete_all_transactions()
    except SQLAlchemyError as exc:
        raise _internal_error("Bulk delete", exc)
    LOGGER.info("Deleted %d transactions", changes)
    return WipeResponse(success=True, changes=changes)


@app.delete("/api/transactions/{tx_id}", response_model=DeleteResponse)
def delete_transaction(tx_id: int) -> DeleteResponse:
    try:
        deleted = store.delete_transaction(tx_id)
    except SQLAlchemyError as exc:
        raise _internal_error("Delete", exc)
    if not deleted:
        raise _not_found()
    return DeleteResponse(success=True)

# -----------------------------------------------------------------------------
# Derived figures
# -----------------------------------------------------------------------------
@app.get("/api/categories")
def list_categories() -> Dict[str, List[str]]:
    return CATEGORIES


@app.get("/api/summary", response_model=Summary)
def summary() -> Summary:
    """Revenue/expense totals and the expense breakdown by category."""
    return summarize(_load_ledger())


@app.get("/api/reports/monthly", response_model=List[MonthReport])
def reports_monthly() -> List[MonthReport]:
    return monthly_report(_load_ledger())


def _month_scope(month: str, type: Optional[TxType] = None):
    ledger = _load_ledger()
    entries = month_transactions(ledger, month, type=type)
    reports = [r for r in monthly_report(ledger) if r.month == month]
    report = reports[0] if reports else MonthReport(month=month, label=month_label(month))
    return report, entries


@app.get("/api/reports/{month}/export.csv", summary="Download a month's entries as CSV")
def export_month_csv(
    month: str = PathParam(..., pattern=MONTH_PATTERN),
    type: Optional[TxType] = Query(None, description="Only export entries of this type"),
) -> Response:
    _, entries = _month_scope(month, type)
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(month)}"'}
    return Response(content=build_month_csv(entries), media_type="text/csv; charset=utf-8", headers=headers)


@app.get("/api/reports/{month}/export.pdf", summary="Download a month's report as PDF")
def export_month_pdf(month: str = PathParam(..., pattern=MONTH_PATTERN)) -> Response:
    report, entries = _month_scope(month)
    pdf_bytes = build_month_pdf(report, entries)
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(month, "pdf")}"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)

# -----------------------------------------------------------------------------
# CSV import
# -----------------------------------------------------------------------------
@app.post("/api/import/csv/preview", response_model=CSVPreviewResponse)
async def preview_csv(file: UploadFile = File(...)) -> Dict[str, Any]:
    """
    Parse & validate an uploaded CSV and return a PREVIEW (no DB writes).
    """
    data = await _read_csv_upload(file)
    valid_rows, errors = _parse_upload(data)
    return {
        "filename": file.filename or "",
        "total_valid": len(valid_rows),
        "total_errors": len(errors),
        "preview_first_5": valid_rows[:5],
        "errors": errors[:5],
    }


@app.post("/api/import/csv", response_model=ImportCSVResponse)
async def import_csv(file: UploadFile = File(...)) -> Dict[str, Any]:
    """
    Parse & validate an uploaded CSV and SAVE the valid rows.
    Rows with errors are skipped and reported (first five).
    """
    data = await _read_csv_upload(file)
    valid_rows, errors = _parse_upload(data)
    try:
        inserted = store.create_many(valid_rows)
    except SQLAlchemyError as exc:
        raise _internal_error("CSV import", exc)
    LOGGER.info("Imported %d rows from %s (%d skipped)", inserted, file.filename, len(errors))
    return {
        "filename": file.filename or "",
        "inserted": inserted,
        "skipped_errors": len(errors),
        "errors": errors[:5],
    }

# -----------------------------------------------------------------------------
# Browser client
# -----------------------------------------------------------------------------
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")
