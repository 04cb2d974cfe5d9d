import csv
import io
from decimal import Decimal

from spendwise.csv_export import EXPORT_HEADER, build_month_csv, export_filename
from spendwise.csv_normalizer import parse_csv
from spendwise.schemas import TransactionCreate, TxType


def test_parse_csv_valid_rows_and_errors():
    data = (
        "date , TYPE,Category,amount,note\n"
        "2024-03-01,expense,Food,10.456,lunch\n"
        "2024-03-02,revenue,Salary,,\n"
        "2024-03-03,expense,,5,\n"
    ).encode("utf-8")
    valid, errors = parse_csv(data)

    assert len(valid) == 1
    assert valid[0].type == TxType.EXPENSE
    assert valid[0].amount == Decimal("10.46")
    assert valid[0].note == "lunch"

    assert [e["row_number"] for e in errors] == [3, 4]
    assert errors[0]["raw_row"]["category"] == "Salary"


def test_parse_csv_missing_columns():
    valid, errors = parse_csv(b"date,type,amount\n2024-01-01,expense,3\n")
    assert valid == []
    assert errors[0]["row_number"] == 0
    assert "category" in errors[0]["error"]


def test_parse_csv_no_header():
    valid, errors = parse_csv(b"")
    assert valid == []
    assert errors == [{"row_number": 0, "error": "CSV has no header", "raw_row": None}]


def test_parse_csv_tolerates_bom_and_extra_columns():
    data = "\ufeffDate,Type,Category,Amount,Note,Source\n2024-03-01,expense,Food,1,,bank\n".encode("utf-8")
    valid, errors = parse_csv(data)
    assert errors == []
    assert valid[0].note is None


def test_build_month_csv_quotes_fields():
    rows = [
        TransactionCreate(type="expense", amount="3", category="Food", date="2024-03-01", note='coffee, "large"'),
        TransactionCreate(type="revenue", amount="8.1", category="Gift", date="2024-03-02"),
    ]
    out = build_month_csv(rows).decode("utf-8")
    parsed = list(csv.reader(io.StringIO(out)))
    assert parsed[0] == EXPORT_HEADER
    assert parsed[1] == ["2024-03-01", "expense", "Food", "3.00", 'coffee, "large"']
    assert parsed[2] == ["2024-03-02", "revenue", "Gift", "8.10", ""]


def test_export_filename():
    assert export_filename("2024-03") == "SpendWise_Report_2024-03.csv"
    assert export_filename("2024-03", "pdf") == "SpendWise_Report_2024-03.pdf"
