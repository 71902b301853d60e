"""Tests for CSV and Excel export."""

from datetime import date, datetime

import pandas as pd

from services.export_service import COLUMNS, ExportService
from tests.helpers import make_expense


def sample_records():
    return [
        make_expense(50, "Food", date(2025, 10, 20), description="lunch",
                     created_at=datetime(2025, 10, 20, 13, 5, 0)),
        make_expense(20, None, date(2025, 10, 21)),
        {"amount": "oops", "category": "Legacy", "date": "never"},
    ]


def test_csv_export():
    df = pd.read_csv(ExportService().export_csv(sample_records()), encoding="utf-8-sig", keep_default_na=False)
    assert list(df.columns) == COLUMNS
    assert df["Date"].tolist() == ["2025-10-20", "2025-10-21", ""]
    assert df["Category"].tolist() == ["Food", "Uncategorized", "Legacy"]
    assert df["Amount"].tolist() == [50.0, 20.0, 0.0]
    assert df["Created At"].tolist()[0] == "2025-10-20 13:05:00"


def test_csv_export_empty():
    df = pd.read_csv(ExportService().export_csv([]), encoding="utf-8-sig")
    assert list(df.columns) == COLUMNS
    assert df.empty


def test_excel_export_has_summary_sheet():
    sheets = pd.read_excel(ExportService().export_excel(sample_records()), sheet_name=None)
    assert list(sheets) == ["Expenses", "Summary"]
    assert len(sheets["Expenses"]) == 3
    summary = dict(zip(sheets["Summary"]["Category"], sheets["Summary"]["Total"]))
    assert summary == {"Food": 50, "Uncategorized": 20}


def test_excel_export_empty_has_no_summary():
    sheets = pd.read_excel(ExportService().export_excel([]), sheet_name=None)
    assert list(sheets) == ["Expenses"]
