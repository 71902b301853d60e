"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of a user's expense list.
"""

import io
from datetime import datetime
from typing import Any, Sequence

import pandas as pd

from analytics.aggregator import category_of, category_totals, coerce_amount
from analytics.dates import expense_date, record_field
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["Date", "Category", "Amount", "Description", "Created At"]


def _format_created(created: Any) -> str:
    if isinstance(created, datetime):
        return created.isoformat(sep=" ", timespec="seconds")
    return str(created) if created else ""


def _rows(records: Sequence[Any]) -> list[dict]:
    rows = []
    for record in records:
        d = expense_date(record)
        created = record_field(record, "created_at")
        rows.append({
            "Date": d.isoformat() if d else "",
            "Category": category_of(record),
            "Amount": coerce_amount(record_field(record, "amount")),
            "Description": record_field(record, "description") or "",
            "Created At": _format_created(created),
        })
    return rows


class ExportService:
    """Builds downloadable expense lists in CSV and Excel formats."""

    def export_csv(self, records: Sequence[Any]) -> io.BytesIO:
        """
        Export records as a CSV file.

        Returns:
            A BytesIO buffer containing UTF-8 (with BOM) CSV data.
        """
        df = pd.DataFrame(_rows(records), columns=COLUMNS)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} records as CSV")
        return buffer

    def export_excel(self, records: Sequence[Any]) -> io.BytesIO:
        """
        Export records as an Excel (.xlsx) workbook.

        The first sheet lists the expenses; a "Summary" sheet holds the
        per-category totals when there is anything to summarize.
        """
        df = pd.DataFrame(_rows(records), columns=COLUMNS)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Expenses", index=False)

            totals = category_totals(records)
            if totals:
                summary = pd.DataFrame(list(totals.items()), columns=["Category", "Total"])
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} records as Excel")
        return buffer
