import datetime
import io
from decimal import Decimal

import pandas as pd
import pytest

from marine_ops.parsers import EntityParser


def test_csv_invoice_row_conversion():
    raw = (
        b"work_order_id,invoice_number,payment_price,payment_status,due_date,remarks\n"
        b'1,INV-9,"Rp 1,250,000.50",paid,2026-04-30,\n'
        b"2,INV-10,,,,\n"
    )

    result = EntityParser(raw, "invoice_details", "invoices.csv").parse()

    assert result.ok
    assert result.format_name == "CSV"
    first, second = result.records
    assert first["payment_price"] == Decimal("1250000.50")
    assert first["payment_status"] is True
    assert first["due_date"] == datetime.date(2026, 4, 30)
    assert first["remarks"] is None
    # Blank flag keeps the model default
    assert "payment_status" not in second
    assert second["payment_price"] is None


def test_xlsx_upload():
    buffer = io.BytesIO()
    pd.DataFrame(
        {"work_order_id": [3], "description": ["Propeller polishing"], "planned_start_date": ["2026-05-02"]}
    ).to_excel(buffer, index=False, engine="openpyxl")

    result = EntityParser(buffer.getvalue(), "work_details", "details.xlsx").parse()

    assert result.ok
    assert result.format_name == "XLSX"
    assert result.records == [
        {"work_order_id": 3, "description": "Propeller polishing", "planned_start_date": datetime.date(2026, 5, 2)}
    ]


def test_required_cell_and_bad_values_are_reported_per_row():
    raw = b"work_details_id,progress_percentage,report_date\n1,abc,2026-03-01\n,10,2026-03-02\n\n"

    result = EntityParser(raw, "work_progress").parse()

    assert not result.ok
    assert result.records == []
    assert result.errors == [
        "Row 2: 'progress_percentage' 'abc' is not a number",
        "Row 3: 'work_details_id' is required",
    ]


def test_unreadable_workbook():
    result = EntityParser(b"not a workbook", "vessels", "fleet.xlsx").parse()
    assert not result.ok
    assert result.errors[0].startswith("Failed to read 'fleet.xlsx'")


def test_unknown_entity():
    with pytest.raises(ValueError):
        EntityParser(b"name\nx\n", "profiles")
