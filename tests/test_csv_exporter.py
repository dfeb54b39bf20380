import csv
import datetime
import io

from marine_ops.exporters.csv_exporter import (
    escape_field,
    format_value,
    generate_csv,
    make_export_filename,
    sanitize_scope,
)


def test_quotes_fields_with_commas_and_blanks_none():
    assert generate_csv([{"a": "x,y", "b": None}]) == 'a,b\n"x,y",'


def test_embedded_quotes_are_doubled():
    assert escape_field('say "hi"') == '"say ""hi"""'


def test_newlines_are_quoted():
    assert generate_csv([{"note": "line1\nline2"}]) == 'note\n"line1\nline2"'


def test_output_parses_back_with_csv_reader():
    tricky = 'Hull, "bow" side\nsecond line'
    rows = [
        {"description": tricky, "notes": None, "progress": 40},
        {"description": "Painting", "notes": "ok", "progress": 0},
    ]

    parsed = list(csv.reader(io.StringIO(generate_csv(rows))))

    assert parsed == [
        ["description", "notes", "progress"],
        [tricky, "", "40"],
        ["Painting", "ok", "0"],
    ]


def test_empty_rows_give_empty_string():
    assert generate_csv([]) == ""


def test_header_follows_first_row_and_no_trailing_newline():
    csv_text = generate_csv([{"b": 1, "a": 2}, {"a": 4, "b": 3}])
    assert csv_text == "b,a\n1,2\n3,4"


def test_value_formatting():
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(datetime.date(2026, 3, 5)) == "2026-03-05"
    assert format_value(40) == "40"


def test_sanitize_scope():
    assert sanitize_scope("KM Bahari-01", "vessel_1") == "KM_Bahari_01"
    assert sanitize_scope("", "vessel_1") == "vessel_1"
    assert sanitize_scope(None, "vessel_1") == "vessel_1"


def test_filename_suffixes():
    today = datetime.date(2026, 3, 5)
    assert make_export_filename("all_vessels", today) == "vessel_data_all_vessels_2026-03-05.csv"
    assert make_export_filename("2_vessels", today, True) == "vessel_data_2_vessels_2026-03-05_full.csv"
    assert (
        make_export_filename("Sea_Star", today, False)
        == "vessel_data_Sea_Star_2026-03-05_operational.csv"
    )
