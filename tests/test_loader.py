"""Tests for the CSV/Excel upload loaders."""

import io

import pandas as pd
import pytest

from models.schemas import ErrorType
from services.loader import (
    LoaderError,
    clean_dataframe,
    detect_delimiter,
    detect_header_row,
    parse_upload,
    unique_column_names,
    validate_upload,
)
from services.thresholds import UploadLimits


SALES_CSV = b"Month,Sales,Expenses\nJan,1200,800\nFeb,1500,900\nMar,1800,950\n"


def error_of(callable_, *args, **kwargs):
    with pytest.raises(LoaderError) as exc_info:
        callable_(*args, **kwargs)
    return exc_info.value.error


# === File Checks ===

def test_validate_upload_returns_extension():
    assert validate_upload("Sales.CSV", 100) == ".csv"
    assert validate_upload("book.xlsx", 100) == ".xlsx"


def test_validate_upload_rejections():
    assert error_of(validate_upload, "", 100).type == ErrorType.EMPTY_FILE
    assert error_of(validate_upload, "a.csv", 0).type == ErrorType.EMPTY_FILE
    assert error_of(validate_upload, "a.csv", 5).type == ErrorType.EMPTY_FILE
    assert error_of(validate_upload, "a.pdf", 100).type == ErrorType.FILE_TYPE
    assert error_of(validate_upload, "../a.csv", 100).type == ErrorType.FILE_TYPE
    assert error_of(validate_upload, "x" * 300 + ".csv", 100).type == ErrorType.FILE_TYPE

    too_big = error_of(validate_upload, "a.csv", 2048, UploadLimits(max_file_size=1024))
    assert too_big.type == ErrorType.FILE_SIZE
    assert too_big.action == "reduce-file-size"


# === CSV ===

def test_detect_delimiter():
    assert detect_delimiter("a;b;c\n1;2;3") == ";"
    assert detect_delimiter("a\tb\tc\n1\t2\t3") == "\t"
    assert detect_delimiter('"x;y;z",b,c\n1,2,3') == ","
    assert detect_delimiter("single") == ","


def test_parse_csv():
    parsed = parse_upload(SALES_CSV, "sales.csv")

    assert parsed.meta.columns == ["Month", "Sales", "Expenses"]
    assert parsed.meta.row_count == 3
    assert parsed.meta.delimiter == ","
    assert parsed.meta.sheet_name is None
    assert parsed.rows[0]["Month"] == "Jan"
    assert parsed.rows[2]["Sales"] == 1800
    assert parsed.warnings == []
    assert parsed.meta.header_row == 0


def test_parse_semicolon_csv_with_missing_cells():
    content = b"city;temp;rain\nOslo;4;\nRome;18;2\nLima;;1\n"
    parsed = parse_upload(content, "weather.csv")

    assert parsed.meta.delimiter == ";"
    assert parsed.rows[0]["rain"] is None
    assert parsed.rows[2]["temp"] is None


def test_parse_latin1_csv():
    content = "name,score\nJosé,10\nZoë,12\n".encode("latin-1")
    parsed = parse_upload(content, "scores.csv")

    assert parsed.rows[0]["name"] == "José"


def test_header_only_csv_is_empty():
    error = error_of(parse_upload, b"Month,Sales,Expenses\n", "blank.csv")

    assert error.type == ErrorType.EMPTY_FILE
    assert "blank.csv" in error.message


def test_row_limit():
    error = error_of(parse_upload, SALES_CSV, "sales.csv", UploadLimits(max_rows=2))

    assert error.type == ErrorType.FILE_SIZE
    assert "too many rows" in error.message


def test_identical_rows_warning():
    parsed = parse_upload(b"a,b\n1,2\n1,2\n1,2\n", "same.csv")

    assert len(parsed.warnings) == 1
    assert "identical" in parsed.warnings[0]


def test_clean_dataframe_drops_empty_rows_and_columns():
    df = pd.DataFrame({"a": [1, None, 3], "b": [None, None, None], " c ": ["x", None, "z"]})
    cleaned, header_promoted = clean_dataframe(df)

    assert list(cleaned.columns) == ["a", "c"]
    assert len(cleaned) == 2
    assert header_promoted is False


def test_placeholder_headers_are_replaced_by_first_text_row():
    df = pd.DataFrame(
        [["Region", "Sales"], ["North", 10], ["South", 12]],
        columns=["Unnamed: 0", "Unnamed: 1"],
    )
    cleaned, header_promoted = clean_dataframe(df)

    assert header_promoted is True
    assert list(cleaned.columns) == ["Region", "Sales"]
    assert cleaned.iloc[0].tolist() == ["North", 10]


def test_unique_column_names():
    assert unique_column_names([" a ", "a", None, "", "a"]) == ["a", "a_2", "Column_3", "Column_4", "a_3"]


def test_csv_header_row_promotion_is_reported():
    content = b",\nRegion,Sales\nNorth,10\nSouth,12\n"
    parsed = parse_upload(content, "offset.csv")

    assert parsed.meta.columns == ["Region", "Sales"]
    assert parsed.meta.header_row == 1
    assert parsed.rows[0]["Region"] == "North"
    assert "row 2" in parsed.warnings[0]


def test_detect_header_row_skips_titles():
    grid = pd.DataFrame(
        [["Sales report", None, None], ["Region", "Q1", "Q2"], ["North", 1, 2]]
    )

    assert detect_header_row(grid) == 1
    assert detect_header_row(pd.DataFrame([[1, 2], [3, 4]])) == 0


# === Excel ===

def test_parse_excel_picks_largest_sheet_and_header_row():
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame({"note": ["tiny"]}).to_excel(writer, sheet_name="Notes", index=False)
        report = pd.DataFrame(
            [["Quarterly report", None, None], ["Region", "Q1", "Q2"],
             ["North", 10, 12], ["South", 7, 9], ["East", 4, 6]]
        )
        report.to_excel(writer, sheet_name="Data", index=False, header=False)

    parsed = parse_upload(buffer.getvalue(), "report.xlsx")

    assert parsed.meta.sheet_name == "Data"
    assert parsed.meta.columns == ["Region", "Q1", "Q2"]
    assert parsed.meta.row_count == 3
    assert parsed.rows[0] == {"Region": "North", "Q1": 10, "Q2": 12}
    assert parsed.meta.header_row == 1
    assert parsed.warnings == ['Column headers in "report.xlsx" were read from row 2.']


def test_corrupt_excel_is_parse_error():
    error = error_of(parse_upload, b"this is not a workbook at all", "broken.xlsx")

    assert error.type == ErrorType.PARSE_ERROR
