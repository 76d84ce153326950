"""
File loaders for CSV and Excel uploads.

Turns uploaded bytes into rows (column name -> scalar) plus parser metadata.
Numbers may still arrive as strings; the column classifier coerces them.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from models.schemas import ChartError, ErrorType, ParsedFileMeta
from services.errors import create_file_error
from services.thresholds import DEFAULT_UPLOAD_LIMITS, UploadLimits

logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xls"}
MAX_FILENAME_LENGTH = 255
MIN_FILE_SIZE = 10
DELIMITER_CANDIDATES = [",", ";", "\t", "|"]
DELIMITER_SAMPLE_BYTES = 1024
CSV_ENCODINGS = ["utf-8", "latin-1", "cp1252"]
HEADER_SCAN_ROWS = 10
HEADER_TEXT_RATIO = 0.7  # Share of text cells in a header row


class LoaderError(Exception):
    """Raised when an upload cannot be turned into rows."""

    def __init__(self, error: ChartError):
        super().__init__(error.message)
        self.error = error


@dataclass
class ParsedFile:
    """Rows plus metadata produced by a loader."""
    rows: List[Dict[str, Any]]
    meta: ParsedFileMeta
    warnings: List[str] = field(default_factory=list)


def _fail(message: str, filename: str, error_type: ErrorType) -> LoaderError:
    return LoaderError(create_file_error(message, filename, error_type))


# === File Checks ===

def validate_upload(filename: str, size: int, limits: UploadLimits = DEFAULT_UPLOAD_LIMITS) -> str:
    """
    Check filename and size before parsing.

    Returns the lower-cased extension.
    """
    if not filename:
        raise _fail("No file provided", "file", ErrorType.EMPTY_FILE)

    if size > limits.max_file_size:
        raise _fail(
            f'File "{filename}" is too large ({size / 1024 / 1024:.1f}MB). '
            f"Maximum size is {limits.max_file_size / 1024 / 1024:g}MB.",
            filename,
            ErrorType.FILE_SIZE,
        )

    if size == 0:
        raise _fail(f'File "{filename}" appears to be empty (0 bytes).', filename, ErrorType.EMPTY_FILE)

    if size < MIN_FILE_SIZE:
        raise _fail(
            f'File "{filename}" is too small to contain valid data ({size} bytes).',
            filename,
            ErrorType.EMPTY_FILE,
        )

    extension = Path(filename).suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise _fail(
            f'File "{filename}" is not a supported file type. '
            f"Allowed: {', '.join(sorted(SUPPORTED_EXTENSIONS))}",
            filename,
            ErrorType.FILE_TYPE,
        )

    if len(filename) > MAX_FILENAME_LENGTH:
        raise _fail(f'Filename "{filename}" is too long (over 255 characters).', filename, ErrorType.FILE_TYPE)

    if ".." in filename or "/" in filename or "\\" in filename:
        raise _fail(f'Filename "{filename}" contains invalid characters.', filename, ErrorType.FILE_TYPE)

    return extension


# === DataFrame Cleaning ===

def unique_column_names(names: List[Any]) -> List[str]:
    """
    Stripped, non-empty, unique column names.

    Blank headers become Column_<n> and repeats get a numeric suffix, since
    rows are dicts and a repeated name would drop a column.
    """
    result: List[str] = []
    used = set()
    for position, name in enumerate(names, start=1):
        text = str(name).strip() if pd.notna(name) else ""
        base = text or f"Column_{position}"
        candidate, suffix = base, 2
        while candidate in used:
            candidate = f"{base}_{suffix}"
            suffix += 1
        used.add(candidate)
        result.append(candidate)
    return result


def clean_dataframe(df: pd.DataFrame) -> Tuple[pd.DataFrame, bool]:
    """
    Drop blank rows and columns and name every column.

    When most headers are pandas "Unnamed" placeholders and the first data
    row is all text, that row becomes the header.

    Returns (dataframe, header_promoted).
    """
    df = df.dropna(how="all").dropna(how="all", axis=1)
    if df.empty:
        return df.reset_index(drop=True), False

    names = list(df.columns)
    placeholders = sum(1 for name in names if str(name).startswith("Unnamed"))
    first_row = df.iloc[0]
    header_promoted = placeholders * 2 > len(names) and all(isinstance(v, str) for v in first_row)
    if header_promoted:
        names = list(first_row)
        df = df.iloc[1:]

    df = df.reset_index(drop=True)
    df.columns = unique_column_names(names)
    return df, header_promoted


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert to row dicts with missing cells as None."""
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


@dataclass
class LoadedTable:
    """A cleaned table and where its headers came from."""
    frame: pd.DataFrame
    header_row: int
    delimiter: Optional[str] = None
    sheet_name: Optional[str] = None


def _cleaned_table(raw: pd.DataFrame, header_row: int, **source: Any) -> LoadedTable:
    frame, header_promoted = clean_dataframe(raw)
    return LoadedTable(frame=frame, header_row=header_row + int(header_promoted), **source)


# === CSV ===

def detect_delimiter(sample_text: str) -> str:
    """
    Pick the most frequent delimiter outside quoted runs.

    Falls back to a comma unless the winner appears at least twice.
    """
    clean_text = re.sub(r'"[^"]*"', "", sample_text)

    best_delimiter = ","
    highest_count = 0
    for delimiter in DELIMITER_CANDIDATES:
        count = clean_text.count(delimiter)
        if count > highest_count:
            highest_count = count
            best_delimiter = delimiter

    return best_delimiter if highest_count >= 2 else ","


def _decode(content: bytes) -> str:
    for encoding in CSV_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError("Could not decode CSV file with supported encodings")


def load_csv(content: bytes, filename: str) -> LoadedTable:
    """Parse CSV bytes with a sniffed delimiter; headers come from the first line."""
    text = _decode(content)
    delimiter = detect_delimiter(text[:DELIMITER_SAMPLE_BYTES])

    try:
        raw = pd.read_csv(io.StringIO(text), sep=delimiter, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise _fail(f'No data found in "{filename}". File may be empty.', filename, ErrorType.EMPTY_FILE)
    except pd.errors.ParserError as e:
        raise _fail(f"CSV parsing failed: {e}", filename, ErrorType.PARSE_ERROR)

    return _cleaned_table(raw, 0, delimiter=delimiter)


# === Excel ===

def find_best_sheet(xl: pd.ExcelFile) -> Tuple[str, pd.DataFrame]:
    """
    The sheet with the most filled cells, read without headers.

    Earlier sheets win ties.
    """
    sheets = pd.read_excel(xl, sheet_name=None, header=None)
    filled = {name: int(df.notna().to_numpy().sum()) for name, df in sheets.items()}

    best = max(filled, key=filled.get, default=None)
    if best is None or filled[best] == 0:
        raise ValueError("No valid data found in any sheet")
    return str(best), sheets[best]


def _looks_like_header(row: pd.Series) -> bool:
    cells = row.dropna()
    if len(cells) == 0 or len(cells) * 2 < len(row):
        return False
    text_cells = sum(1 for value in cells if isinstance(value, str))
    return text_cells >= HEADER_TEXT_RATIO * len(cells) and cells.is_unique


def detect_header_row(df: pd.DataFrame) -> int:
    """
    Index of the first leading row that reads as a header: at least half
    filled, mostly text, no repeated labels. Title rows above it are skipped.
    Defaults to 0.
    """
    for index in range(min(HEADER_SCAN_ROWS, len(df))):
        if _looks_like_header(df.iloc[index]):
            return index
    return 0


def load_excel(content: bytes, filename: str) -> LoadedTable:
    """Parse the fullest sheet of an Excel workbook."""
    # Unreadable workbooks raise here and surface as parse errors
    xl = pd.ExcelFile(io.BytesIO(content))
    try:
        sheet_name, grid = find_best_sheet(xl)
    except ValueError as e:
        raise _fail(f'No data found in "{filename}": {e}', filename, ErrorType.EMPTY_FILE)

    header_row = detect_header_row(grid)
    raw = pd.read_excel(xl, sheet_name=sheet_name, header=header_row)
    return _cleaned_table(raw, header_row, sheet_name=sheet_name)


# === Entry Point ===

def parse_upload(
    content: bytes,
    filename: str,
    limits: UploadLimits = DEFAULT_UPLOAD_LIMITS,
) -> ParsedFile:
    """
    Parse an uploaded CSV or Excel file into rows and metadata.

    Raises:
        LoaderError: with a categorized error payload
    """
    extension = validate_upload(filename, len(content), limits)

    try:
        table = load_csv(content, filename) if extension == ".csv" else load_excel(content, filename)
    except LoaderError:
        raise
    except ValueError as e:
        raise _fail(str(e), filename, ErrorType.PARSE_ERROR)
    except Exception as e:
        logger.exception(f"Unexpected failure parsing {filename}")
        raise _fail(f"Error processing file: {e}", filename, ErrorType.PARSE_ERROR)

    df = table.frame
    if df.empty:
        raise _fail(
            f'No data found in "{filename}". File may be empty, contain only headers, '
            "or all rows may be invalid.",
            filename,
            ErrorType.EMPTY_FILE,
        )

    if len(df) > limits.max_rows:
        raise _fail(
            f'File "{filename}" has too many rows ({len(df)}). Maximum is {limits.max_rows} rows.',
            filename,
            ErrorType.FILE_SIZE,
        )

    rows = dataframe_to_rows(df)
    columns = list(df.columns)

    warnings: List[str] = []
    if table.header_row > 0:
        warnings.append(f'Column headers in "{filename}" were read from row {table.header_row + 1}.')
    if len(rows) > 1 and df.duplicated(keep=False).all():
        warnings.append(f'All rows in "{filename}" appear to be identical.')
    for warning in warnings:
        logger.warning(warning)

    logger.info(f"Parsed {filename}: {len(rows)} rows, {len(columns)} columns")

    return ParsedFile(
        rows=rows,
        meta=ParsedFileMeta(
            filename=filename,
            file_size=len(content),
            row_count=len(rows),
            column_count=len(columns),
            columns=columns,
            header_row=table.header_row,
            delimiter=table.delimiter,
            sheet_name=table.sheet_name,
        ),
        warnings=warnings,
    )
