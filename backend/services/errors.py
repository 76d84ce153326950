"""
Error taxonomy and user-facing error messaging.

Errors are plain values (ChartError models), never raised across the
validation boundary. Each kind has a human-readable message, a short action
key and, for missing numeric data, a worked example table.

ErrorLog replaces a process-wide error handler: callers that want to collect
errors over several operations create and own one.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from models.schemas import ChartError, DataWarning, ErrorExample, ErrorType

logger = logging.getLogger(__name__)


# === Worked Example ===

NO_NUMERIC_DATA_EXAMPLE = ErrorExample(
    description="Here's an example of data format that works:",
    headers=["Month", "Sales", "Expenses"],
    rows=[
        ["January", 1200, 800],
        ["February", 1500, 900],
        ["March", 1800, 950],
    ],
)


# === Error Factories ===

def create_empty_file_error(message: str, filename: Optional[str] = None) -> ChartError:
    return ChartError(
        type=ErrorType.EMPTY_FILE,
        message=message,
        filename=filename,
        action="check-file-content",
    )


def create_parse_error(
    message: str,
    filename: Optional[str] = None,
    action: str = "check-data-format",
) -> ChartError:
    return ChartError(
        type=ErrorType.PARSE_ERROR,
        message=message,
        filename=filename,
        action=action,
    )


def create_no_numeric_data_error(filename: Optional[str] = None) -> ChartError:
    """No-numeric-data error carrying an example of a chartable table."""
    return ChartError(
        type=ErrorType.NO_NUMERIC_DATA,
        message=(
            f'No numeric data found in "{filename or "file"}". '
            "Charts need at least one column with numbers."
        ),
        filename=filename,
        action="show-example",
        example=NO_NUMERIC_DATA_EXAMPLE.model_copy(deep=True),
    )


FILE_ERROR_ACTIONS: Dict[ErrorType, str] = {
    ErrorType.FILE_SIZE: "reduce-file-size",
    ErrorType.FILE_TYPE: "use-supported-file",
    ErrorType.EMPTY_FILE: "check-file-content",
    ErrorType.PARSE_ERROR: "check-file-format",
}


def create_file_error(
    message: str,
    filename: Optional[str] = None,
    error_type: ErrorType = ErrorType.PARSE_ERROR,
) -> ChartError:
    """Error raised while reading an uploaded file."""
    return ChartError(
        type=error_type,
        message=message,
        filename=filename,
        action=FILE_ERROR_ACTIONS.get(error_type, "check-file-format"),
    )


# === User Friendly Messages ===

def get_user_friendly_error(error: ChartError) -> Dict[str, Any]:
    """Title, message, action and severity suitable for display."""
    filename = error.filename or "file"

    if error.type == ErrorType.FILE_SIZE:
        return {
            "title": "File Too Large",
            "message": f'The file "{filename}" is too large. {error.message}',
            "action": "Try compressing your file or splitting it into smaller parts",
            "severity": "error",
        }
    if error.type == ErrorType.FILE_TYPE:
        return {
            "title": "Unsupported File Type",
            "message": f'"{filename}" is not a supported file type. Please use CSV or Excel (.xlsx) files.',
            "action": "Convert your file to CSV or Excel format and try again",
            "severity": "error",
        }
    if error.type == ErrorType.EMPTY_FILE:
        return {
            "title": "Empty File",
            "message": f'"{filename}" appears to be empty or contains no data rows.',
            "action": "Check your file has data and column headers, then try again",
            "severity": "error",
        }
    if error.type == ErrorType.NO_NUMERIC_DATA:
        return {
            "title": "No Numeric Data Found",
            "message": f"\"{filename}\" doesn't contain any numeric data needed for charts.",
            "action": "Ensure your file has at least one column with numbers",
            "severity": "error",
            "example": error.example,
        }
    return {
        "title": "File Processing Error",
        "message": f'There was a problem reading "{filename}". {error.message}',
        "action": "Try re-saving your file and uploading again",
        "severity": "error",
    }


RECOVERY_SUGGESTIONS: Dict[ErrorType, List[str]] = {
    ErrorType.FILE_SIZE: [
        "Remove unnecessary columns or rows",
        "Split large dataset into smaller files",
        "Export as CSV instead of Excel to reduce file size",
        "Compress or zip the file before uploading",
    ],
    ErrorType.FILE_TYPE: [
        "Save your data as a CSV file (.csv)",
        "Export as Excel format (.xlsx)",
        "Ensure file extension matches the format",
        "Try our sample data to see the expected format",
    ],
    ErrorType.EMPTY_FILE: [
        "Check that your file contains data rows",
        "Ensure the first row has column headers",
        "Verify the file saved correctly from your source application",
        "Try opening the file to confirm it has content",
    ],
    ErrorType.NO_NUMERIC_DATA: [
        "Include at least one column with numeric values",
        "Remove text formatting from number columns",
        "Check that numbers aren't stored as text",
        "See our example data for proper formatting",
    ],
    ErrorType.PARSE_ERROR: [
        "Check that your file isn't corrupted",
        "Try re-saving from the original application",
        "Ensure consistent column formatting",
        "Remove special characters from headers",
    ],
}


def get_recovery_suggestions(error: ChartError) -> List[str]:
    return list(RECOVERY_SUGGESTIONS.get(error.type, RECOVERY_SUGGESTIONS[ErrorType.PARSE_ERROR]))


# === Error Log ===

def _generate_id() -> str:
    return f"err_{uuid.uuid4().hex[:12]}"


class ErrorLog:
    """
    Collects errors and warnings for one caller.

    Entries are stamped with an id and timestamp; the engine itself never
    touches an ErrorLog.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    def _stamp(self, payload: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **payload,
            **context,
            "id": _generate_id(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def add_error(self, error: Union[ChartError, Exception, str], **context: Any) -> Dict[str, Any]:
        """Record an error. Exceptions and strings become parse errors."""
        if isinstance(error, ChartError):
            payload = error.model_dump(mode="json")
        elif isinstance(error, Exception):
            payload = create_parse_error(str(error) or type(error).__name__).model_dump(mode="json")
        else:
            payload = create_parse_error(str(error)).model_dump(mode="json")

        entry = self._stamp(payload, context)
        self.errors.append(entry)
        logger.debug(f"Error recorded: {entry['type']} - {entry['message']}")
        return entry

    def add_warning(self, warning: Union[DataWarning, str], **context: Any) -> Dict[str, Any]:
        if isinstance(warning, DataWarning):
            payload = warning.model_dump(mode="json")
        else:
            payload = {"type": "general", "message": str(warning), "severity": "medium"}

        entry = self._stamp(payload, context)
        self.warnings.append(entry)
        return entry

    def clear(self) -> None:
        self.errors = []
        self.warnings = []

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def latest_error(self) -> Optional[Dict[str, Any]]:
        return self.errors[-1] if self.errors else None

    def export_report(self) -> Dict[str, Any]:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
