"""Pydantic models for chart analysis results and API request/response schemas."""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# === Type Definitions ===

PrimaryType = Literal["number", "string", "date", "boolean", "object"]
ChartType = Literal["bar", "line", "pie", "area"]
SamplingMethod = Literal["none", "uniform", "intelligent"]
Severity = Literal["low", "medium", "high"]
WarningType = Literal["missing-data", "mixed-types", "small-dataset", "performance"]


class ErrorType(str, Enum):
    """Error kinds surfaced to the caller."""
    FILE_SIZE = "size"
    FILE_TYPE = "type"
    PARSE_ERROR = "parse"
    EMPTY_FILE = "empty"
    NO_NUMERIC_DATA = "no-numeric"


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Column Analysis Models ===

class TypeAnalysis(CamelModel):
    """Value type distribution within one column."""
    type_counts: Dict[str, int]
    type_percentages: Dict[str, float]
    primary_type: PrimaryType
    is_homogeneous: bool
    is_mixed: bool


class ColumnStats(CamelModel):
    """Descriptive statistics for a numeric column."""
    count: int
    min: float
    max: float
    sum: float
    mean: float
    median: float
    range: float
    has_negatives: bool
    has_decimals: bool
    is_all_positive: bool
    is_all_integers: bool


class ColumnPatterns(CamelModel):
    """Name and distribution based hints about a column."""
    is_time_series_candidate: bool = False
    is_category_candidate: bool = False
    is_percentage_candidate: bool = False
    is_id_candidate: bool = False


class ColumnAnalysis(CamelModel):
    """Complete per-column analysis."""
    name: str
    total_values: int
    non_empty_values: int
    empty_count: int
    empty_percentage: float
    type_analysis: TypeAnalysis
    stats: Optional[ColumnStats] = None
    patterns: ColumnPatterns
    is_chartable: bool
    is_categorical: bool
    unique_values: int
    unique_percentage: float


class ChartCompatibility(CamelModel):
    """Dataset-level gates deciding which chart families are viable."""
    has_numeric_data: bool
    has_categories: bool
    has_dates: bool
    numeric_column_count: int
    categorical_column_count: int
    date_column_count: int
    is_time_series_candidate: bool
    is_pie_chart_candidate: bool
    is_bar_chart_candidate: bool
    is_line_chart_candidate: bool
    total_columns: int
    usable_columns: int
    row_count: int


class ChartSuggestion(CamelModel):
    """A ranked chart recommendation."""
    chart_type: Optional[ChartType]
    confidence: int = Field(ge=0, le=100)
    reason: str
    suitable_columns: Dict[str, List[str]] = Field(default_factory=dict)
    requirements: Optional[str] = None


# === Error & Warning Models ===

class ErrorExample(CamelModel):
    """Worked example attached to errors the user can fix by reformatting data."""
    description: str
    headers: List[str]
    rows: List[List[Any]]


class ChartError(CamelModel):
    """A blocking validation or loading error."""
    type: ErrorType
    message: str
    filename: Optional[str] = None
    action: str
    example: Optional[ErrorExample] = None


class DataWarning(CamelModel):
    """A non-blocking data quality issue."""
    type: WarningType
    message: str
    severity: Severity
    column: Optional[str] = None
    suggestion: Optional[str] = None


# === Result Envelopes ===

class PerformanceInfo(CamelModel):
    """Whether the validation ran on a sample of the dataset."""
    is_large_dataset: bool = False
    requires_optimization: bool = False
    sample_size: int = 0
    original_size: int = 0


class ValidationResult(CamelModel):
    """Result of validating a dataset for charting."""
    is_valid: bool
    errors: List[ChartError] = Field(default_factory=list)
    warnings: List[DataWarning] = Field(default_factory=list)
    suggestions: List[ChartSuggestion] = Field(default_factory=list)
    column_analysis: Dict[str, ColumnAnalysis] = Field(default_factory=dict)
    chart_compatibility: Optional[ChartCompatibility] = None
    performance: PerformanceInfo = Field(default_factory=PerformanceInfo)


class PerformanceHints(CamelModel):
    """Rendering hints derived from the original dataset size."""
    disable_animations: bool = False
    use_downsampling: bool = False
    chunk_processing: bool = False


class SamplingResult(CamelModel):
    """Result of reducing a dataset for rendering."""
    data: List[Dict[str, Any]]
    is_optimized: bool
    original_size: int
    optimized_size: int
    sampling_method: SamplingMethod
    performance: PerformanceHints = Field(default_factory=PerformanceHints)
    reduction_ratio: float = 0.0


# === Request Models ===

class DatasetMeta(CamelModel):
    """Metadata delivered by the file parsers."""
    filename: Optional[str] = None
    columns: List[str] = Field(default_factory=list)


class ValidateRequest(CamelModel):
    """Request body for dataset validation."""
    data: List[Dict[str, Any]]
    meta: DatasetMeta = Field(default_factory=DatasetMeta)


class OptimizeOptions(CamelModel):
    """Sampling options."""
    max_points: int = Field(default=2000, ge=1)
    preserve_pattern: bool = True
    enable_sampling: bool = True


class OptimizeRequest(CamelModel):
    """Request body for data optimization."""
    data: List[Dict[str, Any]]
    options: OptimizeOptions = Field(default_factory=OptimizeOptions)


# === Upload Models ===

class ParsedFileMeta(CamelModel):
    """Metadata about a parsed upload."""
    filename: str
    file_size: int
    row_count: int
    column_count: int
    columns: List[str]
    header_row: int = 0  # 0-based row the column names were read from
    delimiter: Optional[str] = None
    sheet_name: Optional[str] = None


class UploadResponse(CamelModel):
    """Response after file upload."""
    success: bool
    meta: ParsedFileMeta
    validation: ValidationResult
    message: str
    file_warnings: List[str] = Field(default_factory=list)


class ErrorResponse(CamelModel):
    """Standard error response."""
    error: ChartError
    title: str
    recovery_suggestions: List[str] = Field(default_factory=list)
