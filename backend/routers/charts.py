"""Chart analysis router: validation, suggestions and data optimization."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from models.schemas import (
    ChartSuggestion,
    OptimizeRequest,
    SamplingResult,
    ValidateRequest,
    ValidationResult,
)
from services.sampler import optimize_data_for_charting
from services.validator import has_numeric_data, validate_data_for_charting

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/charts", tags=["charts"])


@router.post("/validate", response_model=ValidationResult)
async def validate_dataset(request: ValidateRequest) -> ValidationResult:
    """
    Validate parsed rows for charting.

    Always returns 200 with a ValidationResult; invalid data is reported in
    the result's errors, not as an HTTP error.
    """
    return validate_data_for_charting(request.data, request.meta)


@router.post("/recommendations", response_model=Dict[str, Any])
async def get_recommendations(request: ValidateRequest) -> Dict[str, Any]:
    """Ranked chart suggestions only."""
    result = validate_data_for_charting(request.data, request.meta)
    suggestions = [s.model_dump(mode="json", by_alias=True) for s in result.suggestions]
    return {"suggestions": suggestions}


@router.post("/has-numeric", response_model=Dict[str, bool])
async def check_numeric(request: ValidateRequest) -> Dict[str, bool]:
    """Quick check of the first row for numeric values."""
    return {"hasNumericData": has_numeric_data(request.data)}


@router.post("/optimize", response_model=SamplingResult)
async def optimize_dataset(request: OptimizeRequest) -> SamplingResult:
    """Reduce rows for rendering according to the given options."""
    options = request.options
    try:
        return optimize_data_for_charting(
            request.data,
            max_points=options.max_points,
            preserve_pattern=options.preserve_pattern,
            enable_sampling=options.enable_sampling,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
