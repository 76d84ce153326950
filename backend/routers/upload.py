"""File upload router: parse a CSV/Excel upload and validate it for charting."""

import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from models.schemas import DatasetMeta, ErrorResponse, UploadResponse
from services.errors import get_recovery_suggestions, get_user_friendly_error
from services.loader import LoaderError, parse_upload
from services.validator import validate_data_for_charting

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post(
    "/",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}},
)
async def upload_dataset(file: UploadFile = File(...)):
    """
    Upload a CSV or Excel dataset.

    Returns parser metadata and the chart validation result. Files that
    cannot be read return 400 with a categorized error.
    """
    filename = file.filename or ""
    content = await file.read()

    try:
        parsed = parse_upload(content, filename)
    except LoaderError as e:
        logger.warning(f"Upload rejected for {filename or 'file'}: {e.error.message}")
        body = ErrorResponse(
            error=e.error,
            title=get_user_friendly_error(e.error)["title"],
            recovery_suggestions=get_recovery_suggestions(e.error),
        )
        return JSONResponse(status_code=400, content=body.model_dump(mode="json", by_alias=True))

    validation = validate_data_for_charting(
        parsed.rows,
        DatasetMeta(filename=parsed.meta.filename, columns=parsed.meta.columns),
    )

    return UploadResponse(
        success=validation.is_valid,
        meta=parsed.meta,
        validation=validation,
        message=f"Successfully parsed {filename}" if validation.is_valid else validation.errors[0].message,
        file_warnings=parsed.warnings,
    )
