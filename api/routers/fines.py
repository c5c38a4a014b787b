"""
Fine Extraction Router.

Reads parking fine details from an uploaded photo of the notice.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from errors import (
    AppealServiceError,
    RecoveryError,
    RequestValidationFailed,
    UpstreamCallError,
)
from schemas import (
    RECOVERY_STATUS_HEADER,
    ErrorResponse,
    ExtractFineResponse,
    RecoveryStatus,
)
from services.completion import CompletionClient, get_completion_client
from services.fine_extractor import FineExtractionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["fines"])

EXTRACTION_FAILED = "Failed to extract fine data"


def get_fine_extraction_service(
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
) -> FineExtractionService:
    return FineExtractionService(
        client,
        model=settings.extraction_model,
        image_detail=settings.image_detail,
    )


@router.post(
    "/extract-fine",
    response_model=ExtractFineResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def extract_fine(
    image: UploadFile | None = File(default=None),
    service: FineExtractionService = Depends(get_fine_extraction_service),
    settings: Settings = Depends(get_settings),
):
    """Extract fine fields from a multipart `image` upload."""
    if image is None:
        logger.error("Extract fine request without image file")
        raise RequestValidationFailed("No image file provided")

    image_bytes = await image.read()
    logger.info(
        f"Extract fine request: file={image.filename} mime={image.content_type} "
        f"size={len(image_bytes)} bytes"
    )

    if not image_bytes:
        logger.error("Uploaded image is empty")
        raise RequestValidationFailed("Image file is empty")

    if len(image_bytes) > settings.max_upload_bytes:
        raise AppealServiceError(
            f"Image file exceeds {settings.max_upload_mb} MB limit", status_code=413
        )

    try:
        result = await service.extract(image_bytes, image.content_type)
    except UpstreamCallError as e:
        logger.error(f"Fine extraction upstream call failed: {e}")
        raise UpstreamCallError(EXTRACTION_FAILED, details=e.details or str(e)) from e
    except RecoveryError as e:
        logger.error(
            f"Fine extraction recovery status {RecoveryStatus.FAILED.value}: {e}"
        )
        logger.debug(f"Raw upstream text: {e.raw_text!r}")
        raise AppealServiceError(EXTRACTION_FAILED, status_code=500, details=str(e)) from e

    return JSONResponse(
        content={"success": True, "data": result.data},
        headers={RECOVERY_STATUS_HEADER: result.status.value},
    )
