"""
Appeal Check Router.

Scores the strength of a parking fine appeal.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from errors import RequestValidationFailed, UpstreamCallError
from schemas import (
    RECOVERY_STATUS_HEADER,
    AppealAssessment,
    AppealCheckRequest,
    ErrorResponse,
)
from services.appeal_checker import AppealCheckService
from services.completion import CompletionClient, get_completion_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["appeals"])


def get_appeal_check_service(
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
) -> AppealCheckService:
    return AppealCheckService(client, model=settings.appeal_model)


def _is_blank(value) -> bool:
    """Falsy scalars and blank strings count as missing; empty objects do not."""
    if isinstance(value, (dict, list)):
        return False
    if isinstance(value, str):
        return not value.strip()
    return not value


@router.post(
    "/appeal-check",
    response_model=AppealAssessment,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def appeal_check(
    request: AppealCheckRequest,
    service: AppealCheckService = Depends(get_appeal_check_service),
):
    """
    Assess how likely an appeal is to succeed.

    Malformed model output never fails the request; a neutral fallback
    assessment is returned instead.
    """
    if _is_blank(request.fine_details) or _is_blank(request.appeal_reason):
        raise RequestValidationFailed(
            "Missing required fields: fineDetails and appealReason are required"
        )

    logger.info(
        f"Appeal check received: fineDetails type={type(request.fine_details).__name__}, "
        f"appealReason type={type(request.appeal_reason).__name__}"
    )

    try:
        result = await service.assess(request.fine_details, request.appeal_reason)
    except UpstreamCallError as e:
        logger.error(f"Error processing appeal check: {e}")
        raise UpstreamCallError(
            "Failed to analyze appeal chances", details=e.details or str(e)
        ) from e

    return JSONResponse(
        content=result.data,
        headers={RECOVERY_STATUS_HEADER: result.status.value},
    )
