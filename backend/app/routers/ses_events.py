"""
SES event router.

Accepts an SES receipt notification and returns its flattened form.

Endpoints:
  POST /transform   - transform Records[0] of an SES notification

Only the first record is transformed; any additional records are logged and
ignored. Every payload problem is answered with 422 and a structured detail:

    {"detail": {"detail": "<message>", "error_code": "<kind>"}}
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from app.errors import SesEventError
from app.models.ses_event import first_record, parse
from app.models.transformed_event import ErrorResponse, OutboundEvent
from app.services.ses_mapper import map_event

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str, error_code: str) -> HTTPException:
    """Build an HTTPException with a structured detail payload."""
    return HTTPException(
        status_code=status_code,
        detail={"detail": message, "error_code": error_code},
    )


@router.post(
    "/transform",
    response_model=OutboundEvent,
    responses={422: {"model": ErrorResponse}},
)
def transform(payload: Any = Body(...)) -> OutboundEvent:
    """
    Transform the first record of an SES notification.

    The handler is synchronous: the work is pure in-memory data mapping, so
    FastAPI runs it in its threadpool.
    """
    try:
        record = first_record(payload)
        event = parse(record)
        transformed = map_event(event)
    except SesEventError as e:
        logger.warning("Rejected SES notification (%s): %s", e.error_code, e.message)
        raise _error(422, e.message, e.error_code)

    extra = len(payload["Records"]) - 1
    if extra:
        logger.warning("Ignoring %d additional record(s) in SES notification", extra)

    logger.info(
        "Transformed SES event from %s (%d recipient(s))",
        event.eventSource,
        len(transformed.receptor),
    )
    return transformed
