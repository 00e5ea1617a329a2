import logging
from typing import Annotated

from fastapi import APIRouter, Body, HTTPException

from app.dependencies import CallReviewDep
from app.mappers.call_record import coerce_dict, coerce_str, normalize_call
from app.schemas.responses import WebhookResponse

logger = logging.getLogger(__name__)

router = APIRouter()

CALL_ANALYZED = "call_analyzed"


@router.post(
    "/retell-webhook",
    response_model=WebhookResponse,
    response_model_exclude_none=True,
)
async def retell_webhook(
    service: CallReviewDep,
    payload: Annotated[dict | None, Body()] = None,
) -> WebhookResponse:
    body = payload or {}
    event = coerce_str(body.get("event")) or coerce_str(body.get("type")) or "unknown"
    raw_call = body.get("call")
    call_info = coerce_dict(raw_call)

    logger.info(
        "Incoming Retell webhook: event=%s has_call=%s call_id=%s has_transcript=%s "
        "duration_ms=%s disconnection_reason=%s",
        event,
        bool(raw_call),
        call_info.get("call_id"),
        bool(call_info.get("transcript")),
        call_info.get("duration_ms"),
        call_info.get("disconnection_reason"),
    )

    # Always acknowledge quickly so Retell does not retry
    if not call_info:
        return WebhookResponse()

    # Only call_analyzed carries the final analysis; other events would
    # attach duplicate comments
    if event != CALL_ANALYZED:
        return WebhookResponse(skipped=f"event_{event}")

    if service is None:
        raise HTTPException(status_code=503, detail="Zendesk not configured")

    return await service.review(normalize_call(call_info))
