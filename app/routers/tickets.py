import json
import logging
from typing import Annotated

from fastapi import APIRouter, Body, HTTPException

from app.dependencies import EscalationDep
from app.mappers.ticket_builder import extract_function_args
from app.schemas.responses import CreateTicketResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-ticket", response_model=CreateTicketResponse)
async def create_ticket(
    service: EscalationDep,
    payload: Annotated[dict | None, Body()] = None,
) -> CreateTicketResponse:
    logger.info(
        "Incoming body from Retell (/create-ticket): %s",
        json.dumps(payload, ensure_ascii=False, default=str),
    )
    if service is None:
        raise HTTPException(status_code=503, detail="Zendesk not configured")

    return await service.create_ticket(extract_function_args(payload))
