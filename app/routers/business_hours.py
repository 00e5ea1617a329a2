import logging
from datetime import time
from typing import Annotated

from fastapi import APIRouter, Body

from app.dependencies import SettingsDep
from app.mappers.business_hours import (
    closed_fallback,
    get_business_hours,
    parse_business_days,
)
from app.mappers.call_record import coerce_dict
from app.schemas.responses import BusinessHoursResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/check-business-hours",
    response_model=BusinessHoursResponse,
    response_model_exclude_none=True,
)
async def check_business_hours(
    settings: SettingsDep,
    payload: Annotated[dict | None, Body()] = None,
) -> BusinessHoursResponse:
    body = payload or {}
    call_id = body.get("call_id") or coerce_dict(body.get("args")).get("call_id")

    try:
        info = get_business_hours(
            timezone_name=settings.business_timezone,
            open_at=time(settings.business_open_hour, settings.business_open_minute),
            close_at=time(settings.business_close_hour, settings.business_close_minute),
            days=parse_business_days(settings.business_days),
            holiday_country=settings.business_holiday_country or None,
        )
    except Exception as exc:
        logger.exception("Error in /check-business-hours for call %s", call_id)
        return closed_fallback(settings.business_timezone, str(exc))

    logger.info(
        "check-business-hours: call_id=%s business_hours=%s weekday=%s time=%s",
        call_id,
        info.business_hours,
        info.weekday,
        info.time_hhmm,
    )
    return info
