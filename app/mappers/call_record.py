"""Normalize raw Retell ``call`` payloads into ``CallRecord``.

Retell payloads vary in shape: ``call_analysis`` may arrive stringified, the
ticket id can live in several variable maps and any field may be missing or
of an unexpected type. All of that is resolved here, once, in priority order.
Nothing in this module raises on bad input.
"""

import json
import logging
import math
from typing import Any

from app.schemas.retell import CallAnalysis, CallRecord, ToolEvent

logger = logging.getLogger(__name__)

# Highest priority first
TICKET_ID_SOURCES = (
    "retell_llm_dynamic_variables",
    "metadata",
    "variables",
    "collected_dynamic_variables",
)


def coerce_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def coerce_str(value: Any) -> str | None:
    """Return a non-empty string for str/number values, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def coerce_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def coerce_duration_ms(value: Any) -> float:
    """Non-negative finite duration; anything else counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if not isinstance(value, (int, float)):
        return 0
    try:
        value = float(value)
    except OverflowError:
        return 0
    if not math.isfinite(value):
        return 0
    return max(value, 0)


def parse_ticket_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        stripped = value.strip()
        if not (stripped.isascii() and stripped.isdigit()):
            return None
        try:
            ticket_id = int(stripped)
        except ValueError:  # over the int digit limit
            return None
        return ticket_id if ticket_id > 0 else None
    return None


def parse_call_analysis(value: Any) -> tuple[CallAnalysis | None, bool]:
    """Return (analysis, parse_error).

    Providers sometimes send ``call_analysis`` as a JSON string.
    """
    if isinstance(value, str):
        if not value.strip():
            return None, False
        try:
            value = json.loads(value)
        except ValueError:
            logger.warning("call_analysis is not valid JSON (%d chars)", len(value))
            return None, True

    if not isinstance(value, dict):
        return None, False

    summary = coerce_str(value.get("call_summary")) or coerce_str(
        value.get("call_summary_text")
    )
    return (
        CallAnalysis(
            user_sentiment=coerce_str(value.get("user_sentiment")),
            call_successful=coerce_bool(value.get("call_successful")),
            in_voicemail=coerce_bool(value.get("in_voicemail")),
            call_summary=summary,
        ),
        False,
    )


def parse_tool_events(value: Any) -> list[ToolEvent]:
    if not isinstance(value, list):
        return []
    return [
        ToolEvent(name=coerce_str(item.get("name")), role=coerce_str(item.get("role")))
        for item in value
        if isinstance(item, dict)
    ]


def resolve_ticket_id(raw: dict) -> int | None:
    for source in TICKET_ID_SOURCES:
        ticket_id = parse_ticket_id(coerce_dict(raw.get(source)).get("ticket_id"))
        if ticket_id is not None:
            return ticket_id
    return None


def normalize_call(raw: Any) -> CallRecord:
    if not isinstance(raw, dict):
        return CallRecord()

    analysis, parse_error = parse_call_analysis(raw.get("call_analysis"))

    return CallRecord(
        call_id=coerce_str(raw.get("call_id")),
        agent_name=coerce_str(raw.get("agent_name")),
        call_type=coerce_str(raw.get("call_type")),
        start_timestamp=coerce_str(raw.get("start_timestamp")),
        end_timestamp=coerce_str(raw.get("end_timestamp")),
        duration_ms=coerce_duration_ms(raw.get("duration_ms")),
        disconnection_reason=coerce_str(raw.get("disconnection_reason")),
        transcript=coerce_str(raw.get("transcript")) or "",
        collected_dynamic_variables=coerce_dict(raw.get("collected_dynamic_variables")),
        call_analysis=analysis,
        analysis_parse_error=parse_error,
        tool_invocations=parse_tool_events(raw.get("transcript_with_tool_calls")),
        tool_calls=parse_tool_events(raw.get("tool_calls")),
        ticket_id=resolve_ticket_id(raw),
    )
