import json
import logging

from pydantic import BaseModel

from app.schemas.retell import CallRecord

logger = logging.getLogger(__name__)

TRUNCATION_SUFFIX = "\n...[truncated]"
PLACEHOLDER = "N/A"
ANALYSIS_PARSE_ERROR = "Error in parsing JSON for call analysis"
JSON_ERROR_PLACEHOLDER = '{\n  "error": "failed to stringify"\n}'


class QALimits(BaseModel):
    max_transcript_chars: int = 30000
    max_vars_json_chars: int = 6000
    max_call_summary_chars: int = 6000
    max_qa_body_chars: int = 60000


def truncate(text: str | None, max_chars: int, suffix: str = TRUNCATION_SUFFIX) -> str:
    """Cut ``text`` to at most ``max_chars``, ending with ``suffix`` when cut."""
    text = text or ""
    if len(text) <= max_chars:
        return text
    if max_chars <= len(suffix):
        return text[: max(max_chars, 0)]
    return text[: max_chars - len(suffix)] + suffix


def safe_json(obj: object, max_chars: int) -> str:
    try:
        rendered = json.dumps(obj or {}, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as exc:
        logger.warning("Could not serialize collected variables: %s", exc)
        return JSON_ERROR_PLACEHOLDER
    return truncate(rendered, max_chars)


def _call_summary(call: CallRecord) -> str:
    if call.analysis_parse_error:
        return ANALYSIS_PARSE_ERROR
    if call.call_analysis and call.call_analysis.call_summary:
        return call.call_analysis.call_summary
    return ""


def build_qa_report(call: CallRecord, limits: QALimits | None = None) -> str:
    limits = limits or QALimits()

    # half-up, not banker's rounding
    duration_sec = int(call.duration_ms / 1000 + 0.5)
    summary = truncate(_call_summary(call), limits.max_call_summary_chars)
    transcript = truncate(call.transcript, limits.max_transcript_chars)
    variables = safe_json(call.collected_dynamic_variables, limits.max_vars_json_chars)

    body = "\n".join([
        "=== AI VOICE CALL REVIEW ===",
        f"Call ID: {call.call_id or PLACEHOLDER}",
        f"Agent Name: {call.agent_name or PLACEHOLDER}",
        f"Call Type: {call.call_type or PLACEHOLDER}",
        f"Duration (sec): {duration_sec}",
        f"Start timestamp: {call.start_timestamp or PLACEHOLDER}",
        f"End timestamp: {call.end_timestamp or PLACEHOLDER}",
        "",
        "=== COLLECTED VARIABLES ===",
        variables,
        "",
        "=== CALL SUMMARY (from Retell call_analysis) ===",
        summary or PLACEHOLDER,
        "",
        "=== FULL TRANSCRIPT ===",
        transcript or PLACEHOLDER,
    ])

    return truncate(body, limits.max_qa_body_chars)
