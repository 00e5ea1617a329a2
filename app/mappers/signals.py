"""Independent signals extracted from a normalized call.

Pure functions: no I/O, never raise on missing data.
"""

import re

from app.schemas.retell import CallRecord

TOOL_INVOCATION_ROLE = "tool_call_invocation"
TRANSFER_MARKER = "transfer"
EARLY_HANGUP_THRESHOLD_SEC = 20

_EN_HUMAN_REQUEST = re.compile(
    r"\b(human|real person|live agent|representative|talk to someone"
    r"|speak to someone|agent)\b",
    re.IGNORECASE,
)

# Ukrainian: live agent, operator, person, manager, connect me, transfer me
_UA_HUMAN_REQUEST = re.compile(
    r"(жив(ий|ого|ому)\s+агент|оператор|людин(а|у|ою|і)|менеджер"
    r"|з[’'`]?єднай|переведи|переключи)",
    re.IGNORECASE,
)


def _mentions_transfer(name: str | None) -> bool:
    return TRANSFER_MARKER in (name or "").lower()


def did_transfer(call: CallRecord) -> bool:
    if any(
        event.role == TOOL_INVOCATION_ROLE and _mentions_transfer(event.name)
        for event in call.tool_invocations
    ):
        return True
    return any(_mentions_transfer(tool.name) for tool in call.tool_calls)


def detect_requested_human(transcript: str | None) -> bool:
    if not transcript:
        return False
    return bool(
        _EN_HUMAN_REQUEST.search(transcript) or _UA_HUMAN_REQUEST.search(transcript)
    )


def is_user_hangup(disconnection_reason: str | None) -> bool:
    reason = (disconnection_reason or "").lower()
    return "user" in reason or "client" in reason


def is_early_hangup(
    duration_sec: float, threshold_sec: float = EARLY_HANGUP_THRESHOLD_SEC
) -> bool:
    """A zero duration means "unknown", never early."""
    return 0 < duration_sec < threshold_sec
