from pydantic import BaseModel


class ToolEvent(BaseModel):
    name: str | None = None
    role: str | None = None


class CallAnalysis(BaseModel):
    user_sentiment: str | None = None
    call_successful: bool | None = None  # tri-state: absent -> None
    in_voicemail: bool | None = None
    call_summary: str | None = None


class CallRecord(BaseModel):
    """Canonical view of a Retell ``call`` object.

    Built by ``app.mappers.call_record.normalize_call``; every field has a
    safe default so classification never has to probe raw payload shapes.
    """

    call_id: str | None = None
    agent_name: str | None = None
    call_type: str | None = None
    start_timestamp: str | None = None
    end_timestamp: str | None = None
    duration_ms: float = 0
    disconnection_reason: str | None = None
    transcript: str = ""
    collected_dynamic_variables: dict = {}
    call_analysis: CallAnalysis | None = None
    analysis_parse_error: bool = False
    tool_invocations: list[ToolEvent] = []
    tool_calls: list[ToolEvent] = []
    ticket_id: int | None = None


class FunctionCallArgs(BaseModel):
    """Arguments the voice agent passes to the ``create_ticket`` function."""

    name: str | None = None
    email: str | None = None
    issue_description: str | None = None
    phone: str | None = None
    car_model: str | None = None
    call_id: str | None = None
