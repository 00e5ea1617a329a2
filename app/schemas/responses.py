from pydantic import BaseModel


class WebhookResponse(BaseModel):
    success: bool = True
    skipped: str | None = None
    ticket_id: int | None = None
    tags: list[str] | None = None


class CreateTicketResponse(BaseModel):
    success: bool = True
    ticket_id: int | None = None
    deduplicated: bool = False


class BusinessHoursResponse(BaseModel):
    business_hours: bool
    weekday: str
    time_hhmm: str
    timezone: str
    error: str | None = None
