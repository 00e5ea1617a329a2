from pydantic import BaseModel


class ZendeskTicket(BaseModel):
    id: int
    subject: str | None = None
    status: str | None = None
    tags: list[str] = []


class ZendeskComment(BaseModel):
    body: str
    public: bool = False


class ZendeskRequester(BaseModel):
    name: str
    email: str


class ZendeskTicketCreate(BaseModel):
    subject: str
    comment: ZendeskComment
    tags: list[str] = []
    requester: ZendeskRequester | None = None


class ZendeskTicketUpdate(BaseModel):
    comment: ZendeskComment
    additional_tags: list[str] = []
