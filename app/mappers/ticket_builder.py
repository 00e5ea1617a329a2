"""Build Zendesk payloads for escalation tickets created by the voice agent."""

import re
from typing import Any

from app.mappers.call_outcome import IDENTITY_TAGS
from app.mappers.call_record import coerce_dict, coerce_str
from app.schemas.retell import FunctionCallArgs
from app.schemas.zendesk import ZendeskComment, ZendeskRequester, ZendeskTicketCreate

# Retell has sent function arguments under each of these keys
FUNCTION_ARGS_KEYS = ("args", "arguments", "parameters")

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_\-]")


def normalize_call_id(call_id: str | None) -> str:
    return _UNSAFE_ID_CHARS.sub("_", (call_id or "").strip())


def call_id_tag(call_id: str) -> str:
    return f"callid_{normalize_call_id(call_id)}"


def is_valid_email(email: str | None) -> bool:
    return bool(_EMAIL_RE.match((email or "").strip()))


def extract_function_args(body: Any) -> FunctionCallArgs:
    body = coerce_dict(body)
    args = next(
        (body[key] for key in FUNCTION_ARGS_KEYS if isinstance(body.get(key), dict)),
        body,
    )
    call_id = coerce_str(args.get("call_id")) or coerce_str(
        coerce_dict(body.get("call")).get("call_id")
    )
    return FunctionCallArgs(
        name=coerce_str(args.get("name")),
        email=coerce_str(args.get("email")),
        issue_description=coerce_str(args.get("issue_description")),
        phone=coerce_str(args.get("phone")),
        car_model=coerce_str(args.get("car_model")),
        call_id=call_id,
    )


def build_escalation_body(args: FunctionCallArgs) -> str:
    na = "N/A"
    return (
        f"Issue Description:\n{args.issue_description or na}\n\n"
        "Customer Information:\n"
        f"- Name: {args.name or na}\n"
        f"- Email: {args.email or na}\n"
        f"- Phone: {args.phone or na}\n"
        f"- Car Model: {args.car_model or na}\n"
        f"- Call ID: {args.call_id or na}"
    )


def build_escalation_ticket(args: FunctionCallArgs) -> ZendeskTicketCreate:
    tags = list(IDENTITY_TAGS)
    if args.call_id and normalize_call_id(args.call_id):
        tags.append(call_id_tag(args.call_id))

    # Zendesk rejects invalid requester emails with 422, so omit them
    requester = None
    if is_valid_email(args.email):
        requester = ZendeskRequester(
            name=args.name or "Customer", email=args.email.strip()
        )

    return ZendeskTicketCreate(
        subject=f"AI Voice Bot - {args.name or 'Unknown'}",
        comment=ZendeskComment(body=build_escalation_body(args), public=False),
        tags=tags,
        requester=requester,
    )
