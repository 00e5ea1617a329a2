from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from app.services.call_review import CallReviewService
from app.services.escalation import EscalationService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_call_review_service(request: Request) -> CallReviewService | None:
    return getattr(request.app.state, "call_review_service", None)


def get_escalation_service(request: Request) -> EscalationService | None:
    return getattr(request.app.state, "escalation_service", None)


SettingsDep = Annotated[Settings, Depends(get_settings)]
CallReviewDep = Annotated[CallReviewService | None, Depends(get_call_review_service)]
EscalationDep = Annotated[EscalationService | None, Depends(get_escalation_service)]
