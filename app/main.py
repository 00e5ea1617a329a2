import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.config import Settings
from app.exceptions.custom import PayloadTooLargeError, RateLimitError, ZendeskError
from app.exceptions.handlers import (
    payload_too_large_handler,
    rate_limit_error_handler,
    unhandled_error_handler,
    zendesk_error_handler,
)
from app.mappers.qa_report import QALimits
from app.middleware import BodySizeLimitMiddleware
from app.routers.business_hours import router as business_hours_router
from app.routers.health import router as health_router
from app.routers.retell_webhook import router as retell_webhook_router
from app.routers.tickets import router as tickets_router
from app.services.call_review import CallReviewService
from app.services.escalation import EscalationService
from app.services.zendesk import ZendeskService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    app.state.settings = settings

    async with httpx.AsyncClient(timeout=30.0) as client:
        if settings.zendesk_configured:
            zendesk = ZendeskService(
                client,
                settings.zendesk_subdomain,
                settings.zendesk_email,
                settings.zendesk_api_token,
            )
            app.state.call_review_service = CallReviewService(
                zendesk,
                limits=QALimits(
                    max_transcript_chars=settings.max_transcript_chars,
                    max_vars_json_chars=settings.max_vars_json_chars,
                    max_call_summary_chars=settings.max_call_summary_chars,
                    max_qa_body_chars=settings.max_qa_body_chars,
                ),
                early_hangup_threshold_sec=settings.early_hangup_threshold_sec,
            )
            app.state.escalation_service = EscalationService(zendesk)
        else:
            logger.warning(
                "Missing Zendesk settings (ZENDESK_SUBDOMAIN, ZENDESK_EMAIL, "
                "ZENDESK_API_TOKEN); ticket endpoints are disabled"
            )
            app.state.call_review_service = None
            app.state.escalation_service = None

        yield


app = FastAPI(title="Retell Zendesk Bridge", lifespan=lifespan)

app.add_exception_handler(ZendeskError, zendesk_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)
app.add_exception_handler(PayloadTooLargeError, payload_too_large_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.add_middleware(BodySizeLimitMiddleware)

app.include_router(health_router)
app.include_router(business_hours_router)
app.include_router(tickets_router)
app.include_router(retell_webhook_router)
