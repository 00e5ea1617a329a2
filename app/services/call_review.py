import logging

from app.mappers.call_outcome import classify_call
from app.mappers.qa_report import QALimits, build_qa_report
from app.mappers.signals import EARLY_HANGUP_THRESHOLD_SEC
from app.schemas.responses import WebhookResponse
from app.schemas.retell import CallRecord
from app.schemas.zendesk import ZendeskComment, ZendeskTicketUpdate
from app.services.zendesk import ZendeskService

logger = logging.getLogger(__name__)


class CallReviewService:
    """Attach the QA report and outcome tags of an analyzed call to its ticket.

    Tickets are never created here: a call without an escalation ticket is
    skipped.
    """

    def __init__(
        self,
        zendesk: ZendeskService,
        limits: QALimits | None = None,
        early_hangup_threshold_sec: float = EARLY_HANGUP_THRESHOLD_SEC,
    ):
        self._zendesk = zendesk
        self._limits = limits or QALimits()
        self._threshold = early_hangup_threshold_sec

    def build_update(self, call: CallRecord) -> ZendeskTicketUpdate:
        classification = classify_call(
            call, early_hangup_threshold_sec=self._threshold
        )
        return ZendeskTicketUpdate(
            comment=ZendeskComment(body=build_qa_report(call, self._limits), public=False),
            additional_tags=classification.tags,
        )

    async def resolve_ticket_id(self, call: CallRecord) -> int | None:
        if call.ticket_id is not None:
            return call.ticket_id
        if call.call_id:
            logger.info(
                "No ticket_id for call %s, searching escalation ticket by call_id tag",
                call.call_id,
            )
            return await self._zendesk.find_ticket_id_by_call_id(call.call_id)
        return None

    async def review(self, call: CallRecord) -> WebhookResponse:
        # Computed before any I/O so a retried delivery sends the same update
        update = self.build_update(call)

        ticket_id = await self.resolve_ticket_id(call)
        if ticket_id is None:
            logger.info(
                "No escalation ticket found for call %s, skipping QA attach",
                call.call_id,
            )
            return WebhookResponse(skipped="no_ticket_to_update")

        logger.info(
            "Attaching QA report to ticket %s (%d tags)",
            ticket_id,
            len(update.additional_tags),
        )
        ticket = await self._zendesk.update_ticket(ticket_id, update)
        return WebhookResponse(ticket_id=ticket.id, tags=update.additional_tags)
