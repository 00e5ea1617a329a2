import logging

from app.mappers.ticket_builder import build_escalation_ticket
from app.schemas.responses import CreateTicketResponse
from app.schemas.retell import FunctionCallArgs
from app.services.zendesk import ZendeskService

logger = logging.getLogger(__name__)


class EscalationService:
    def __init__(self, zendesk: ZendeskService):
        self._zendesk = zendesk

    async def create_ticket(self, args: FunctionCallArgs) -> CreateTicketResponse:
        # Retell may invoke the function more than once for the same call
        existing = await self._zendesk.find_ticket_id_by_call_id(args.call_id)
        if existing is not None:
            logger.info(
                "Escalation ticket %s already exists for call %s", existing, args.call_id
            )
            return CreateTicketResponse(ticket_id=existing, deduplicated=True)

        ticket = await self._zendesk.create_ticket(build_escalation_ticket(args))
        logger.info("Zendesk escalation ticket created: %s", ticket.id)
        return CreateTicketResponse(ticket_id=ticket.id)
