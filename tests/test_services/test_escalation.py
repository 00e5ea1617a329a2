from unittest.mock import AsyncMock

from app.schemas.retell import FunctionCallArgs
from app.schemas.zendesk import ZendeskTicket
from app.services.escalation import EscalationService


async def test_creates_ticket_when_none_exists():
    zendesk = AsyncMock()
    zendesk.find_ticket_id_by_call_id.return_value = None
    zendesk.create_ticket.return_value = ZendeskTicket(id=321)
    service = EscalationService(zendesk)

    result = await service.create_ticket(FunctionCallArgs(name="Ann", call_id="call_1"))

    assert result.success is True
    assert result.ticket_id == 321
    assert result.deduplicated is False
    ticket = zendesk.create_ticket.await_args.args[0]
    assert "callid_call_1" in ticket.tags


async def test_returns_existing_ticket_for_same_call():
    zendesk = AsyncMock()
    zendesk.find_ticket_id_by_call_id.return_value = 77
    service = EscalationService(zendesk)

    result = await service.create_ticket(FunctionCallArgs(call_id="call_1"))

    assert result.ticket_id == 77
    assert result.deduplicated is True
    zendesk.create_ticket.assert_not_awaited()
