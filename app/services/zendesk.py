import logging

import httpx

from app.exceptions.custom import RateLimitError, ZendeskError
from app.mappers.ticket_builder import call_id_tag
from app.schemas.zendesk import ZendeskTicket, ZendeskTicketCreate, ZendeskTicketUpdate

logger = logging.getLogger(__name__)

BASE_URL = "https://{subdomain}.zendesk.com/api/v2"


class ZendeskService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        subdomain: str,
        email: str,
        api_token: str,
    ):
        self._client = client
        self._base_url = BASE_URL.format(subdomain=subdomain)
        self._auth = httpx.BasicAuth(f"{email}/token", api_token)
        self._headers = {"Content-Type": "application/json"}

    @property
    def base_url(self) -> str:
        return self._base_url

    def _check(self, resp: httpx.Response) -> None:
        if resp.status_code == 429:
            raise RateLimitError("Zendesk")
        if resp.status_code >= 400:
            raise ZendeskError(resp.text, status_code=resp.status_code)

    async def search_tickets_by_tag(self, tag: str) -> list[ZendeskTicket]:
        resp = await self._client.get(
            f"{self._base_url}/search.json",
            params={"query": f"type:ticket tags:{tag}"},
            headers=self._headers,
            auth=self._auth,
        )
        self._check(resp)

        tickets = [
            ZendeskTicket(**result)
            for result in resp.json().get("results", [])
            if isinstance(result, dict) and result.get("id")
        ]
        logger.info("Found %d tickets tagged %s", len(tickets), tag)
        return tickets

    async def find_ticket_id_by_call_id(self, call_id: str | None) -> int | None:
        """Look up the escalation ticket tagged with ``callid_<call_id>``.

        Search failures are logged and treated as "no ticket".
        """
        if not call_id:
            return None

        try:
            tickets = await self.search_tickets_by_tag(call_id_tag(call_id))
        except (ZendeskError, RateLimitError) as exc:
            logger.error("Zendesk search failed for call %s: %s", call_id, exc)
            return None

        return tickets[0].id if tickets else None

    async def create_ticket(self, ticket: ZendeskTicketCreate) -> ZendeskTicket:
        resp = await self._client.post(
            f"{self._base_url}/tickets.json",
            json={"ticket": ticket.model_dump(exclude_none=True)},
            headers=self._headers,
            auth=self._auth,
        )
        self._check(resp)

        created = ZendeskTicket(**resp.json()["ticket"])
        logger.info("Created Zendesk ticket %s", created.id)
        return created

    async def update_ticket(
        self, ticket_id: int, update: ZendeskTicketUpdate
    ) -> ZendeskTicket:
        resp = await self._client.put(
            f"{self._base_url}/tickets/{ticket_id}.json",
            json={"ticket": update.model_dump(exclude_none=True)},
            headers=self._headers,
            auth=self._auth,
        )
        self._check(resp)

        updated = ZendeskTicket(**resp.json()["ticket"])
        logger.info("Updated Zendesk ticket %s", updated.id)
        return updated
