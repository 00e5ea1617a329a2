import json

import respx
from httpx import Response

ZENDESK = "https://acme.zendesk.com/api/v2"
SEARCH_URL = f"{ZENDESK}/search.json"


def _analyzed(call: dict) -> dict:
    return {"event": "call_analyzed", "call": call}


async def test_health(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.text


async def test_no_call_is_acknowledged(client):
    resp = await client.post("/retell-webhook", json={"event": "call_analyzed"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}


@respx.mock
async def test_other_events_are_skipped(client):
    resp = await client.post(
        "/retell-webhook", json={"event": "call_ended", "call": {"call_id": "c1"}}
    )
    assert resp.json() == {"success": True, "skipped": "event_call_ended"}
    assert not respx.calls


async def test_event_falls_back_to_type(client):
    resp = await client.post(
        "/retell-webhook", json={"type": "call_started", "call": {"call_id": "c1"}}
    )
    assert resp.json()["skipped"] == "event_call_started"


@respx.mock
async def test_analyzed_call_updates_ticket(client):
    route = respx.put(f"{ZENDESK}/tickets/42.json").mock(
        return_value=Response(200, json={"ticket": {"id": 42}})
    )

    resp = await client.post("/retell-webhook", json=_analyzed({
        "call_id": "call_1",
        "duration_ms": 5000,
        "disconnection_reason": "user_hangup",
        "transcript": "I want to speak to a human",
        "call_analysis": {"user_sentiment": "neutral"},
        "retell_llm_dynamic_variables": {"ticket_id": "42"},
    }))

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["ticket_id"] == 42
    assert "requested_human" in data["tags"]
    assert "ai_early_hangup" in data["tags"]
    assert "ai_failed" in data["tags"]

    body = json.loads(route.calls.last.request.content)
    assert body["ticket"]["comment"]["public"] is False
    assert body["ticket"]["comment"]["body"].startswith("=== AI VOICE CALL REVIEW ===")
    assert body["ticket"]["additional_tags"] == data["tags"]


@respx.mock
async def test_analyzed_call_found_by_call_id_tag(client):
    respx.get(SEARCH_URL).mock(return_value=Response(200, json={"results": [{"id": 7}]}))
    respx.put(f"{ZENDESK}/tickets/7.json").mock(
        return_value=Response(200, json={"ticket": {"id": 7}})
    )

    resp = await client.post("/retell-webhook", json=_analyzed({"call_id": "call_2"}))

    assert resp.json()["ticket_id"] == 7


@respx.mock
async def test_analyzed_call_without_ticket_is_skipped(client):
    respx.get(SEARCH_URL).mock(return_value=Response(200, json={"results": []}))

    resp = await client.post("/retell-webhook", json=_analyzed({"call_id": "call_3"}))

    assert resp.json() == {"success": True, "skipped": "no_ticket_to_update"}


@respx.mock
async def test_zendesk_update_failure_returns_502(client):
    respx.put(f"{ZENDESK}/tickets/42.json").mock(return_value=Response(500, text="down"))

    resp = await client.post(
        "/retell-webhook",
        json=_analyzed({"call_id": "c", "metadata": {"ticket_id": 42}}),
    )

    assert resp.status_code == 502
    assert resp.json()["success"] is False
    assert resp.json()["status"] == 500


async def test_payload_too_large(client, monkeypatch):
    from app.main import app

    monkeypatch.setattr(app.state.settings, "max_body_bytes", 100)

    resp = await client.post("/retell-webhook", json=_analyzed({"transcript": "x" * 500}))

    assert resp.status_code == 413
    assert resp.json() == {"success": False, "error": "Payload too large"}


async def test_streamed_payload_too_large(client, monkeypatch):
    """Chunked bodies carry no Content-Length; the received bytes are counted."""
    from app.main import app

    monkeypatch.setattr(app.state.settings, "max_body_bytes", 100)

    async def _chunks():
        yield b'{"event": "call_ended", "call": {"transcript": "'
        for _ in range(50):
            yield b"x" * 100
        yield b'"}}'

    resp = await client.post(
        "/retell-webhook",
        content=_chunks(),
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 413
    assert resp.json() == {"success": False, "error": "Payload too large"}


async def test_streamed_payload_within_limit(client):
    async def _chunks():
        yield b'{"event": "call_ended", '
        yield b'"call": {"call_id": "c1"}}'

    resp = await client.post(
        "/retell-webhook",
        content=_chunks(),
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "skipped": "event_call_ended"}


async def test_unconfigured_zendesk_returns_503(unconfigured_client):
    resp = await unconfigured_client.post("/retell-webhook", json=_analyzed({"call_id": "c"}))
    assert resp.status_code == 503

    # Non-analyzed events are still acknowledged
    resp = await unconfigured_client.post(
        "/retell-webhook", json={"event": "call_ended", "call": {"call_id": "c"}}
    )
    assert resp.status_code == 200
