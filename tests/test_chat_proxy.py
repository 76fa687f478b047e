"""Tests for POST /api/chat and the upstream call it makes."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from safebyte.services.claude import GENERIC_FAILURE, MALFORMED_REPLY


def _upstream(status_code: int, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


def _text_reply(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}], "stop_reason": "end_turn"}


PROFILE = {
    "allergies": ["Peanuts"],
    "dietTags": ["Vegan"],
    "severityLevels": {"Peanuts": "severe"},
    "notes": "",
}


@pytest.mark.parametrize("body", [{"message": ""}, {"message": "   "}, {}])
async def test_missing_message_is_rejected_without_upstream_call(client, body):
    with patch("safebyte.services.claude.requests.post") as post:
        resp = await client.post("/api/chat", json=body)

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert post.call_count == 0


async def test_successful_reply_is_relayed(client):
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, _text_reply("Try the pho."))) as post:
        resp = await client.post(
            "/api/chat",
            json={"message": "Where can I eat?", "userProfile": PROFILE, "conversationHistory": []},
        )

    assert resp.status_code == 200
    assert resp.json() == {"response": "Try the pho."}
    assert post.call_count == 1


async def test_upstream_request_shape(client):
    history = [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(15)
    ]
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, _text_reply("ok"))) as post:
        await client.post(
            "/api/chat",
            json={"message": "latest", "userProfile": PROFILE, "conversationHistory": history},
        )

    kwargs = post.call_args.kwargs
    payload = kwargs["json"]
    assert payload["max_tokens"] == 1024
    assert payload["model"]
    assert "Peanuts (severe)" in payload["system"]
    assert "Dietary Preferences: Vegan" in payload["system"]
    assert len(payload["messages"]) == 11
    assert payload["messages"][0]["content"] == "m5"
    assert payload["messages"][-1] == {"role": "user", "content": "latest"}
    assert kwargs["headers"]["x-api-key"] == "test-anthropic-key"
    assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
    assert kwargs["timeout"]


async def test_first_text_block_is_used(client):
    body = {
        "content": [
            {"type": "tool_use", "id": "x", "name": "noop", "input": {}},
            {"type": "text", "text": "first"},
            {"type": "text", "text": "second"},
        ]
    }
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, body)):
        resp = await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    assert resp.json() == {"response": "first"}


async def test_upstream_error_message_is_propagated(client):
    upstream = _upstream(500, {"error": {"type": "api_error", "message": "x"}})
    with patch("safebyte.services.claude.requests.post", return_value=upstream) as post:
        resp = await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    assert resp.status_code == 500
    assert resp.json() == {"error": "x"}
    assert post.call_count == 1


async def test_upstream_error_without_message_uses_generic_text(client):
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(503, json_error=True)):
        resp = await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_FAILURE}


@pytest.mark.parametrize(
    "body",
    [{"content": []}, {"content": [{"type": "text", "text": ""}]}, {"unexpected": True}, []],
)
async def test_malformed_success_payload_is_an_error_not_a_placeholder(client, body):
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, body)):
        resp = await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    assert resp.status_code == 502
    assert resp.json() == {"error": MALFORMED_REPLY}


async def test_network_failure_is_a_server_error(client):
    with patch(
        "safebyte.services.claude.requests.post",
        side_effect=requests.ConnectionError("unreachable"),
    ) as post:
        resp = await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_FAILURE}
    assert post.call_count == 1


async def test_stored_profile_is_used_when_body_has_none(client, profile_store):
    profile_store.add_allergy("Sesame", "mild")
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, _text_reply("ok"))) as post:
        await client.post("/api/chat", json={"message": "hi"})

    assert "Sesame (mild)" in post.call_args.kwargs["json"]["system"]


async def test_body_profile_wins_over_stored_profile(client, profile_store):
    profile_store.add_allergy("Sesame", "mild")
    with patch("safebyte.services.claude.requests.post", return_value=_upstream(200, _text_reply("ok"))) as post:
        await client.post("/api/chat", json={"message": "hi", "userProfile": PROFILE})

    system = post.call_args.kwargs["json"]["system"]
    assert "Peanuts (severe)" in system
    assert "Sesame" not in system
