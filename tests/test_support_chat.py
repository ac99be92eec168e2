"""
Support-chat prompt assembly, the hosted model call and the chat send route.
"""

from __future__ import annotations

import pytest
import requests
from sqlalchemy import text

from mindful_youth.services import gemini_ai_service, support_chat_flow
from mindful_youth.services.chat_history_service import ChatHistoryService
from mindful_youth.services.gemini_ai_service import GenerationError
from mindful_youth.utils import ai_engine
from mindful_youth.utils.prompt_templates import CHAT_APOLOGY_TEXT, SUPPORT_SYSTEM_PROMPT


class _FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def test_system_prompt_mentions_emotional_state_only_when_given() -> None:
    plain = support_chat_flow.build_system_prompt()
    tuned = support_chat_flow.build_system_prompt("anxious")

    assert plain == SUPPORT_SYSTEM_PROMPT
    assert "current emotional state" not in plain
    assert tuned.startswith(SUPPORT_SYSTEM_PROMPT)
    assert "The user's current emotional state is: anxious." in tuned


def test_contents_map_assistant_turns_to_model_role() -> None:
    contents = support_chat_flow.build_contents(
        "and today?",
        [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
    )

    assert contents == [
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello"}]},
        {"role": "user", "parts": [{"text": "and today?"}]},
    ]


def test_reply_is_returned_unchanged(monkeypatch) -> None:
    seen = {}

    def fake_reply(system_instruction, contents):
        seen["system"] = system_instruction
        seen["contents"] = contents
        return "  That sounds hard.  "

    monkeypatch.setattr(ai_engine, "generate_ai_reply", fake_reply)

    reply = support_chat_flow.ai_anonymized_support_chat("I'm sad", emotional_state="low")

    assert reply == "  That sounds hard.  "
    assert "low" in seen["system"]
    assert seen["contents"][-1] == {"role": "user", "parts": [{"text": "I'm sad"}]}


def test_gemini_request_shape(monkeypatch) -> None:
    captured = {}

    def fake_post(url, headers, json, timeout):
        captured.update(url=url, headers=headers, json=json, timeout=timeout)
        return _FakeResponse({"candidates": [{"content": {"parts": [{"text": "Hi "}, {"text": "there"}]}}]})

    monkeypatch.setattr(gemini_ai_service.requests, "post", fake_post)

    reply = gemini_ai_service.get_gemini_reply("be kind", [{"role": "user", "parts": [{"text": "hey"}]}])

    assert reply == "Hi there"
    assert captured["json"]["systemInstruction"] == {"parts": [{"text": "be kind"}]}
    assert captured["headers"]["x-goog-api-key"] == "test-llm-key"
    assert gemini_ai_service.LLM_MODEL in captured["url"]


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse({}, status_code=500),
        _FakeResponse({"candidates": []}),
    ],
)
def test_gemini_failures_raise_generation_error(monkeypatch, response) -> None:
    monkeypatch.setattr(gemini_ai_service.requests, "post", lambda *args, **kwargs: response)

    with pytest.raises(GenerationError):
        gemini_ai_service.get_gemini_reply("sys", [])


def test_gemini_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(gemini_ai_service, "LLM_API_KEY", None)

    with pytest.raises(GenerationError):
        gemini_ai_service.get_gemini_reply("sys", [])


# ---------- chat routes ----------

def test_send_message_round_trip(client, alice, monkeypatch) -> None:
    calls = []

    def fake_reply(system_instruction, contents):
        calls.append(contents)
        return f"reply {len(calls)}"

    monkeypatch.setattr(ai_engine, "generate_ai_reply", fake_reply)

    first = client.post("/chat/messages", headers=alice["headers"], json={"message": "hello"})
    assert first.status_code == 200
    body = first.json()
    assert body["reply"] == "reply 1"
    assert len(body["sessions"]) == 1
    assert [(m["role"], m["content"]) for m in body["messages"]] == [("user", "hello"), ("assistant", "reply 1")]
    assert all(m["status"] == "confirmed" for m in body["messages"])

    client.post("/chat/messages", headers=alice["headers"], json={"message": "again", "emotional_state": "calm"})
    # Second call carries the earlier turns, then the new message
    assert [c["role"] for c in calls[1]] == ["user", "model", "user"]


def test_generation_failure_becomes_apology(client, alice, monkeypatch) -> None:
    def broken(system_instruction, contents):
        raise GenerationError("model down")

    monkeypatch.setattr(ai_engine, "generate_ai_reply", broken)

    response = client.post("/chat/messages", headers=alice["headers"], json={"message": "anyone there?"})

    assert response.status_code == 200
    assert response.json()["reply"] == CHAT_APOLOGY_TEXT
    assert response.json()["messages"][-1]["content"] == CHAT_APOLOGY_TEXT


def test_session_management_routes(client, alice, monkeypatch) -> None:
    monkeypatch.setattr(ai_engine, "generate_ai_reply", lambda s, c: "ok")

    client.post("/chat/messages", headers=alice["headers"], json={"message": "first chat"})
    first_id = client.get("/chat/sessions", headers=alice["headers"]).json()["active_chat_id"]

    created = client.post("/chat/sessions", headers=alice["headers"])
    assert created.status_code == 201
    second_id = created.json()["active_chat_id"]
    assert created.json()["messages"][0]["id"] == "initial"

    renamed = client.patch(f"/chat/sessions/{first_id}", headers=alice["headers"], json={"name": "Exams"})
    titles = {s["id"]: s["title"] for s in renamed.json()["sessions"]}
    assert titles == {first_id: "Exams", second_id: "New Conversation"}

    selected = client.post(f"/chat/sessions/{first_id}/select", headers=alice["headers"]).json()
    assert [m["content"] for m in selected["messages"]] == ["first chat", "ok"]

    after_delete = client.delete(f"/chat/sessions/{first_id}", headers=alice["headers"]).json()
    assert after_delete["active_chat_id"] == second_id

    reloaded = client.post("/chat/sessions/load", headers=alice["headers"]).json()
    assert [s["id"] for s in reloaded["sessions"]] == [second_id]


def test_sessions_are_private(client, alice, bob, monkeypatch) -> None:
    monkeypatch.setattr(ai_engine, "generate_ai_reply", lambda s, c: "ok")
    client.post("/chat/messages", headers=alice["headers"], json={"message": "secret"})
    alice_chat = client.get("/chat/sessions", headers=alice["headers"]).json()["active_chat_id"]

    assert client.get("/chat/sessions", headers=bob["headers"]).json()["sessions"] == []
    assert client.post(f"/chat/sessions/{alice_chat}/select", headers=bob["headers"]).status_code == 404
    assert client.delete(f"/chat/sessions/{alice_chat}", headers=bob["headers"]).status_code == 404


def test_message_content_is_encrypted_at_rest(client, alice, db, monkeypatch) -> None:
    monkeypatch.setattr(ai_engine, "generate_ai_reply", lambda s, c: "ok")
    client.post("/chat/messages", headers=alice["headers"], json={"message": "very private"})

    raw = [row[0] for row in db.execute(text("SELECT content FROM chat_messages"))]
    assert raw and all("very private" not in value for value in raw)


def test_resend_after_failed_reply_save_keeps_turns_alternating(client, alice, monkeypatch) -> None:
    calls = []

    def fake_reply(system_instruction, contents):
        calls.append([turn["role"] for turn in contents])
        return "I'm listening"

    monkeypatch.setattr(ai_engine, "generate_ai_reply", fake_reply)

    real_add = ChatHistoryService.add_message_to_chat
    state = {"failed": False}

    def add_failing_first_reply(self, chat_id, role, content, user_id):
        if role == "assistant" and not state["failed"]:
            state["failed"] = True
            raise RuntimeError("database unavailable")
        return real_add(self, chat_id, role, content, user_id)

    monkeypatch.setattr(ChatHistoryService, "add_message_to_chat", add_failing_first_reply)

    first = client.post("/chat/messages", headers=alice["headers"], json={"message": "are you there?"})
    assert first.status_code == 502
    shown = first.json()["detail"]["state"]["messages"]
    assert [(m["role"], m["content"]) for m in shown] == [("user", "are you there?")]

    second = client.post("/chat/messages", headers=alice["headers"], json={"message": "are you there?"})
    assert second.status_code == 200
    assert calls[1] == ["user"]

    client.post("/chat/messages", headers=alice["headers"], json={"message": "ok good"})
    assert calls[2] == ["user", "model", "user"]


def test_blank_chat_message_rejected(client, alice, monkeypatch) -> None:
    monkeypatch.setattr(ai_engine, "generate_ai_reply", lambda s, c: "ok")

    response = client.post("/chat/messages", headers=alice["headers"], json={"message": "   \n "})

    assert response.status_code == 422
    assert client.get("/chat/sessions", headers=alice["headers"]).json()["sessions"] == []
