import json
import uuid

import pytest

from carenav.core.chat.service import MAX_HISTORY_MESSAGES, build_chat_messages


def _events(body: str) -> list[str]:
    return [line[len("data: "):] for line in body.split("\n\n") if line.startswith("data: ")]


@pytest.mark.asyncio
async def test_chat_streams_reply(client, denial_issue):
    response = await client.post(
        f"/api/v1/chat/{denial_issue['issueId']}",
        json={"message": "What should I do first?"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")

    events = _events(response.text)
    assert events[-1] == "[DONE]"
    text = "".join(json.loads(e)["text"] for e in events[:-1])
    assert "Get the Denial Letter" in text


@pytest.mark.asyncio
async def test_chat_history_persists_both_messages(client, denial_issue):
    issue_id = denial_issue["issueId"]
    await client.post(f"/api/v1/chat/{issue_id}", json={"message": "Hello"})
    await client.post(f"/api/v1/chat/{issue_id}", json={"message": "How long will it take?"})

    response = await client.get(f"/api/v1/chat/{issue_id}")
    assert response.status_code == 200
    messages = response.json()["messages"]
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant"]
    assert messages[0]["content"] == "Hello"
    assert messages[2]["content"] == "How long will it take?"
    assert "4-8 weeks" in messages[3]["content"]


@pytest.mark.asyncio
async def test_chat_history_empty(client, denial_issue):
    response = await client.get(f"/api/v1/chat/{denial_issue['issueId']}")
    assert response.status_code == 200
    assert response.json()["messages"] == []


@pytest.mark.asyncio
async def test_chat_unknown_issue(client):
    response = await client.post(f"/api/v1/chat/{uuid.uuid4()}", json={"message": "Hi"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_chat_requires_message(client, denial_issue):
    response = await client.post(f"/api/v1/chat/{denial_issue['issueId']}", json={"message": ""})
    assert response.status_code == 422


class _Msg:
    def __init__(self, role, content):
        self.role = role
        self.content = content


class _Issue:
    category = "bill"
    description = "Confusing bill"
    insurer_name = None
    provider_name = "City Hospital"
    amount_involved = 1500
    resolution = None


def test_first_turn_includes_issue_context():
    messages = build_chat_messages(_Issue(), [], "Hi")
    assert messages[0]["role"] == "user"
    assert "Medical Bill / EOB Issue" in messages[0]["content"]
    assert "City Hospital" in messages[0]["content"]
    assert messages[1]["role"] == "assistant"
    assert messages[-1] == {"role": "user", "content": "Hi"}


def test_history_is_capped():
    history = [_Msg("user" if i % 2 == 0 else "assistant", f"m{i}") for i in range(30)]
    messages = build_chat_messages(_Issue(), history, "latest")
    assert len(messages) == MAX_HISTORY_MESSAGES + 1
    assert messages[0]["content"] == "m10"
    assert messages[-1]["content"] == "latest"
