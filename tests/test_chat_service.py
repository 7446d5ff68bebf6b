import json

import pytest

from psr_console.models import Message, Source
from psr_console.services.api_client import APIError
from psr_console.services.chat_history_service import ChatHistoryService
from psr_console.services.chat_service import (
    DEFAULT_SUGGESTIONS,
    ChatService,
    generate_suggestions,
)


@pytest.fixture
def chat(client):
    return ChatService(client)


@pytest.fixture
def history(client):
    return ChatHistoryService(client)


def test_chat_sends_message_and_concise_flag(chat, adapter):
    adapter.add("POST", "/ai/chat", {"response": "Check the fuse.", "conversation_id": "c1"})

    reply = chat.chat("Pump will not start", concise=True)

    assert reply.response == "Check the fuse."
    assert reply.conversation_id == "c1"
    assert adapter.last_json() == {"message": "Pump will not start", "concise": True}


def test_search_uses_default_limit(chat, adapter):
    adapter.add("POST", "/ai/search", {"results": [{"content": "fuse", "score": 0.9}]})

    results = chat.search("fuse")

    assert results.results[0].score == 0.9
    assert adapter.last_json() == {"query": "fuse", "limit": 5}


def test_suggestions_from_server(chat, adapter):
    adapter.add("POST", "/ai/suggestions", {"suggestions": [{"text": "Check wiring"}, "Reset"]})

    assert chat.suggestions("pump") == ["Check wiring", "Reset"]


def test_suggestions_fall_back_to_local_table(chat):
    # no route: the fake transport answers 404
    assert chat.suggestions("pump pressure") == DEFAULT_SUGGESTIONS


def test_generate_suggestions_by_keyword():
    assert generate_suggestions("Tell me about AI")[0] == "What are the latest AI breakthroughs?"
    assert generate_suggestions("machine learning basics")[0] == (
        "Compare supervised vs unsupervised learning"
    )
    assert generate_suggestions("") == DEFAULT_SUGGESTIONS


def test_save_conversation_creates_then_saves_unsaved_messages(history, adapter):
    adapter.add("POST", "/ai/chat/conversations", {"conversation_id": "conv-1"})
    adapter.add("POST", "/ai/chat/messages", {"message_id": 31})
    messages = [
        Message(id=5, role="user", content="already saved"),
        Message(role="user", content="Why does the compressor short cycle every few minutes?"),
        Message(role="assistant", content="Low refrigerant.",
                sources=[Source(id="source_1", title="manual.pdf")]),
    ]

    conversation_id = history.save_conversation(messages)

    assert conversation_id == "conv-1"
    create_body = [r for r in adapter.requests if r.path_url.endswith("/conversations")][0]
    assert json.loads(create_body.body) == {"title": "already saved"}
    saves = [r for r in adapter.requests if r.path_url.endswith("/messages")]
    assert len(saves) == 2
    assert [m.id for m in messages] == [5, 31, 31]
    assert adapter.last_json()["sources"][0]["title"] == "manual.pdf"


def test_save_conversation_with_nothing_to_save(history, adapter):
    assert history.save_conversation([]) is None
    assert adapter.requests == []


def test_create_conversation_requires_id(history, adapter):
    adapter.add("POST", "/ai/chat/conversations", {"success": True})

    with pytest.raises(APIError):
        history.create_conversation("Pump")


def test_get_history_and_conversation(history, adapter):
    adapter.add("GET", "/ai/chat/history", {
        "conversations": [{"conversation_id": "c1", "title": "Pump"}],
        "total_conversations": 1,
    })
    adapter.add("GET", "/ai/chat/conversations/c1", {"conversation": {
        "conversation_id": "c1",
        "messages": [{"id": 1, "role": "user", "content": "hi"}],
    }})

    page = history.get_history()
    assert page.conversations[0].title == "Pump"
    assert adapter.last_params() == {"page": ["1"], "per_page": ["20"]}

    conversation = history.get_conversation("c1")
    assert conversation.messages[0].content == "hi"
