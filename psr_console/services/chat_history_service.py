"""Server-side chat history: conversations and their saved messages."""
from typing import Optional
import logging

from psr_console.formatting.sources import generate_conversation_title
from psr_console.models import ChatConversation, ChatHistoryResponse, Message
from psr_console.results import validate_model
from psr_console.services.api_client import APIError, ApiClient, ErrorCategory

logger = logging.getLogger(__name__)


def _required(payload, key: str):
    if not isinstance(payload, dict) or payload.get(key) is None:
        raise APIError(f"Response is missing {key!r}", 0, ErrorCategory.RESPONSE)
    return payload[key]


class ChatHistoryService:
    def __init__(self, client: ApiClient):
        self.client = client

    def get_history(self, page: int = 1, per_page: int = 20) -> ChatHistoryResponse:
        payload = self.client.get(
            "/ai/chat/history", params={"page": page, "per_page": per_page}
        )
        return validate_model(ChatHistoryResponse, payload).unwrap()

    def get_conversation(self, conversation_id: str) -> ChatConversation:
        payload = self.client.get(f"/ai/chat/conversations/{conversation_id}")
        return validate_model(ChatConversation, payload, envelope_key="conversation").unwrap()

    def create_conversation(self, title: Optional[str] = None) -> str:
        payload = self.client.post("/ai/chat/conversations", json={"title": title})
        return str(_required(payload, "conversation_id"))

    def save_message(self, conversation_id: str, role: str, content: str,
                     sources: Optional[list] = None, metadata: Optional[dict] = None) -> int:
        payload = self.client.post("/ai/chat/messages", json={
            "conversation_id": conversation_id,
            "role": role,
            "content": content,
            "sources": sources or [],
            "message_metadata": metadata or {},
        })
        return int(_required(payload, "message_id"))

    def update_conversation(self, conversation_id: str, title: Optional[str] = None,
                            is_active: Optional[bool] = None) -> dict:
        updates = {k: v for k, v in {"title": title, "is_active": is_active}.items() if v is not None}
        return self.client.put(f"/ai/chat/conversations/{conversation_id}", json=updates) or {}

    def delete_conversation(self, conversation_id: str) -> dict:
        return self.client.delete(f"/ai/chat/conversations/{conversation_id}") or {}

    def save_conversation(self, messages: list[Message], conversation_id: Optional[str] = None,
                          title: Optional[str] = None) -> Optional[str]:
        """
        Persist any unsaved messages, creating the conversation on first save.

        Messages that already carry a server id are skipped; saved ones get
        their id filled in. Returns the conversation id (None if nothing to save).
        """
        if not messages:
            return None

        if not conversation_id:
            first_user = next((m.content for m in messages if m.role == "user"), "")
            conversation_id = self.create_conversation(title or generate_conversation_title(first_user))
            logger.info(f"Created conversation {conversation_id}")

        for message in messages:
            if message.id is not None:
                continue
            message.id = self.save_message(
                conversation_id,
                message.role,
                message.content,
                sources=[s.model_dump() for s in message.sources],
            )
        return conversation_id
