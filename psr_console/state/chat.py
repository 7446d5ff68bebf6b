"""Chat session state: the running conversation and how each turn is sent."""
from datetime import datetime
from typing import Optional
import logging

from psr_console.config import settings
from psr_console.formatting.sources import search_results_to_sources
from psr_console.models import Message
from psr_console.services.chat_history_service import ChatHistoryService
from psr_console.services.chat_service import ChatService
from psr_console.services.notifications import Notifier, handle_api_response

logger = logging.getLogger(__name__)


class ChatSession:
    def __init__(
        self,
        chat_service: ChatService,
        notifier: Notifier,
        history_service: Optional[ChatHistoryService] = None,
        max_messages: Optional[int] = None,
        with_sources: bool = True,
    ):
        self.chat_service = chat_service
        self.history_service = history_service
        self.notifier = notifier
        self.max_messages = max_messages or settings.chat_max_messages
        self.with_sources = with_sources
        self.messages: list[Message] = []
        self.conversation_id: Optional[str] = None
        self.suggestions: list[str] = []

    def new_conversation(self):
        self.messages = []
        self.conversation_id = None
        self.suggestions = []

    def _append(self, message: Message):
        self.messages.append(message)
        overflow = len(self.messages) - self.max_messages
        if overflow > 0:
            self.messages = self.messages[overflow:]

    def send(self, text: str, concise: bool = False) -> Optional[Message]:
        text = (text or "").strip()
        if not text:
            return None

        user_message = Message(
            role="user", content=text, timestamp=datetime.now().isoformat(), status="sending"
        )
        self._append(user_message)

        reply = handle_api_response(
            self.notifier,
            lambda: self.chat_service.chat(text, self.conversation_id, concise=concise),
            show_success=False,
            error_title="Chat failed",
        )
        if reply is None:
            user_message.status = "error"
            return None
        user_message.status = "sent"
        if reply.conversation_id:
            self.conversation_id = reply.conversation_id

        sources = []
        if self.with_sources:
            # a failed search never fails the turn
            search = handle_api_response(
                self.notifier,
                lambda: self.chat_service.search(text),
                show_success=False,
                show_error=False,
            )
            if search is not None:
                sources = search_results_to_sources(search.results)

        assistant = Message(
            role="assistant",
            content=reply.response,
            timestamp=reply.timestamp or datetime.now().isoformat(),
            sources=sources,
        )
        self._append(assistant)
        self.suggestions = self.chat_service.suggestions(text)
        self._persist()
        return assistant

    def _persist(self):
        if self.history_service is None:
            return
        conversation_id = handle_api_response(
            self.notifier,
            lambda: self.history_service.save_conversation(self.messages, self.conversation_id),
            show_success=False,
            show_error=False,
        )
        if conversation_id:
            self.conversation_id = conversation_id

    def load_conversation(self, conversation_id: str) -> bool:
        if self.history_service is None:
            return False
        conversation = handle_api_response(
            self.notifier,
            lambda: self.history_service.get_conversation(conversation_id),
            show_success=False,
            error_title="Could not open conversation",
        )
        if conversation is None:
            return False
        self.conversation_id = conversation.conversation_id
        self.messages = [
            Message(id=m.id, role=m.role, content=m.content, timestamp=m.created_at)
            for m in conversation.messages or []
        ]
        self.suggestions = []
        return True
