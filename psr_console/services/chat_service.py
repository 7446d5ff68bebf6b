"""
Chat, knowledge search and follow-up suggestions.

The backend answers chat turns from the trained knowledge base. Search hits
are used to build the sources list shown under each answer.
"""
from typing import Optional
import logging

from psr_console.config import settings
from psr_console.models import ChatRequest, ChatResponse, SearchResponse
from psr_console.results import validate_model
from psr_console.services.api_client import APIError, ApiClient

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTIONS = [
    "Tell me more about this topic",
    "Show me related information",
    "What are the latest developments?",
    "Compare different approaches",
    "Explain the benefits and drawbacks",
    "Provide practical examples",
]

# (keywords, suggestions) checked in order
KEYWORD_SUGGESTIONS = [
    (("ai", "artificial intelligence"), [
        "What are the latest AI breakthroughs?",
        "Explain different types of AI models",
        "How is AI being used in industry?",
        "What are the ethical considerations?",
    ]),
    (("machine learning", "ml"), [
        "Compare supervised vs unsupervised learning",
        "What are popular ML algorithms?",
        "How to choose the right model?",
        "Explain deep learning concepts",
    ]),
]


def generate_suggestions(query: str) -> list[str]:
    """Local follow-up suggestions keyed on words in the query."""
    lowered = (query or "").lower()
    for keywords, suggestions in KEYWORD_SUGGESTIONS:
        if any(k in lowered for k in keywords):
            return list(suggestions)
    return list(DEFAULT_SUGGESTIONS)


class ChatService:
    def __init__(self, client: ApiClient):
        self.client = client

    def chat(self, message: str, conversation_id: Optional[str] = None,
             concise: bool = False) -> ChatResponse:
        request = ChatRequest(message=message, conversation_id=conversation_id, concise=concise)
        payload = self.client.post(
            "/ai/chat",
            json=request.model_dump(exclude_none=True),
            timeout=settings.chat_timeout_seconds,
        )
        return validate_model(ChatResponse, payload).unwrap()

    def search(self, query: str, limit: Optional[int] = None) -> SearchResponse:
        payload = self.client.post(
            "/ai/search",
            json={"query": query, "limit": limit or settings.chat_search_limit},
        )
        return validate_model(SearchResponse, payload).unwrap()

    def suggestions(self, query: str) -> list[str]:
        """Server suggestions, or the local keyword table if that call fails."""
        try:
            payload = self.client.post("/ai/suggestions", json={"query": query})
        except APIError as e:
            logger.info(f"Suggestions endpoint unavailable ({e.category.value}), using local list")
            return generate_suggestions(query)

        items = payload.get("suggestions") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            return generate_suggestions(query)
        texts = [
            item.get("text", "") if isinstance(item, dict) else str(item)
            for item in items
        ]
        return [t for t in texts if t] or generate_suggestions(query)
