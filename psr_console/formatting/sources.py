"""Helpers that dress up chat replies: source footers and conversation titles."""
from psr_console.models import SearchResult, Source

SNIPPET_LENGTH = 150
TITLE_MAX_LENGTH = 40


def search_results_to_sources(results: list[SearchResult]) -> list[Source]:
    return [
        Source(
            id=f"source_{index}",
            title=result.metadata.filename or "Unknown Document",
            snippet=result.content[:SNIPPET_LENGTH] + "...",
            relevance_score=result.score,
        )
        for index, result in enumerate(results, 1)
    ]


def format_response_with_sources(response: str, results: list[SearchResult]) -> tuple[str, list[Source]]:
    """Append a numbered `**Sources:**` footer with relevance percentages."""
    sources = search_results_to_sources(results)
    content = response
    if sources:
        content += "\n\n**Sources:**\n"
        for index, source in enumerate(sources, 1):
            relevance = (source.relevance_score or 0) * 100
            content += f"{index}. {source.title} (Relevance: {relevance:.1f}%)\n"
    return content, sources


def generate_conversation_title(first_message: str) -> str:
    first_message = (first_message or "").strip()
    if len(first_message) <= TITLE_MAX_LENGTH:
        return first_message or "New conversation"

    truncated = first_message[:37]
    last_space = truncated.rfind(" ")
    if last_space > 20:
        return truncated[:last_space] + "..."
    return truncated + "..."
