"""Chat page: troubleshooting Q&A over the trained knowledge base."""
import streamlit as st

from psr_console.config import settings
from psr_console.formatting import (
    parse_content_blocks,
    parse_structured_troubleshooting,
    render_markdown,
)
from psr_console.security.session import VIEW_CHAT
from psr_console.state import ChatSession

from shared import (
    chat_history_service,
    chat_service,
    notifier,
    render_notifications,
    require_view,
)

require_view(VIEW_CHAT)

st.title("💬 Chat with PSR AI")

if "chat_session" not in st.session_state:
    st.session_state.chat_session = ChatSession(
        chat_service(), notifier(), history_service=chat_history_service()
    )
session: ChatSession = st.session_state.chat_session


def render_reply(content: str):
    """Structured troubleshooting replies get sections, anything else gets blocks."""
    parsed = parse_structured_troubleshooting(content)
    if not parsed.is_structured:
        st.markdown(render_markdown(parse_content_blocks(content)))
        return

    if parsed.action_required:
        st.markdown("#### ⚠️ Action Required")
        for line in parsed.action_required:
            st.markdown(f"- {line}")
    if parsed.tools_needed:
        st.markdown("#### 🧰 Tools Needed")
        for line in parsed.tools_needed:
            st.markdown(f"- {line}")
    if parsed.procedure:
        st.markdown("#### 🔧 Procedure")
        for step in parsed.procedure:
            st.markdown(f"**{step.step}.** {step.detail}")
    if parsed.resolution:
        st.markdown("#### ✅ Resolution")
        for line in parsed.resolution:
            st.markdown(f"- {line}")


# -----------------------------------------------------------
# Controls
# -----------------------------------------------------------
col_a, col_b = st.columns([1, 1])
with col_a:
    if st.button("🔄 New Conversation"):
        session.new_conversation()
        st.rerun()
with col_b:
    concise = st.toggle("Concise answers", value=False, help="Ask for a shorter reply")

# -----------------------------------------------------------
# Conversation
# -----------------------------------------------------------
if not session.messages:
    with st.chat_message("assistant"):
        st.markdown(settings.welcome_message)

for message in session.messages:
    with st.chat_message(message.role):
        if message.role == "assistant":
            render_reply(message.content)
        else:
            st.markdown(message.content)
            if message.status == "error":
                st.caption("⚠️ Not delivered")
        if message.sources:
            with st.expander(f"📎 Sources ({len(message.sources)})"):
                for source in message.sources:
                    score = (
                        f" ({source.relevance_score * 100:.1f}%)"
                        if source.relevance_score is not None else ""
                    )
                    st.markdown(f"📄 **{source.title}**{score}")
                    st.caption(source.snippet)

prompt = st.chat_input("Describe the issue you are troubleshooting...")

if session.suggestions and not prompt:
    st.caption("Try asking:")
    cols = st.columns(len(session.suggestions))
    for i, suggestion in enumerate(session.suggestions):
        if cols[i].button(suggestion, key=f"suggestion_{i}"):
            prompt = suggestion

if prompt:
    with st.chat_message("user"):
        st.markdown(prompt)
    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            session.send(prompt, concise=concise)
    st.rerun()

render_notifications()
