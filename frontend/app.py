"""
PSR AI Console: Streamlit frontend.

Role-gated pages:
- Chat: Conversational Q&A over the trained knowledge base
- Dashboard: Account counts and live system health
- Applications: Approve or reject pending engineer applications
- Users: Activate, suspend or deactivate engineers and customers
- Admins: Create and deactivate admin accounts (Super Admin only)
- Training: Upload training documents and run training jobs
- Vector DB: Inspect and clear the vector database
"""
import streamlit as st

from psr_console.config import settings
from psr_console.security.session import visible_views
from psr_console.state import stop_background_pollers

from shared import render_notifications, render_sidebar

st.set_page_config(
    page_title=settings.app_name,
    page_icon="🤖",
    layout="wide",
    initial_sidebar_state="expanded",
)

stop_background_pollers(st.session_state, None)
role = render_sidebar()

st.sidebar.markdown("---")
st.sidebar.markdown("**Backed by:**")
st.sidebar.markdown("Weaviate • Gemini • PSR AI API")

# -----------------------------------------------------------
# Main page content
# -----------------------------------------------------------
st.title(f"🤖 {settings.app_name}")
st.markdown("""
Operator console for the PSR AI assistant.

**What you can do here:**
- **Chat** with the assistant, grounded in the trained documents
- **Review** engineer applications and manage user accounts
- **Train** the assistant on new documents and watch jobs finish
- **Inspect** the vector database and service health

Navigate using the pages in the sidebar.
""")

page_labels = {
    "chat": "💬 Chat",
    "dashboard": "📊 Dashboard",
    "applications": "📝 Applications",
    "users": "👥 Users",
    "admins": "🛡️ Admins",
    "training": "🧠 Training",
    "vector_db": "🗄️ Vector DB",
}
st.subheader("Pages available to your role")
for view in visible_views(role):
    st.markdown(f"- {page_labels[view]}")

render_notifications()
