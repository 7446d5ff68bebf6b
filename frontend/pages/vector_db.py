"""Vector DB page: collection counts and maintenance."""
import streamlit as st

from psr_console.security.session import VIEW_VECTOR_DB
from psr_console.services.notifications import handle_api_response

from shared import notifier, render_notifications, require_view, training_service

require_view(VIEW_VECTOR_DB)

st.title("🗄️ Vector Database")

service = training_service()
status = handle_api_response(
    notifier(), service.get_vector_database_status,
    show_success=False, error_title="Could not load vector database status",
)

if status is not None:
    if status.connected:
        st.success("✅ Connected")
    else:
        st.error(f"❌ Not connected: {status.error or 'unknown error'}")

    st.metric("🧩 Total objects", status.total_objects)

    for collection in status.collections:
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"**{collection.name}**: {collection.object_count} objects")
        if col2.button("🗑️", key=f"drop_{collection.name}", help="Delete collection"):
            handle_api_response(
                notifier(), lambda: service.delete_collection(collection.name),
                success_message=f"Collection {collection.name} deleted",
                error_title="Delete failed",
            )
            st.rerun()

st.markdown("---")
st.subheader("Danger Zone")
confirm = st.checkbox("I understand this removes every trained document from the assistant")
if st.button("🧹 Clear vector database", disabled=not confirm):
    handle_api_response(
        notifier(), service.clear_vector_database,
        success_message="Vector database cleared", error_title="Clear failed",
    )
    st.rerun()

render_notifications()
