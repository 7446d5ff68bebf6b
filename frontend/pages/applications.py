"""Applications page: review pending engineer registrations."""
import streamlit as st

from psr_console.security.session import VIEW_APPLICATIONS
from psr_console.services.admin_service import DEFAULT_REJECT_REASON
from psr_console.state import PendingApplicationsQueue

from shared import applications_queue, render_notifications, require_view

require_view(VIEW_APPLICATIONS)

queue: PendingApplicationsQueue = applications_queue()

if not queue.loaded:
    queue.load()

st.title(f"📝 Engineer Applications ({queue.pending_count})")

if st.button("🔄 Refresh"):
    queue.load()
    st.rerun()

if not queue.applications:
    st.info("No pending applications.")

for application in queue.applications:
    user = application.user
    with st.expander(f"🛠️ {user.full_name} — {user.email}"):
        col1, col2 = st.columns(2)
        col1.markdown(f"**Department:** {application.department or user.department or 'n/a'}")
        col1.markdown(f"**Experience:** {application.experience or 'n/a'}")
        col2.markdown(f"**Phone:** {user.phone_number or 'n/a'}")
        col2.markdown(f"**Applied:** {application.created_at or 'n/a'}")
        if application.skills:
            st.markdown(f"**Skills:** {application.skills}")
        if application.portfolio:
            st.markdown(f"**Portfolio:** {application.portfolio}")
        if application.cover_letter:
            st.markdown("**Cover letter:**")
            st.caption(application.cover_letter)

        reason = st.text_input(
            "Rejection reason",
            key=f"reason_{application.id}",
            placeholder=DEFAULT_REJECT_REASON,
        )
        col_a, col_b = st.columns(2)
        if col_a.button("✅ Approve", key=f"approve_{application.id}"):
            queue.approve(application.id)
            st.rerun()
        if col_b.button("❌ Reject", key=f"reject_{application.id}"):
            queue.reject(application.id, reason or None)
            st.rerun()

render_notifications()
