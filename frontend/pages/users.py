"""Users page: engineers and customers."""
import streamlit as st

from psr_console.models import UserRole
from psr_console.security.session import VIEW_USERS
from psr_console.services.notifications import handle_admin_action, handle_api_response

from shared import admin_service, notifier, render_notifications, require_view

require_view(VIEW_USERS)

st.title("👥 Users")

service = admin_service()
tab_engineers, tab_customers = st.tabs(["🛠️ Engineers", "🧑‍💼 Customers"])


def user_table(role: UserRole):
    users = handle_api_response(
        notifier(), lambda: service.list_users(role),
        show_success=False, error_title="Could not load users",
    )
    if not users:
        st.info("No users found.")
        return

    for user in users:
        col1, col2, col3 = st.columns([3, 2, 2])
        icon = "🟢" if user.is_active else "⚪"
        col1.markdown(f"{icon} **{user.full_name}**  \n{user.email}")
        col2.caption(f"{user.status or ('active' if user.is_active else 'inactive')} • "
                     f"{user.department or 'no department'}")
        with col3:
            if user.is_active:
                if st.button("⏸️ Suspend", key=f"suspend_{user.id}"):
                    handle_admin_action(notifier(), lambda: service.suspend_user(user.id), "Suspend user")
                    st.rerun()
                if st.button("🗑️ Deactivate", key=f"deactivate_{user.id}"):
                    handle_admin_action(notifier(), lambda: service.deactivate_user(user.id), "Deactivate user")
                    st.rerun()
            elif st.button("▶️ Activate", key=f"activate_{user.id}"):
                handle_admin_action(notifier(), lambda: service.activate_user(user.id), "Activate user")
                st.rerun()


with tab_engineers:
    user_table(UserRole.ENGINEER)
with tab_customers:
    user_table(UserRole.CUSTOMER)

render_notifications()
