"""Admins page: admin accounts and your own profile."""
import streamlit as st
from pydantic import ValidationError

from psr_console.models import DEPARTMENTS, CreateAdminRequest, ProfileUpdateRequest
from psr_console.security.session import VIEW_ADMINS
from psr_console.services.notifications import handle_admin_action, handle_api_response

from shared import admin_service, notifier, render_notifications, require_view

require_view(VIEW_ADMINS)

st.title("🛡️ Admin Accounts")

service = admin_service()

# -----------------------------------------------------------
# Existing admins
# -----------------------------------------------------------
admins = handle_api_response(
    notifier(), service.list_admins,
    show_success=False, error_title="Could not load admins",
)
if admins:
    for admin in admins:
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"**{admin.full_name}** — {admin.email} ({admin.role.value})")
        if admin.is_active and col2.button("🗑️ Deactivate", key=f"deactivate_admin_{admin.id}"):
            handle_admin_action(notifier(), lambda: service.deactivate_user(admin.id), "Deactivate admin")
            st.rerun()
else:
    st.info("No admin accounts found.")

# -----------------------------------------------------------
# Create admin
# -----------------------------------------------------------
st.subheader("Create Admin")
with st.form("create_admin", clear_on_submit=True):
    col1, col2 = st.columns(2)
    first_name = col1.text_input("First name")
    last_name = col2.text_input("Last name")
    email = st.text_input("Email")
    password = st.text_input("Password", type="password", help="At least 8 characters")
    phone_number = col1.text_input("Phone number")
    department = col2.selectbox("Department", [""] + DEPARTMENTS)
    submitted = st.form_submit_button("➕ Create Admin")

if submitted:
    try:
        request = CreateAdminRequest(
            email=email, password=password,
            first_name=first_name, last_name=last_name,
            phone_number=phone_number or None, department=department or None,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        st.error(f"Please check: {fields}")
    else:
        if handle_admin_action(notifier(), lambda: service.create_admin(request), "Create admin"):
            st.rerun()

# -----------------------------------------------------------
# Own profile
# -----------------------------------------------------------
st.subheader("My Profile")
with st.expander("✏️ Update profile"):
    with st.form("update_profile"):
        col1, col2 = st.columns(2)
        p_first = col1.text_input("First name", key="profile_first")
        p_last = col2.text_input("Last name", key="profile_last")
        p_phone = col1.text_input("Phone number", key="profile_phone")
        p_department = col2.selectbox("Department", [""] + DEPARTMENTS, key="profile_department")
        current_password = st.text_input("Current password", type="password")
        new_password = st.text_input("New password", type="password")
        save = st.form_submit_button("💾 Save")

    if save:
        try:
            update = ProfileUpdateRequest(
                first_name=p_first or None, last_name=p_last or None,
                phone_number=p_phone or None, department=p_department or None,
                current_password=current_password or None,
                new_password=new_password or None,
            )
        except ValidationError:
            st.error("New password must be at least 8 characters")
        else:
            handle_api_response(
                notifier(), lambda: service.update_profile(update),
                success_message="Profile updated", error_title="Profile update failed",
            )

render_notifications()
