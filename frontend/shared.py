"""Per-browser-session wiring shared by every page."""
import streamlit as st

from psr_console.config import configure_logging, settings
from psr_console.models import UserRole
from psr_console.security.session import (
    EXPIRED_KEY,
    ROLE_NAMES,
    MappingSessionProvider,
    can_access,
    is_admin,
    parse_role,
)
from psr_console.services.admin_service import AdminService
from psr_console.services.api_client import APIError, ApiClient
from psr_console.services.chat_history_service import ChatHistoryService
from psr_console.services.chat_service import ChatService
from psr_console.services.notifications import Level, Notifier
from psr_console.services.training_service import TrainingService
from psr_console.state import POLLER_OWNERS, PendingApplicationsQueue, stop_background_pollers


@st.cache_resource
def _logging_configured():
    configure_logging()
    return True


def session_provider() -> MappingSessionProvider:
    return MappingSessionProvider(st.session_state)


def notifier() -> Notifier:
    if "notifier" not in st.session_state:
        st.session_state.notifier = Notifier()
    return st.session_state.notifier


def client() -> ApiClient:
    _logging_configured()
    if "api_client" not in st.session_state:
        st.session_state.api_client = ApiClient(session_provider())
    return st.session_state.api_client


def admin_service() -> AdminService:
    return AdminService(client())


def training_service() -> TrainingService:
    return TrainingService(client())


def chat_service() -> ChatService:
    return ChatService(client())


def chat_history_service() -> ChatHistoryService:
    return ChatHistoryService(client())


def nav_badges() -> dict:
    # plain dict: written from poller threads, read on the next rerun
    return st.session_state.setdefault("nav_badges", {})


def applications_queue() -> PendingApplicationsQueue:
    if "applications_queue" not in st.session_state:
        badges = nav_badges()
        st.session_state.applications_queue = PendingApplicationsQueue(
            admin_service(), notifier(),
            on_count_change=lambda count: badges.update(applications=count),
        )
    return st.session_state.applications_queue


def current_role() -> UserRole:
    """Role of the signed-in user, looked up once per token."""
    token = session_provider().get_token()
    if not token:
        return UserRole.CUSTOMER
    if st.session_state.get("role_token") != token:
        try:
            profile = admin_service().get_profile()
            st.session_state.user_role = profile.role
            st.session_state.user_name = profile.full_name
        except APIError as e:
            notifier().report(e, "Could not load your profile")
            st.session_state.user_role = UserRole.CUSTOMER
            st.session_state.user_name = None
        st.session_state.role_token = token
    return parse_role(st.session_state.get("user_role", UserRole.CUSTOMER))


def render_sidebar():
    st.sidebar.title(f"🤖 {settings.app_name}")
    st.sidebar.caption(f"v{settings.app_version} • {settings.api_base_url}")
    st.sidebar.markdown("---")

    provider = session_provider()
    if st.session_state.get(EXPIRED_KEY):
        st.sidebar.warning("Your session has expired. Paste a new token to continue.")

    token = st.sidebar.text_input(
        "🔑 Access token",
        value=provider.get_token() or "",
        type="password",
        help="Bearer token issued by the PSR AI sign-in page.",
    )
    if token and token != provider.get_token():
        provider.set_token(token)

    role = current_role()
    name = st.session_state.get("user_name")
    label = ROLE_NAMES.get(role, role.value)
    st.sidebar.info(f"Logged in as: {label}" + (f" ({name})" if name else ""))
    return role


def require_view(view: str) -> UserRole:
    """Render the sidebar and stop the page if the role may not see it.

    Pollers owned by other pages are stopped first; admins get the pending
    applications count kept fresh in the sidebar.
    """
    stop_background_pollers(st.session_state, view)
    role = render_sidebar()
    if not can_access(role, view):
        st.error("🔒 Access denied. Your role does not have permission to view this page.")
        st.stop()
    if is_admin(role) and view in POLLER_OWNERS["applications_queue"]:
        applications_queue().start_count_polling()
        pending = nav_badges().get("applications")
        if pending is not None:
            st.sidebar.metric("📝 Pending applications", pending)
    return role


def render_notifications():
    for note in notifier().drain():
        text = f"**{note.title}:** {note.message}" if note.title else note.message
        if note.level == Level.ERROR:
            st.error(text)
        elif note.level == Level.WARNING:
            st.warning(text)
        elif note.level == Level.SUCCESS:
            st.toast(f"✅ {note.message}")
        else:
            st.toast(note.message)
