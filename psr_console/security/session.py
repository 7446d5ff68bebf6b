"""
Session access and role-gated views.

Every API call needs the bearer token, and every 401 needs somewhere to go.
Callers depend on the small `SessionProvider` interface below rather than on
where the token happens to live. In the Streamlit app it lives in
`st.session_state["auth_token"]`; tests hand in a fixed token.

Login itself is handled by the backend's auth pages, not by this console.
"""
from typing import MutableMapping, Optional, Protocol
import logging

from psr_console.models import UserRole

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
EXPIRED_KEY = "session_expired"


class SessionProvider(Protocol):
    def get_token(self) -> Optional[str]:
        ...

    def on_unauthorized(self) -> None:
        ...


class StaticSessionProvider:
    """Fixed token; counts how often the backend rejected it."""

    def __init__(self, token: Optional[str] = None):
        self.token = token
        self.unauthorized_count = 0

    def get_token(self) -> Optional[str]:
        return self.token

    def on_unauthorized(self) -> None:
        self.unauthorized_count += 1


class MappingSessionProvider:
    """
    Token held in a mutable mapping such as `st.session_state`.

    A 401 drops the token and flags the session as expired so the next
    render can ask the user to sign in again.
    """

    def __init__(self, state: MutableMapping):
        self.state = state

    def get_token(self) -> Optional[str]:
        token = self.state.get(TOKEN_KEY)
        return token or None

    def on_unauthorized(self) -> None:
        if self.state.get(TOKEN_KEY):
            logger.warning("Backend rejected the session token; clearing it")
        self.state.pop(TOKEN_KEY, None)
        self.state[EXPIRED_KEY] = True

    def set_token(self, token: str) -> None:
        self.state[TOKEN_KEY] = token.strip()
        self.state[EXPIRED_KEY] = False


# ================================================================
# ROLE-GATED VIEWS
# ================================================================

VIEW_CHAT = "chat"
VIEW_DASHBOARD = "dashboard"
VIEW_APPLICATIONS = "applications"
VIEW_USERS = "users"
VIEW_ADMINS = "admins"
VIEW_TRAINING = "training"
VIEW_VECTOR_DB = "vector_db"

_ADMIN_VIEWS = [
    VIEW_DASHBOARD, VIEW_APPLICATIONS, VIEW_USERS, VIEW_TRAINING,
    VIEW_VECTOR_DB, VIEW_CHAT,
]

ROLE_VIEWS = {
    UserRole.SUPER_ADMIN: _ADMIN_VIEWS[:3] + [VIEW_ADMINS] + _ADMIN_VIEWS[3:],
    UserRole.ADMIN: list(_ADMIN_VIEWS),
    UserRole.ENGINEER: [VIEW_CHAT],
    UserRole.CUSTOMER: [VIEW_CHAT],
}

ROLE_NAMES = {
    UserRole.SUPER_ADMIN: "🔑 Super Admin",
    UserRole.ADMIN: "🛡️ Admin",
    UserRole.ENGINEER: "🔧 Engineer",
    UserRole.CUSTOMER: "👤 Customer",
}


def parse_role(value) -> UserRole:
    """Map a role string from the backend to a UserRole (unknown -> customer)."""
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(str(value).lower())
    except ValueError:
        logger.warning(f"Unknown role {value!r}, treating as customer")
        return UserRole.CUSTOMER


def visible_views(role) -> list[str]:
    return list(ROLE_VIEWS[parse_role(role)])


def can_access(role, view: str) -> bool:
    return view in ROLE_VIEWS[parse_role(role)]


def is_admin(role) -> bool:
    return parse_role(role) in (UserRole.ADMIN, UserRole.SUPER_ADMIN)
