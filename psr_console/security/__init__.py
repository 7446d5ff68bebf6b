"""Session access and role-based view gating."""
from psr_console.security.session import (
    MappingSessionProvider,
    SessionProvider,
    StaticSessionProvider,
    can_access,
    visible_views,
)

__all__ = [
    "MappingSessionProvider",
    "SessionProvider",
    "StaticSessionProvider",
    "can_access",
    "visible_views",
]
