"""
Admin endpoints: engineer applications, user accounts, admin accounts and
dashboard counts.

Each method returns validated models. Shape problems in a response surface
as `APIError(category=response)` rather than an empty list.
"""
from typing import Optional
import logging

from psr_console.models import (
    ActionResult,
    CreateAdminRequest,
    DashboardStats,
    PendingApplication,
    ProfileUpdateRequest,
    UserAccount,
    UserRole,
)
from psr_console.results import validate_list, validate_model
from psr_console.services.api_client import APIError, ApiClient

logger = logging.getLogger(__name__)

DEFAULT_REJECT_REASON = "Application reviewed and rejected by admin"


def _ack(payload) -> ActionResult:
    if payload is None:
        return ActionResult()
    return validate_model(ActionResult, payload).unwrap()


class AdminService:
    def __init__(self, client: ApiClient):
        self.client = client

    # ------------------------------------------------------------
    # Engineer applications
    # ------------------------------------------------------------

    def list_pending_engineers(self) -> list[PendingApplication]:
        payload = self.client.get("/admin/engineers/pending")
        return validate_list(
            PendingApplication, payload, envelope_keys=("engineers", "applications")
        ).unwrap()

    def approve_engineer(self, application_id: int) -> ActionResult:
        logger.info(f"Approving engineer application {application_id}")
        return _ack(self.client.put(f"/admin/engineers/{application_id}/approve"))

    def reject_engineer(self, application_id: int, reason: Optional[str] = None) -> ActionResult:
        logger.info(f"Rejecting engineer application {application_id}")
        return _ack(self.client.put(
            f"/admin/engineers/{application_id}/reject",
            json={"reason": reason or DEFAULT_REJECT_REASON},
        ))

    # ------------------------------------------------------------
    # Dashboard counts
    # ------------------------------------------------------------

    def get_stats(self) -> DashboardStats:
        return validate_model(
            DashboardStats, self.client.get("/admin/stats"), envelope_key="stats"
        ).unwrap()

    def get_dashboard(self) -> DashboardStats:
        """Super-admin dashboard counts, falling back to /admin/stats."""
        try:
            payload = self.client.get("/admin/dashboard")
        except APIError as e:
            logger.warning(f"Dashboard endpoint failed ({e.message}), using /admin/stats")
            return self.get_stats()
        return validate_model(DashboardStats, payload, envelope_key="stats").unwrap()

    # ------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------

    def create_admin(self, request: CreateAdminRequest) -> ActionResult:
        result = _ack(self.client.post("/admin/create-admin", json=request.model_dump()))
        logger.info(f"Created admin account {request.email}")
        return result

    def list_admins(self) -> list[UserAccount]:
        payload = self.client.get("/admin/admins")
        return validate_list(UserAccount, payload, envelope_keys=("admins", "users")).unwrap()

    def list_users(self, role: Optional[UserRole] = None) -> list[UserAccount]:
        params = {"role": UserRole(role).value} if role else None
        payload = self.client.get("/admin/users", params=params)
        return validate_list(UserAccount, payload, envelope_keys=("users",)).unwrap()

    def get_user(self, user_id: int) -> UserAccount:
        return validate_model(
            UserAccount, self.client.get(f"/admin/users/{user_id}"), envelope_key="user"
        ).unwrap()

    def deactivate_user(self, user_id: int) -> ActionResult:
        logger.info(f"Deactivating user {user_id}")
        return _ack(self.client.delete(f"/admin/users/{user_id}"))

    def activate_user(self, user_id: int) -> ActionResult:
        return _ack(self.client.put(f"/admin/users/{user_id}/activate"))

    def suspend_user(self, user_id: int) -> ActionResult:
        return _ack(self.client.put(f"/admin/users/{user_id}/suspend"))

    def update_profile(self, update: ProfileUpdateRequest) -> ActionResult:
        return _ack(self.client.put(
            "/admin/profile", json=update.model_dump(exclude_none=True)
        ))

    def get_profile(self) -> UserAccount:
        """The signed-in user, used to pick the role-gated views."""
        return validate_model(UserAccount, self.client.get("/users/me"), envelope_key="user").unwrap()
