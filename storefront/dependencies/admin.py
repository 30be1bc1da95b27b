from dataclasses import dataclass, field
from typing import FrozenSet

from fastapi import Depends, HTTPException, Request

from storefront.config import Settings
from storefront.models.user import User
from storefront.utils.token import get_current_user


@dataclass(frozen=True)
class AdminPolicy:
    """Who may use the back-office, fixed at startup from settings."""

    admin_emails: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminPolicy":
        return cls(admin_emails=settings.admin_email_set)

    def allows(self, user: User) -> bool:
        if not user.can_login:
            return False
        if user.role == "admin":
            return True
        return (user.email or "").strip().lower() in self.admin_emails


def get_admin_policy(request: Request) -> AdminPolicy:
    return request.app.state.admin_policy


def require_admin(
    current_user: User = Depends(get_current_user),
    policy: AdminPolicy = Depends(get_admin_policy),
):
    if not policy.allows(current_user):
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
