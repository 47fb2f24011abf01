"""Account and team management services."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.exceptions import DomainError
from apps.notifications.services import send_password_code_email, send_team_invite_email

from .models import Admin, CustomUser, PasswordResetToken

if TYPE_CHECKING:  # pragma: no cover
    from django.db.models import QuerySet  # type: ignore

logger = logging.getLogger(__name__)

RESET_CODE_MINUTES = 15
INVITE_CODE_HOURS = 48


class TeamMemberError(DomainError):
    """Raised when a team change would violate a membership rule."""


def issue_password_code(
    user: CustomUser,
    *,
    purpose: str = PasswordResetToken.Purpose.RESET,
    lifetime: timedelta | None = None,
) -> PasswordResetToken:
    """Invalidate older codes and create a fresh six-digit one."""
    PasswordResetToken.objects.filter(user=user, is_used=False).update(is_used=True)
    code = f"{secrets.randbelow(1_000_000):06d}"
    return PasswordResetToken.objects.create(
        user=user,
        code=code,
        purpose=purpose,
        expires_at=timezone.now() + (lifetime or timedelta(minutes=RESET_CODE_MINUTES)),
        attempts_left=3,
    )


@transaction.atomic
def request_password_reset(user: CustomUser) -> PasswordResetToken:
    token = issue_password_code(user)
    send_password_code_email(user, token.code)
    return token


def team_members() -> "QuerySet[Admin]":
    return Admin.objects.select_related("user").order_by("-created_at")


@transaction.atomic
def add_team_member(*, email: str, full_name: str, role: str, invited_by: CustomUser | None = None) -> Admin:
    """Create (or reuse) the account, grant dashboard access and send the invite."""
    email = email.strip().lower()
    user = CustomUser.objects.filter(email__iexact=email).first()
    if user is None:
        user = CustomUser.objects.create_user(email=email, password=None, full_name=full_name)
    elif hasattr(user, "admin_access"):
        raise TeamMemberError("This user is already a team member.")

    member = Admin.objects.create(user=user, full_name=full_name, role=role or "Admin")

    token = issue_password_code(
        user,
        purpose=PasswordResetToken.Purpose.INVITE,
        lifetime=timedelta(hours=INVITE_CODE_HOURS),
    )
    inviter = invited_by.display_name if invited_by is not None else ""
    if not send_team_invite_email(user, token.code, member.role, invited_by=inviter):
        logger.warning(f"Team invite email to {email} was not delivered")

    logger.info(f"Team member {email} added with role {member.role}")
    return member


def update_team_member(member: Admin, **changes) -> Admin:  # type: ignore
    allowed = ("full_name", "role", "status", "phone")
    update_fields = []
    for field in allowed:
        if field in changes and changes[field] is not None:
            setattr(member, field, changes[field])
            update_fields.append(field)
    if update_fields:
        member.save(update_fields=[*update_fields, "updated_at"])
    return member


def remove_team_member(member: Admin, *, acting_user: CustomUser) -> None:
    """Revoke dashboard access. The user account is kept."""
    if member.user_id == acting_user.pk:
        raise TeamMemberError("You cannot remove your own admin access.")
    email = member.user.email
    member.delete()
    logger.info(f"Dashboard access revoked for {email} by {acting_user.email}")
