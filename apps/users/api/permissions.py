"""Permission classes for the dashboard API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsDashboardAdmin(permissions.BasePermission):
    """
    Only team members with dashboard access may proceed.

    Anonymous requests are rejected before this check runs its body, so DRF
    answers 401 for them and 403 for authenticated users without an active
    Admin record.
    """

    message = "Admin access required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False):
            return True
        return hasattr(user, "is_dashboard_admin") and user.is_dashboard_admin()


class IsDashboardAdminOrReadOnly(IsDashboardAdmin):
    """Public reads, admin-only writes."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)
