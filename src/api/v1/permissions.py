"""Custom DRF permissions for the FormaPro back-office."""
from rest_framework.permissions import BasePermission


class IsReviewer(BasePermission):
    """Administrators, managers and supervisors review daily stats."""

    message = "Seuls les administrateurs, gestionnaires et superviseurs peuvent effectuer cette action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_reviewer", False))


class IsAcademyAdmin(BasePermission):
    """Destructive operations are restricted to administrators."""

    message = "Action reservee aux administrateurs."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_admin", False))
