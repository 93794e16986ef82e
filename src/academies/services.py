"""Service / helper functions for the academies app."""
from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model

from academies.models import Academy, AcademyMember, AuditLog

User = get_user_model()


def create_audit_log(
    actor: User | None,
    academy: Academy | None,
    action: str,
    entity_type: str,
    entity_id: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    ip: str | None = None,
) -> AuditLog:
    """Create and return a new :class:`~academies.models.AuditLog` entry."""
    return AuditLog.objects.create(
        actor=actor,
        academy=academy,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=before,
        after_json=after,
        ip_address=ip,
    )


def get_user_academies(user: User):
    """Return a queryset of active academies the *user* belongs to."""
    if getattr(user, "is_superuser", False):
        return Academy.objects.filter(is_active=True)
    return (
        Academy.objects
        .filter(members__user=user, is_active=True)
        .distinct()
    )


def resolve_academy(request) -> Academy | None:
    """Resolve the academy a request operates on.

    An explicit ``academy`` query/body parameter wins when the user is a
    member (superusers may target any active academy).  Otherwise the
    user's default membership is used, then any membership.
    """
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None

    academy_id = request.query_params.get("academy")
    if not academy_id:
        payload = getattr(request, "data", {}) or {}
        if isinstance(payload, dict):
            academy_id = payload.get("academy")
    if academy_id:
        try:
            return get_user_academies(user).filter(pk=int(academy_id)).first()
        except (TypeError, ValueError):
            return None

    membership = (
        AcademyMember.objects
        .filter(user=user, academy__is_active=True)
        .select_related("academy")
        .order_by("-is_default", "academy_id")
        .first()
    )
    if membership:
        return membership.academy

    if getattr(user, "is_superuser", False):
        return Academy.objects.filter(is_active=True).order_by("name").first()
    return None
