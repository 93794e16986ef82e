"""API views for the targets module."""
from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from academies.services import resolve_academy
from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsReviewer
from targets.engine import recalculate_targets
from targets.models import EmployeeReward, EmployeeTarget
from targets.services import approve_reward, mark_reward_paid, reject_reward
from targets.target_serializers import (
    EmployeeRewardSerializer,
    EmployeeTargetSerializer,
    RewardActionSerializer,
)

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────
# Permission helpers
# ────────────────────────────────────────────────────────────

class IsAdminOrManager(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_superuser:
            return True
        return getattr(request.user, "role", None) in ("ADMIN", "MANAGER")


def _scoped(request, qs):
    """Reviewers see their academy, other users only their own rows."""
    user = request.user
    if getattr(user, "is_reviewer", False):
        academy = resolve_academy(request)
        if academy is None:
            return qs.none()
        return qs.filter(employee__academy=academy)
    return qs.filter(employee__user=user)


# ────────────────────────────────────────────────────────────
# Targets
# ────────────────────────────────────────────────────────────

class EmployeeTargetViewSet(viewsets.ModelViewSet):
    """CRUD for employee targets.

    ``current_value`` is read-only and ``status`` only accepts closing a
    target as not achieved or reopening it. Saving a target with a new base
    or target value triggers a full recomputation.
    """

    serializer_class = EmployeeTargetSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["employee", "target_type", "period", "month", "year", "status"]
    ordering_fields = ["year", "month", "target_value", "current_value"]

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [permissions.IsAuthenticated()]
        if self.action == "recalculate":
            return [permissions.IsAuthenticated(), IsReviewer()]
        return [permissions.IsAuthenticated(), IsAdminOrManager()]

    def get_queryset(self):
        qs = EmployeeTarget.objects.select_related("employee", "reward")
        return _scoped(self.request, qs)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["academy"] = resolve_academy(self.request)
        return context

    def perform_create(self, serializer):
        if resolve_academy(self.request) is None:
            raise ValidationError({"academy": "Academie introuvable."})
        target = serializer.save()
        logger.info("Target %s created for employee %s by %s", target.pk, target.employee_id, self.request.user)

    @action(detail=True, methods=["post"])
    def recalculate(self, request, pk=None):
        target = self.get_object()
        recalculate_targets(target.employee_id)
        target.refresh_from_db()
        return Response(self.get_serializer(target).data)


# ────────────────────────────────────────────────────────────
# Rewards
# ────────────────────────────────────────────────────────────

class EmployeeRewardViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Rewards are granted by the engine; reviewers approve, pay or reject them."""

    serializer_class = EmployeeRewardSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["employee", "status"]
    ordering_fields = ["created_at", "amount"]

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsReviewer()]

    def get_queryset(self):
        qs = EmployeeReward.objects.select_related("employee", "target")
        return _scoped(self.request, qs)

    def _transition(self, request, service, **kwargs):
        reward = self.get_object()
        serializer = RewardActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reward = service(reward, request.user, **{
                key: serializer.validated_data[key] for key in kwargs.get("fields", ())
            })
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(EmployeeRewardSerializer(reward).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        return self._transition(request, approve_reward, fields=("notes",))

    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        return self._transition(request, mark_reward_paid)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._transition(request, reject_reward, fields=("notes",))
