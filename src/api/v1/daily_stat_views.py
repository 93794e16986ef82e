"""API views for daily statistics and their review workflow."""
from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response

from academies.services import resolve_academy
from api.v1.daily_stat_serializers import (
    BulkApproveSerializer,
    DailyStatSerializer,
    DailyStatWriteSerializer,
    ExportFilterSerializer,
    MonthlyTotalQuerySerializer,
    RejectSerializer,
    ResetStatsSerializer,
    ReviewActionSerializer,
    ReviewFilterSerializer,
)
from api.v1.pagination import ReviewQueuePagination, StandardResultsSetPagination
from api.v1.permissions import IsAcademyAdmin, IsReviewer
from core.export import queryset_to_csv_response, queryset_to_xlsx_response
from dailystats.exceptions import NotFoundError
from dailystats.models import DailyStat
from dailystats.services import (
    approve_daily_stat,
    bulk_approve_daily_stats,
    create_daily_stat,
    delete_daily_stat,
    list_for_review,
    monthly_totals,
    reject_daily_stat,
    reset_employee_stats,
    review_stats,
    unapprove_daily_stat,
    update_daily_stat,
)

logger = logging.getLogger("formapro")


def _own_employee(user):
    employee = getattr(user, "employee_profile", None)
    if employee is None:
        raise ValidationError({"employee": "Aucun profil employe n'est associe a ce compte."})
    return employee


class DailyStatViewSet(viewsets.ModelViewSet):
    """Daily stats: employees submit their own, reviewers approve or reject.

    Reviewers see every stat of their academy; other users only see the
    stats of their own employee profile.
    """

    serializer_class = DailyStatSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["status", "employee", "course", "date"]
    ordering_fields = ["date", "created_at", "calculated_revenue"]
    ordering = ["-date", "-created_at"]

    REVIEW_ACTIONS = ("approve", "reject", "unapprove", "bulk_approve", "review", "review_stats", "export")
    ADMIN_ACTIONS = ("destroy", "reset")

    def get_permissions(self):
        if self.action in self.REVIEW_ACTIONS:
            return [permissions.IsAuthenticated(), IsReviewer()]
        if self.action in self.ADMIN_ACTIONS:
            return [permissions.IsAuthenticated(), IsAcademyAdmin()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        user = self.request.user
        qs = DailyStat.objects.select_related("employee", "course", "reviewed_by", "enrollment")
        if getattr(user, "is_reviewer", False):
            academy = resolve_academy(self.request)
            if academy is None:
                return qs.none()
            return qs.filter(employee__academy=academy)
        return qs.filter(employee__user=user)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _write_serializer(self, request, partial=False):
        serializer = DailyStatWriteSerializer(
            data=request.data,
            partial=partial,
            context={"academy": resolve_academy(request), "request": request},
        )
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)

    def create(self, request, *args, **kwargs):
        data = self._write_serializer(request)
        requested = data.pop("employee", None)
        if request.user.is_reviewer and requested is not None:
            employee = requested
        else:
            employee = _own_employee(request.user)
            if requested is not None and requested.pk != employee.pk:
                raise PermissionDenied("Vous ne pouvez saisir que vos propres statistiques.")

        try:
            stat = create_daily_stat(employee=employee, actor=request.user, **data)
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(DailyStatSerializer(stat).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        data = self._write_serializer(request, partial=partial)
        if "employee" in data and data.pop("employee").pk != instance.employee_id:
            raise ValidationError({"employee": "Le changement d'employe n'est pas autorise."})

        try:
            stat = update_daily_stat(instance.pk, actor=request.user, **data)
        except NotFoundError as exc:
            raise NotFound(str(exc))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(DailyStatSerializer(stat).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            delete_daily_stat(instance.pk, actor=request.user)
        except NotFoundError as exc:
            raise NotFound(str(exc))
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Review transitions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        stat = self.get_object()
        serializer = ReviewActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            stat = approve_daily_stat(
                stat.pk,
                reviewer=request.user,
                notes=serializer.validated_data["review_notes"],
            )
        except NotFoundError as exc:
            raise NotFound(str(exc))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response({"success": True, "id": stat.pk, "status": stat.status})

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        stat = self.get_object()
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            stat = reject_daily_stat(
                stat.pk,
                reviewer=request.user,
                notes=serializer.validated_data["review_notes"],
            )
        except NotFoundError as exc:
            raise NotFound(str(exc))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response({"success": True, "id": stat.pk, "status": stat.status})

    @action(detail=True, methods=["post"])
    def unapprove(self, request, pk=None):
        stat = self.get_object()
        serializer = ReviewActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            stat = unapprove_daily_stat(
                stat.pk,
                reviewer=request.user,
                notes=serializer.validated_data["review_notes"],
            )
        except NotFoundError as exc:
            raise NotFound(str(exc))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response({"success": True, "id": stat.pk, "status": stat.status})

    @action(detail=False, methods=["post"], url_path="bulk-approve")
    def bulk_approve(self, request):
        serializer = BulkApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data["ids"]

        # Ids outside the reviewer's academy are treated like ineligible ones.
        visible = set(self.get_queryset().filter(pk__in=ids).values_list("pk", flat=True))
        try:
            approved = bulk_approve_daily_stats(
                [pk for pk in ids if pk in visible],
                reviewer=request.user,
                notes=serializer.validated_data["review_notes"],
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        skipped = [pk for pk in dict.fromkeys(ids) if pk not in set(approved)]
        return Response({"success": True, "approved": approved, "skipped": skipped})

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def review(self, request):
        filters_ser = ReviewFilterSerializer(data=request.query_params)
        filters_ser.is_valid(raise_exception=True)
        params = filters_ser.validated_data
        academy = resolve_academy(request)
        if academy is None:
            raise ValidationError({"academy": "Academie introuvable."})

        qs = list_for_review(
            academy=academy,
            status=params.get("status"),
            month=params.get("month"),
            year=params.get("year"),
            employee_id=params.get("employee"),
        ).select_related("enrollment")
        paginator = ReviewQueuePagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(DailyStatSerializer(page, many=True).data)

    @action(detail=False, methods=["get"], url_path="review-stats")
    def review_stats(self, request):
        filters_ser = ReviewFilterSerializer(data=request.query_params)
        filters_ser.is_valid(raise_exception=True)
        params = filters_ser.validated_data
        academy = resolve_academy(request)
        if academy is None:
            raise ValidationError({"academy": "Academie introuvable."})
        return Response(
            review_stats(academy=academy, month=params.get("month"), year=params.get("year"))
        )

    @action(detail=False, methods=["get"], url_path="export")
    def export(self, request):
        """Export the filtered review queue as CSV (default) or Excel."""
        filters_ser = ExportFilterSerializer(data=request.query_params)
        filters_ser.is_valid(raise_exception=True)
        params = filters_ser.validated_data
        academy = resolve_academy(request)
        if academy is None:
            raise ValidationError({"academy": "Academie introuvable."})

        qs = list_for_review(
            academy=academy,
            status=params.get("status"),
            month=params.get("month"),
            year=params.get("year"),
            employee_id=params.get("employee"),
        )
        columns = [
            (lambda o: o.date.strftime("%d/%m/%Y"), "Date"),
            (lambda o: o.employee.employee_code, "Matricule"),
            (lambda o: o.employee.full_name, "Employe"),
            ("targeted_customers", "Clients cibles"),
            ("confirmed_customers", "Clients confirmes"),
            ("registered_customers", "Clients inscrits"),
            ("services_sold", "Services vendus"),
            ("sales_amount", "Ventes de services"),
            ("targeted_by_services", "Clients cibles par services"),
            (lambda o: o.course.name if o.course else "", "Formation"),
            ("calculated_revenue", "Chiffre d'affaires"),
            (lambda o: o.get_status_display(), "Statut"),
            (lambda o: o.reviewed_by.get_full_name() if o.reviewed_by else "", "Revue par"),
            ("review_notes", "Notes de revue"),
        ]
        filename = f"statistiques_{academy.code.lower()}"
        if params.get("file_type") == "xlsx":
            return queryset_to_xlsx_response(qs, columns, filename, sheet_title="Statistiques")
        return queryset_to_csv_response(qs, columns, filename)

    @action(detail=False, methods=["get"], url_path="monthly-total")
    def monthly_total(self, request):
        query = MonthlyTotalQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        if request.user.is_reviewer and params.get("employee"):
            academy = resolve_academy(request)
            if academy is None or not academy.employees.filter(pk=params["employee"]).exists():
                raise NotFound("Employe introuvable.")
            employee_id = params["employee"]
        else:
            employee_id = _own_employee(request.user).pk

        totals = monthly_totals(employee_id=employee_id, month=params["month"], year=params["year"])
        return Response(totals)

    @action(detail=False, methods=["post"])
    def reset(self, request):
        serializer = ResetStatsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        academy = resolve_academy(request)
        if academy is None:
            raise ValidationError({"academy": "Academie introuvable."})
        try:
            result = reset_employee_stats(
                academy=academy,
                actor=request.user,
                employee_id=params.get("employee"),
                month=params.get("month"),
                year=params.get("year"),
                reset_daily_stats=params["reset_daily_stats"],
                reset_current_values=params["reset_current_values"],
            )
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response({"success": True, **result})
