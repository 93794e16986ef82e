"""API views for employees, courses, alerts and the current user."""
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from academies.services import resolve_academy
from alerts.models import TargetAlert
from alerts.services import mark_all_as_read
from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsAcademyAdmin, IsReviewer
from api.v1.serializers import (
    CourseEnrollmentSerializer,
    CourseFeeSerializer,
    CourseSerializer,
    MeSerializer,
    ServiceSaleSerializer,
    TargetAlertSerializer,
)
from courses.models import Course, CourseEnrollment, CourseFee
from courses.services import course_statistics
from hr.models import Employee
from hr.serializers import EmployeeSerializer
from servicesales.models import ServiceSale


def _require_academy(request):
    academy = resolve_academy(request)
    if academy is None:
        raise ValidationError({"academy": "Academie introuvable."})
    return academy


class ReviewerWriteMixin:
    """Everybody authenticated reads; reviewers write; admins delete."""

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [permissions.IsAuthenticated()]
        if self.action == "destroy":
            return [permissions.IsAuthenticated(), IsAcademyAdmin()]
        return [permissions.IsAuthenticated(), IsReviewer()]


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

class EmployeeViewSet(ReviewerWriteMixin, viewsets.ModelViewSet):
    serializer_class = EmployeeSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["status", "specialization"]
    search_fields = ["employee_code", "first_name", "last_name", "email"]
    ordering_fields = ["first_name", "hire_date", "employee_code"]

    def get_queryset(self):
        user = self.request.user
        academy = resolve_academy(self.request)
        if academy is None:
            return Employee.objects.none()
        qs = Employee.objects.filter(academy=academy).select_related("user")
        if not user.is_reviewer:
            qs = qs.filter(user=user)
        return qs

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["academy"] = resolve_academy(self.request)
        return context

    def perform_create(self, serializer):
        serializer.save(academy=_require_academy(self.request))


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------

class CourseViewSet(ReviewerWriteMixin, viewsets.ModelViewSet):
    serializer_class = CourseSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["status"]
    search_fields = ["code", "name", "instructor_name"]
    ordering_fields = ["name", "start_date"]

    def get_queryset(self):
        academy = resolve_academy(self.request)
        if academy is None:
            return Course.objects.none()
        return Course.objects.filter(academy=academy).prefetch_related("fees")

    def perform_create(self, serializer):
        academy = _require_academy(self.request)
        if Course.objects.filter(academy=academy, code=serializer.validated_data["code"]).exists():
            raise ValidationError({"code": "Ce code de formation existe deja."})
        serializer.save(academy=academy)

    @action(detail=True, methods=["get"])
    def statistics(self, request, pk=None):
        return Response(course_statistics(self.get_object()))


class CourseFeeViewSet(ReviewerWriteMixin, viewsets.ModelViewSet):
    serializer_class = CourseFeeSerializer
    filterset_fields = ["course"]

    def get_queryset(self):
        academy = resolve_academy(self.request)
        if academy is None:
            return CourseFee.objects.none()
        return CourseFee.objects.filter(course__academy=academy).select_related("course")

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["academy"] = resolve_academy(self.request)
        return context


class CourseEnrollmentViewSet(viewsets.ReadOnlyModelViewSet):
    """Enrollments are written by the daily-stat approval workflow only."""

    serializer_class = CourseEnrollmentSerializer
    pagination_class = StandardResultsSetPagination
    permission_classes = [permissions.IsAuthenticated, IsReviewer]
    filterset_fields = ["course", "employee", "daily_stat"]
    ordering_fields = ["enrollment_date", "total_amount"]

    def get_queryset(self):
        academy = resolve_academy(self.request)
        if academy is None:
            return CourseEnrollment.objects.none()
        return (
            CourseEnrollment.objects
            .filter(course__academy=academy)
            .select_related("course", "employee")
        )


class ServiceSaleViewSet(viewsets.ReadOnlyModelViewSet):
    """Service sales booked by approved daily stats."""

    serializer_class = ServiceSaleSerializer
    pagination_class = StandardResultsSetPagination
    permission_classes = [permissions.IsAuthenticated, IsReviewer]
    filterset_fields = ["employee", "daily_stat", "sale_date"]
    ordering_fields = ["sale_date", "total_amount"]

    def get_queryset(self):
        academy = resolve_academy(self.request)
        if academy is None:
            return ServiceSale.objects.none()
        return ServiceSale.objects.filter(academy=academy).select_related("employee")


# ---------------------------------------------------------------------------
# Target alerts
# ---------------------------------------------------------------------------

class TargetAlertViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Target alerts with mark-read actions.

    Alerts are created by the target calculation engine, never directly
    via the API.  Reviewers see the alerts of their academy, employees
    only their own.
    """

    serializer_class = TargetAlertSerializer
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["employee", "alert_type", "is_read", "month", "year"]
    ordering_fields = ["created_at", "percentage"]

    def get_permissions(self):
        if self.action == "destroy":
            return [permissions.IsAuthenticated(), IsAcademyAdmin()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        user = self.request.user
        qs = TargetAlert.objects.select_related("employee", "target")
        if user.is_reviewer:
            academy = resolve_academy(self.request)
            if academy is None:
                return qs.none()
            return qs.filter(employee__academy=academy)
        return qs.filter(employee__user=user)

    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        """Mark a single alert as read."""
        alert = self.get_object()
        alert.mark_as_read(request.user)
        return Response(TargetAlertSerializer(alert).data)

    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):
        """Mark every visible unread alert as read, optionally for one employee."""
        qs = self.filter_queryset(self.get_queryset())
        employee = request.data.get("employee") if isinstance(request.data, dict) else None
        if employee:
            qs = qs.filter(employee_id=employee)
        updated = mark_all_as_read(qs, request.user)
        return Response({"detail": f"{updated} alerte(s) marquee(s) comme lue(s).", "updated": updated})

    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        qs = self.filter_queryset(self.get_queryset()).filter(is_read=False)
        return Response({"count": qs.count()})


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

class MeView(APIView):
    """
    GET /api/v1/auth/me/ - return the authenticated user's profile.
    PATCH /api/v1/auth/me/ - update first_name, last_name, phone.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)
