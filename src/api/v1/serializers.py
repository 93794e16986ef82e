"""Serializers for the FormaPro API v1."""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from alerts.models import TargetAlert
from courses.models import Course, CourseEnrollment, CourseFee
from servicesales.models import ServiceSale

User = get_user_model()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class MeSerializer(serializers.ModelSerializer):
    employee_id = serializers.SerializerMethodField()
    is_reviewer = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id", "email", "first_name", "last_name", "phone",
            "role", "is_reviewer", "employee_id",
        ]
        read_only_fields = ["id", "email", "role"]

    def get_employee_id(self, obj):
        employee = getattr(obj, "employee_profile", None)
        return employee.pk if employee is not None else None


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------

class CourseFeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = CourseFee
        fields = ["id", "course", "name", "amount", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_course(self, course):
        academy = self.context.get("academy")
        if academy is not None and course.academy_id != academy.pk:
            raise serializers.ValidationError("Formation introuvable.")
        return course


class CourseSerializer(serializers.ModelSerializer):
    fees = CourseFeeSerializer(many=True, read_only=True)

    class Meta:
        model = Course
        fields = [
            "id", "academy", "code", "name", "instructor_name",
            "start_date", "end_date", "status", "fees",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "academy", "created_at", "updated_at"]

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "La date de fin doit suivre la date de debut."})
        return attrs


class CourseEnrollmentSerializer(serializers.ModelSerializer):
    course_name = serializers.CharField(source="course.name", read_only=True)
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)

    class Meta:
        model = CourseEnrollment
        fields = [
            "id", "course", "course_name", "fee", "employee", "employee_name",
            "daily_stat", "trainee_count", "paid_amount", "total_amount",
            "enrollment_date", "notes", "created_at",
        ]
        read_only_fields = fields


class ServiceSaleSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default=None)

    class Meta:
        model = ServiceSale
        fields = [
            "id", "name", "price", "quantity", "total_amount", "sale_date",
            "employee", "employee_name", "daily_stat", "notes", "created_at",
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------

class TargetAlertSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    alert_type_display = serializers.CharField(source="get_alert_type_display", read_only=True)

    class Meta:
        model = TargetAlert
        fields = [
            "id", "employee", "employee_name", "target", "alert_type",
            "alert_type_display", "percentage", "target_type", "target_value",
            "achieved_value", "message", "month", "year",
            "is_read", "read_by", "read_at", "notified_owner", "created_at",
        ]
        read_only_fields = fields
