"""Serializers for daily statistics and their review actions."""
from decimal import Decimal

from rest_framework import serializers

from courses.models import Course
from dailystats.models import DailyStat
from hr.models import Employee


class FeeBreakdownLineSerializer(serializers.Serializer):
    fee_id = serializers.IntegerField(required=False, allow_null=True)
    fee_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"))
    customer_count = serializers.IntegerField(min_value=0)


class SoldServiceLineSerializer(serializers.Serializer):
    template_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"))
    quantity = serializers.IntegerField(min_value=0)


class DailyStatSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    course_name = serializers.CharField(source="course.name", read_only=True, default=None)
    reviewed_by_name = serializers.SerializerMethodField()
    enrollment_id = serializers.SerializerMethodField()

    class Meta:
        model = DailyStat
        fields = [
            "id", "employee", "employee_name", "date",
            "targeted_customers", "confirmed_customers", "registered_customers",
            "services_sold", "sales_amount", "targeted_by_services", "sold_services",
            "course", "course_name", "course_fee", "fee_breakdown",
            "calculated_revenue", "notes",
            "status", "submitted_by", "reviewed_by", "reviewed_by_name",
            "reviewed_at", "review_notes", "enrollment_id",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_reviewed_by_name(self, obj):
        if obj.reviewed_by is None:
            return None
        return obj.reviewed_by.get_full_name() or obj.reviewed_by.email

    def get_enrollment_id(self, obj):
        enrollment = getattr(obj, "enrollment", None)
        return enrollment.pk if enrollment is not None else None


class DailyStatWriteSerializer(serializers.Serializer):
    """Validates submissions and edits; persistence goes through the services."""

    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), required=False,
    )
    date = serializers.DateField()
    targeted_customers = serializers.IntegerField(min_value=0, default=0)
    confirmed_customers = serializers.IntegerField(min_value=0, default=0)
    registered_customers = serializers.IntegerField(min_value=0, default=0)
    services_sold = serializers.IntegerField(min_value=0, default=0)
    sales_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"), default=Decimal("0"),
    )
    targeted_by_services = serializers.IntegerField(min_value=0, default=0)
    sold_services = SoldServiceLineSerializer(many=True, required=False)
    course = serializers.PrimaryKeyRelatedField(
        queryset=Course.objects.all(), required=False, allow_null=True,
    )
    course_fee = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"),
        required=False, allow_null=True,
    )
    fee_breakdown = FeeBreakdownLineSerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_fee_breakdown(self, lines):
        return [
            {key: value for key, value in dict(line).items() if value is not None}
            for line in lines
        ]

    validate_sold_services = validate_fee_breakdown

    def validate(self, attrs):
        academy = self.context.get("academy")
        course = attrs.get("course")
        if academy is not None and course is not None and course.academy_id != academy.pk:
            raise serializers.ValidationError({"course": "Formation introuvable."})
        employee = attrs.get("employee")
        if academy is not None and employee is not None and employee.academy_id != academy.pk:
            raise serializers.ValidationError({"employee": "Employe introuvable."})
        return attrs


class ReviewActionSerializer(serializers.Serializer):
    review_notes = serializers.CharField(required=False, allow_blank=True, default="")


class RejectSerializer(serializers.Serializer):
    # Emptiness is checked by the workflow so the error message stays the same
    # for every caller.
    review_notes = serializers.CharField(required=False, allow_blank=True, default="")


class BulkApproveSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)
    review_notes = serializers.CharField(required=False, allow_blank=True, default="")


class ReviewFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DailyStat.Status.choices, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    employee = serializers.IntegerField(min_value=1, required=False)


class MonthlyTotalQuerySerializer(serializers.Serializer):
    employee = serializers.IntegerField(min_value=1, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class ResetStatsSerializer(serializers.Serializer):
    employee = serializers.IntegerField(min_value=1, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    reset_daily_stats = serializers.BooleanField(default=True)
    reset_current_values = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs.get("month") is not None and attrs.get("year") is None:
            raise serializers.ValidationError({"year": "L'annee est obligatoire lorsqu'un mois est indique."})
        return attrs


class ExportFilterSerializer(ReviewFilterSerializer):
    file_type = serializers.ChoiceField(choices=["csv", "xlsx"], default="csv")
