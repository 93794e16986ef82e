"""Serializers for the HR module."""
from rest_framework import serializers

from hr.models import Employee


class EmployeeSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    user_email = serializers.CharField(source="user.email", read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            "id", "academy", "user", "user_email", "employee_code",
            "first_name", "last_name", "full_name", "email", "phone",
            "specialization", "status", "hire_date", "salary",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "academy", "created_at", "updated_at"]

    def validate_employee_code(self, value):
        academy = self.context.get("academy")
        if academy is None:
            return value
        qs = Employee.objects.filter(academy=academy, employee_code=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Ce matricule est deja utilise dans cette academie.")
        return value
