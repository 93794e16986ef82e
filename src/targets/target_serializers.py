"""DRF Serializers for the targets module."""
from __future__ import annotations

from rest_framework import serializers

from targets.models import EmployeeReward, EmployeeTarget


class EmployeeTargetSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    label = serializers.CharField(read_only=True)
    progress_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, read_only=True,
    )
    reward_status = serializers.SerializerMethodField()
    # ``achieved`` is derived from progress; managers may only reopen or close.
    status = serializers.ChoiceField(
        choices=[EmployeeTarget.Status.IN_PROGRESS, EmployeeTarget.Status.NOT_ACHIEVED],
        required=False,
    )

    class Meta:
        model = EmployeeTarget
        fields = [
            "id", "employee", "employee_name", "target_type", "custom_name", "label",
            "description", "target_value", "base_value", "current_value",
            "period", "month", "year", "reward_amount", "reward_status",
            "status", "progress_percentage", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "current_value", "created_at", "updated_at"]

    def get_reward_status(self, obj):
        reward = getattr(obj, "reward", None)
        return reward.status if reward is not None else None

    def validate_employee(self, employee):
        academy = self.context.get("academy")
        if academy is not None and employee.academy_id != academy.pk:
            raise serializers.ValidationError("Employe introuvable.")
        if self.instance is not None and employee.pk != self.instance.employee_id:
            raise serializers.ValidationError("Le changement d'employe n'est pas autorise.")
        return employee

    def validate_month(self, value):
        if value is not None and not 1 <= value <= 12:
            raise serializers.ValidationError("Le mois doit etre compris entre 1 et 12.")
        return value

    def validate(self, attrs):
        if (
            "status" in attrs
            and getattr(self.instance, "status", None) == EmployeeTarget.Status.ACHIEVED
        ):
            raise serializers.ValidationError({"status": "Le statut d'un objectif atteint ne peut pas etre modifie."})
        target_type = attrs.get("target_type", getattr(self.instance, "target_type", None))
        custom_name = attrs.get("custom_name", getattr(self.instance, "custom_name", ""))
        if target_type == EmployeeTarget.TargetType.OTHER and not (custom_name or "").strip():
            raise serializers.ValidationError({"custom_name": "Un libelle est requis pour un objectif 'Autre'."})
        return attrs


class EmployeeRewardSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    target_label = serializers.CharField(source="target.label", read_only=True)

    class Meta:
        model = EmployeeReward
        fields = [
            "id", "employee", "employee_name", "target", "target_label",
            "amount", "reason", "status", "approved_by", "approved_at",
            "paid_at", "notes", "created_at",
        ]
        read_only_fields = fields


class RewardActionSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")
