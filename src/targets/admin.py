"""Django admin for the targets module."""
from django.contrib import admin

from targets.models import EmployeeReward, EmployeeTarget


@admin.register(EmployeeTarget)
class EmployeeTargetAdmin(admin.ModelAdmin):
    list_display = (
        "employee", "target_type", "custom_name", "period", "month", "year",
        "target_value", "base_value", "current_value", "progress_display", "status",
    )
    list_filter = ("status", "target_type", "period", "year", "employee__academy")
    search_fields = ("employee__first_name", "employee__last_name", "custom_name")
    raw_id_fields = ("employee",)
    readonly_fields = ("current_value", "status", "created_at", "updated_at")
    ordering = ("-year", "-month")

    def progress_display(self, obj):
        return f"{obj.progress_percentage:.0f} %"
    progress_display.short_description = "Progression"


@admin.register(EmployeeReward)
class EmployeeRewardAdmin(admin.ModelAdmin):
    list_display = ("employee", "target", "amount", "status", "approved_by", "approved_at", "paid_at")
    list_filter = ("status",)
    search_fields = ("employee__first_name", "employee__last_name", "reason")
    raw_id_fields = ("employee", "target", "approved_by")
    readonly_fields = ("approved_by", "approved_at", "paid_at", "created_at", "updated_at")
