from django.contrib import admin

from alerts.models import TargetAlert


@admin.register(TargetAlert)
class TargetAlertAdmin(admin.ModelAdmin):
    list_display = ("created_at", "employee", "alert_type", "percentage", "is_read", "notified_owner")
    list_filter = ("alert_type", "is_read", "notified_owner", "year", "month")
    search_fields = ("employee__first_name", "employee__last_name", "message")
    readonly_fields = (
        "employee", "target", "alert_type", "percentage", "target_type",
        "target_value", "achieved_value", "message", "month", "year",
        "read_by", "read_at", "created_at", "updated_at",
    )

    def has_add_permission(self, request):
        return False
