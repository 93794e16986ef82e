"""Django admin for daily statistics.

Status changes go through the workflow services so that enrollments and
target progress stay consistent with what the API does.
"""
from django.contrib import admin, messages

from dailystats.exceptions import DailyStatError
from dailystats.models import DailyStat
from dailystats.services import (
    approve_daily_stat,
    bulk_approve_daily_stats,
    delete_daily_stat,
    unapprove_daily_stat,
)


@admin.register(DailyStat)
class DailyStatAdmin(admin.ModelAdmin):
    list_display = (
        "date", "employee", "status", "confirmed_customers",
        "course", "calculated_revenue", "reviewed_by",
    )
    list_filter = ("status", "employee__academy", "date")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code")
    date_hierarchy = "date"
    raw_id_fields = ("employee", "course", "submitted_by", "reviewed_by")
    readonly_fields = (
        "status", "calculated_revenue", "reviewed_by", "reviewed_at",
        "review_notes", "submitted_by", "created_at", "updated_at",
    )
    actions = ("approve_selected", "unapprove_selected")

    def has_change_permission(self, request, obj=None):
        # Figures are edited through the API so that revenue and targets follow.
        return False

    @admin.action(description="Approuver les statistiques selectionnees")
    def approve_selected(self, request, queryset):
        ids = list(queryset.filter(status=DailyStat.Status.PENDING).values_list("pk", flat=True))
        approved = bulk_approve_daily_stats(ids, reviewer=request.user)
        self.message_user(request, f"{len(approved)} statistique(s) approuvee(s).")

    @admin.action(description="Desapprouver les statistiques selectionnees")
    def unapprove_selected(self, request, queryset):
        done = 0
        for stat_id in queryset.values_list("pk", flat=True):
            try:
                unapprove_daily_stat(stat_id, reviewer=request.user, notes="Admin")
                done += 1
            except DailyStatError as exc:
                self.message_user(request, f"#{stat_id} : {exc}", level=messages.WARNING)
        self.message_user(request, f"{done} statistique(s) desapprouvee(s).")

    def delete_model(self, request, obj):
        delete_daily_stat(obj.pk, actor=request.user)

    def delete_queryset(self, request, queryset):
        for stat_id in list(queryset.values_list("pk", flat=True)):
            delete_daily_stat(stat_id, actor=request.user)
