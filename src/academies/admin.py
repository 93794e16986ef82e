from django.contrib import admin

from academies.models import Academy, AcademyMember, AuditLog


class AcademyMemberInline(admin.TabularInline):
    model = AcademyMember
    extra = 0
    autocomplete_fields = ("user",)


@admin.register(Academy)
class AcademyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "currency", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code")
    inlines = [AcademyMemberInline]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "entity_type", "entity_id", "actor", "academy")
    list_filter = ("action", "entity_type")
    search_fields = ("entity_id", "actor__email")
    readonly_fields = (
        "actor", "academy", "action", "entity_type", "entity_id",
        "before_json", "after_json", "ip_address", "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
