from django.contrib import admin

from hr.models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("employee_code", "full_name", "academy", "specialization", "status", "hire_date")
    list_filter = ("status", "specialization", "academy")
    search_fields = ("employee_code", "first_name", "last_name", "email")
    raw_id_fields = ("user",)
