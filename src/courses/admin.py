from django.contrib import admin

from courses.models import Course, CourseEnrollment, CourseFee


class CourseFeeInline(admin.TabularInline):
    model = CourseFee
    extra = 0
    fields = ("name", "amount")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "academy", "instructor_name", "status", "start_date", "end_date")
    list_filter = ("status", "academy")
    search_fields = ("code", "name", "instructor_name")
    inlines = [CourseFeeInline]


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = ("course", "enrollment_date", "trainee_count", "paid_amount", "total_amount", "daily_stat")
    list_filter = ("course",)
    raw_id_fields = ("daily_stat", "employee")
    readonly_fields = ("daily_stat", "created_at", "updated_at")
