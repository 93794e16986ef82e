from django.contrib import admin

from servicesales.models import ServiceSale


@admin.register(ServiceSale)
class ServiceSaleAdmin(admin.ModelAdmin):
    list_display = ("name", "sale_date", "quantity", "price", "total_amount", "academy", "daily_stat")
    list_filter = ("academy",)
    search_fields = ("name",)
    raw_id_fields = ("daily_stat", "employee")
    readonly_fields = ("daily_stat", "created_at", "updated_at")
