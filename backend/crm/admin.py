from django.contrib import admin

from .models import Customer, Vendor


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("code", "company_name", "tier", "contact_name", "email")
    list_filter = ("tier",)
    search_fields = ("code", "company_name")


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("name", "tier", "api_ready", "contract_expiry")
    list_filter = ("tier", "api_ready")
    search_fields = ("name",)
