from django.contrib import admin

from .models import AuditLog, Job, QuoteVersion, VendorBid


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ("reference", "phase", "modality", "completeness_score", "owner", "updated_at")
    search_fields = ("reference",)
    list_filter = ("phase", "modality", "created_at")
    date_hierarchy = "created_at"
    readonly_fields = ("reference", "sequence", "completeness_score", "created_at", "updated_at")


@admin.register(QuoteVersion)
class QuoteVersionAdmin(admin.ModelAdmin):
    list_display = ("job", "version_no", "buy_price", "sell_price", "margin_pct", "currency", "status", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("job__reference",)
    readonly_fields = ("version_no", "margin_pct", "created_by", "created_at")


@admin.register(VendorBid)
class VendorBidAdmin(admin.ModelAdmin):
    list_display = ("job", "vendor_name", "amount", "currency", "transit_time_days", "received_via", "is_awarded")
    list_filter = ("received_via", "is_awarded")
    search_fields = ("vendor_name", "job__reference")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user_name", "action", "entity_type", "entity_id")
    list_filter = ("action", "entity_type")
    search_fields = ("entity_id", "user_name")

    def has_change_permission(self, request, obj=None):
        return False
