from __future__ import annotations

from rest_framework import serializers

from cargo.serializers import CargoMetricsSerializer, IntakeDataSerializer
from cargo.services.cargo_metrics import metrics_for_intake
from cargo.services.commercial_parameters import get_commercial_parameters
from cargo.types import Modality
from crm.lookups import customers_by_code
from crm.serializers import CustomerSummarySerializer

from .models import Job, QuoteVersion, VendorBid


class QuoteVersionSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuoteVersion
        fields = [
            "id", "job", "version_no", "buy_price", "sell_price", "margin_pct",
            "currency", "valid_until", "status", "buy_source", "created_by", "created_at",
        ]
        read_only_fields = ("job", "version_no", "margin_pct", "status", "created_by", "created_at")


class VendorBidSerializer(serializers.ModelSerializer):
    class Meta:
        model = VendorBid
        fields = [
            "id", "job", "vendor", "vendor_name", "amount", "currency", "transit_time_days",
            "validity_date", "free_time_days", "received_via", "received_at", "is_awarded",
        ]
        read_only_fields = ("job", "received_at", "is_awarded")
        extra_kwargs = {"vendor_name": {"required": False, "allow_blank": True}}

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Bid amount must be > 0")
        return value

    def validate(self, attrs):
        if not attrs.get("vendor") and not (attrs.get("vendor_name") or "").strip():
            raise serializers.ValidationError("Provide a vendor or a vendor_name")
        return attrs


class JobSerializer(serializers.ModelSerializer):
    intake_data = serializers.SerializerMethodField(read_only=True)
    metrics = serializers.SerializerMethodField(read_only=True)
    shipper = serializers.SerializerMethodField(read_only=True)
    consignee = serializers.SerializerMethodField(read_only=True)
    quote_versions = QuoteVersionSerializer(many=True, read_only=True)
    vendor_bids = VendorBidSerializer(many=True, read_only=True)

    class Meta:
        model = Job
        fields = [
            "id", "reference", "sequence", "phase", "modality", "intake_data",
            "completeness_score", "metrics", "shipper", "consignee", "owner", "created_at", "updated_at",
            "quote_versions", "vendor_bids",
        ]
        # Phase, reference and score only change through the workflow services
        read_only_fields = ("reference", "sequence", "phase", "completeness_score", "owner",
                            "created_at", "updated_at")

    def get_intake_data(self, obj):
        return obj.intake.to_dict()

    def get_metrics(self, obj):
        return CargoMetricsSerializer(metrics_for_intake(obj.intake, get_commercial_parameters())).data

    def _customer(self, code):
        customer = customers_by_code([code]).get((code or "").strip())
        return CustomerSummarySerializer(customer).data if customer else None

    def get_shipper(self, obj):
        return self._customer(obj.intake.shipper_id)

    def get_consignee(self, obj):
        return self._customer(obj.intake.consignee_id)


class JobCreateSerializer(serializers.Serializer):
    modality = serializers.ChoiceField(choices=[m.value for m in Modality], default=Modality.SEA.value)
    intake_data = IntakeDataSerializer(required=False)


class QuoteVersionCreateSerializer(serializers.Serializer):
    buy_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    sell_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    currency = serializers.CharField(required=False, allow_blank=True, max_length=3)
    valid_until = serializers.DateField(required=False, allow_null=True)
    buy_source = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_sell_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Sell price must be > 0")
        return value


class QuoteOutcomeSerializer(serializers.Serializer):
    accepted = serializers.BooleanField()


class JobKPISerializer(serializers.Serializer):
    win_ratio = serializers.DecimalField(max_digits=7, decimal_places=2)
    revenue = serializers.DictField(child=serializers.DecimalField(max_digits=16, decimal_places=2))
    avg_margin = serializers.DecimalField(max_digits=7, decimal_places=2)
    avg_bids_per_enquiry = serializers.DecimalField(max_digits=9, decimal_places=2)
    count_active = serializers.IntegerField()
    count_pending = serializers.IntegerField()
    count_confirmed = serializers.IntegerField()
    count_lost = serializers.IntegerField()
