from __future__ import annotations

import re

from rest_framework import serializers

from cargo.types import Modality

from .models import Customer, Vendor

LANE_RE = re.compile(r"^[A-Z0-9]{3,5}-[A-Z0-9]{3,5}$")


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "code", "company_name", "tier", "contact_name", "email", "phone", "address", "notes"]


class CustomerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "code", "company_name", "tier"]


class VendorSerializer(serializers.ModelSerializer):
    capabilities = serializers.ListField(
        child=serializers.ChoiceField(choices=[m.value for m in Modality]), required=False
    )
    lanes = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Vendor
        fields = [
            "id", "name", "tier", "capabilities", "lanes", "api_ready",
            "contract_expiry", "contact_name", "email", "phone",
        ]

    def validate_lanes(self, value):
        lanes = [lane.strip().upper() for lane in value]
        bad = [lane for lane in lanes if not LANE_RE.match(lane)]
        if bad:
            raise serializers.ValidationError(f"Lanes must look like ORIGIN-DESTINATION: {', '.join(bad)}")
        return lanes
