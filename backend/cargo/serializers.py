from __future__ import annotations

from rest_framework import serializers

from .dataclasses import IntakeData
from .types import Modality, PackagingType, RoadTruckType, SeaLoadType


def _choices(enum_cls):
    return [m.value for m in enum_cls]


class CargoLineSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=_choices(PackagingType), required=False, allow_null=True)
    qty = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    length_cm = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)
    width_cm = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)
    height_cm = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)
    weight_kg = serializers.DecimalField(max_digits=14, decimal_places=3, required=False, allow_null=True, min_value=0)
    description = serializers.CharField(required=False, allow_blank=True)
    is_stackable = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_internal_value(self, data):
        # Older clients post weight/length/width/height without units
        if isinstance(data, dict):
            q = dict(data)
            for legacy, current in (("weight", "weight_kg"), ("length", "length_cm"),
                                    ("width", "width_cm"), ("height", "height_cm")):
                if legacy in q and current not in q:
                    q[current] = q.pop(legacy)
            data = q
        return super().to_internal_value(data)


class SeaDetailsSerializer(serializers.Serializer):
    load_type = serializers.ChoiceField(choices=_choices(SeaLoadType), required=False, allow_null=True)
    container_type = serializers.CharField(required=False, allow_blank=True)
    vessel = serializers.CharField(required=False, allow_blank=True)
    cutoff = serializers.CharField(required=False, allow_blank=True)


class AirDetailsSerializer(serializers.Serializer):
    airport_origin = serializers.CharField(required=False, allow_blank=True)
    airport_dest = serializers.CharField(required=False, allow_blank=True)
    airline = serializers.CharField(required=False, allow_blank=True)


class CourierDetailsSerializer(serializers.Serializer):
    service_level = serializers.CharField(required=False, allow_blank=True)
    account_no = serializers.CharField(required=False, allow_blank=True)
    is_door_to_door = serializers.BooleanField(required=False, default=False)


class RoadDetailsSerializer(serializers.Serializer):
    truck_type = serializers.ChoiceField(choices=_choices(RoadTruckType), required=False, allow_null=True)
    vehicle_type = serializers.CharField(required=False, allow_blank=True)
    is_temperature_controlled = serializers.BooleanField(required=False, default=False)


class IntakeDataSerializer(serializers.Serializer):
    """
    Intake payload as edited by the job form. Every field is optional:
    readiness is judged by the phase rules, not by request validation.
    """
    modality = serializers.ChoiceField(choices=_choices(Modality), required=False, allow_null=True)
    origin = serializers.CharField(required=False, allow_blank=True)
    destination = serializers.CharField(required=False, allow_blank=True)
    pickup_address = serializers.CharField(required=False, allow_blank=True)
    delivery_address = serializers.CharField(required=False, allow_blank=True)
    incoterms = serializers.CharField(required=False, allow_blank=True, max_length=16)
    ready_date = serializers.CharField(required=False, allow_blank=True)
    commodity = serializers.CharField(required=False, allow_blank=True)
    hs_code = serializers.CharField(required=False, allow_blank=True, max_length=16)
    cargo_lines = CargoLineSerializer(many=True, required=False)
    cargo_value = serializers.DecimalField(max_digits=16, decimal_places=2, required=False, allow_null=True, min_value=0)
    currency = serializers.CharField(required=False, allow_blank=True, max_length=3)
    is_dg = serializers.BooleanField(required=False, default=False)
    temp_control = serializers.BooleanField(required=False, default=False)
    shipper_id = serializers.CharField(required=False, allow_blank=True)
    consignee_id = serializers.CharField(required=False, allow_blank=True)
    handling_notes = serializers.CharField(required=False, allow_blank=True)
    insurance_requested = serializers.BooleanField(required=False, default=False)
    sea_details = SeaDetailsSerializer(required=False, allow_null=True)
    air_details = AirDetailsSerializer(required=False, allow_null=True)
    courier_details = CourierDetailsSerializer(required=False, allow_null=True)
    road_details = RoadDetailsSerializer(required=False, allow_null=True)

    def validate_currency(self, value: str) -> str:
        return (value or "").strip().upper()

    def validate_incoterms(self, value: str) -> str:
        return (value or "").strip().upper()

    def to_intake(self) -> IntakeData:
        return IntakeData.from_dict(self.validated_data)


class CargoMetricsSerializer(serializers.Serializer):
    modality = serializers.CharField(allow_null=True)
    # Weight and volume keep full precision; only chargeable units are rounded
    total_actual_weight = serializers.DecimalField(max_digits=None, decimal_places=None)
    total_volume_cbm = serializers.DecimalField(max_digits=None, decimal_places=None)
    chargeable_units = serializers.DecimalField(max_digits=18, decimal_places=2)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.modality is not None:
            data["modality"] = instance.modality.value
        return data


class ValidationIssueSerializer(serializers.Serializer):
    kind = serializers.SerializerMethodField()
    message = serializers.CharField()
    line_index = serializers.IntegerField(allow_null=True)

    def get_kind(self, obj) -> str:
        return obj.kind.value


class PhaseCheckSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    errors = serializers.ListField(child=serializers.CharField())
    issues = ValidationIssueSerializer(many=True)
