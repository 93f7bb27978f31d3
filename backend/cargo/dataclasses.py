from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from .services.utils import ZERO, d
from .types import (
    Modality,
    PackagingType,
    RoadTruckType,
    SeaLoadType,
    ValidationIssueKind,
    coerce_enum,
)


def _opt_decimal(val) -> Optional[Decimal]:
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        return d(val)
    except (InvalidOperation, ValueError, TypeError):
        return None


def _opt_int(val) -> Optional[int]:
    dec = _opt_decimal(val)
    if dec is None or not dec.is_finite():
        return None
    return int(dec)


def _text(val) -> str:
    return "" if val is None else str(val)


TRUE_STRINGS = {"true", "1", "yes", "y", "on"}


def _flag(val) -> bool:
    """Booleans from JSON, form posts or legacy string flags ("false" is False)."""
    if isinstance(val, str):
        return val.strip().lower() in TRUE_STRINGS
    return bool(val)


def _pick(data: Dict[str, Any], *keys, default=None):
    """First present key wins; lets callers post snake_case or legacy camelCase."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class CargoLine:
    id: str = ""
    type: Optional[PackagingType] = None
    qty: Optional[int] = None
    length_cm: Optional[Decimal] = None
    width_cm: Optional[Decimal] = None
    height_cm: Optional[Decimal] = None
    weight_kg: Optional[Decimal] = None
    description: str = ""
    is_stackable: bool = False
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CargoLine":
        data = data or {}
        return cls(
            id=_text(data.get("id")),
            type=coerce_enum(PackagingType, data.get("type")),
            qty=_opt_int(_pick(data, "qty", "quantity", "count")),
            length_cm=_opt_decimal(_pick(data, "length_cm", "length")),
            width_cm=_opt_decimal(_pick(data, "width_cm", "width")),
            height_cm=_opt_decimal(_pick(data, "height_cm", "height")),
            weight_kg=_opt_decimal(_pick(data, "weight_kg", "weight")),
            description=_text(data.get("description")),
            is_stackable=_flag(_pick(data, "is_stackable", "isStackable", default=False)),
            notes=_text(data.get("notes")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["type"] = self.type.value if self.type else None
        for key in ("length_cm", "width_cm", "height_cm", "weight_kg"):
            if out[key] is not None:
                out[key] = str(out[key])
        return out


@dataclass(frozen=True)
class SeaDetails:
    load_type: Optional[SeaLoadType] = None
    container_type: str = ""
    vessel: str = ""
    cutoff: str = ""


@dataclass(frozen=True)
class AirDetails:
    airport_origin: str = ""
    airport_dest: str = ""
    airline: str = ""


@dataclass(frozen=True)
class CourierDetails:
    service_level: str = ""
    account_no: str = ""
    is_door_to_door: bool = False


@dataclass(frozen=True)
class RoadDetails:
    truck_type: Optional[RoadTruckType] = None
    vehicle_type: str = ""
    is_temperature_controlled: bool = False


@dataclass(frozen=True)
class IntakeData:
    """
    Full shipment details for one job.

    Treated as a value object: edits build a new instance with
    dataclasses.replace(). `cargo_lines` is always a list.
    """
    modality: Optional[Modality] = None
    origin: str = ""
    destination: str = ""
    pickup_address: str = ""
    delivery_address: str = ""
    incoterms: str = ""
    ready_date: str = ""
    commodity: str = ""
    hs_code: str = ""
    cargo_lines: List[CargoLine] = field(default_factory=list)
    cargo_value: Decimal = ZERO
    currency: str = ""
    is_dg: bool = False
    temp_control: bool = False
    shipper_id: str = ""
    consignee_id: str = ""
    handling_notes: str = ""
    insurance_requested: bool = False
    sea_details: Optional[SeaDetails] = None
    air_details: Optional[AirDetails] = None
    courier_details: Optional[CourierDetails] = None
    road_details: Optional[RoadDetails] = None

    def __post_init__(self):
        if self.cargo_lines is None:
            object.__setattr__(self, "cargo_lines", [])

    @property
    def sea_load_type(self) -> Optional[SeaLoadType]:
        return self.sea_details.load_type if self.sea_details else None

    @property
    def road_truck_type(self) -> Optional[RoadTruckType]:
        return self.road_details.truck_type if self.road_details else None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "IntakeData":
        data = data or {}
        sea = _pick(data, "sea_details", "seaDetails")
        air = _pick(data, "air_details", "airDetails")
        courier = _pick(data, "courier_details", "courierDetails")
        road = _pick(data, "road_details", "roadDetails")
        lines = _pick(data, "cargo_lines", "cargoLines", default=[]) or []
        return cls(
            modality=coerce_enum(Modality, data.get("modality")),
            origin=_text(data.get("origin")),
            destination=_text(data.get("destination")),
            pickup_address=_text(_pick(data, "pickup_address", "pickupAddress")),
            delivery_address=_text(_pick(data, "delivery_address", "deliveryAddress")),
            incoterms=_text(data.get("incoterms")),
            ready_date=_text(_pick(data, "ready_date", "readyDate")),
            commodity=_text(data.get("commodity")),
            hs_code=_text(_pick(data, "hs_code", "hsCode")),
            cargo_lines=[CargoLine.from_dict(line) for line in lines],
            cargo_value=_opt_decimal(_pick(data, "cargo_value", "cargoValue")) or ZERO,
            currency=_text(data.get("currency")),
            is_dg=_flag(_pick(data, "is_dg", "isDG", default=False)),
            temp_control=_flag(_pick(data, "temp_control", "tempControl", default=False)),
            shipper_id=_text(_pick(data, "shipper_id", "shipperId")),
            consignee_id=_text(_pick(data, "consignee_id", "consigneeId")),
            handling_notes=_text(_pick(data, "handling_notes", "handlingNotes")),
            insurance_requested=_flag(_pick(data, "insurance_requested", "insuranceRequested", default=False)),
            sea_details=SeaDetails(
                load_type=coerce_enum(SeaLoadType, _pick(sea, "load_type", "type")),
                container_type=_text(_pick(sea, "container_type", "containerType")),
                vessel=_text(sea.get("vessel")),
                cutoff=_text(sea.get("cutoff")),
            ) if isinstance(sea, dict) else None,
            air_details=AirDetails(
                airport_origin=_text(_pick(air, "airport_origin", "airportOrigin")),
                airport_dest=_text(_pick(air, "airport_dest", "airportDest")),
                airline=_text(air.get("airline")),
            ) if isinstance(air, dict) else None,
            courier_details=CourierDetails(
                service_level=_text(_pick(courier, "service_level", "serviceLevel")),
                account_no=_text(_pick(courier, "account_no", "accountNo")),
                is_door_to_door=_flag(_pick(courier, "is_door_to_door", "isDoorToDoor", default=False)),
            ) if isinstance(courier, dict) else None,
            road_details=RoadDetails(
                truck_type=coerce_enum(RoadTruckType, _pick(road, "truck_type", "truckType")),
                vehicle_type=_text(_pick(road, "vehicle_type", "vehicleType")),
                is_temperature_controlled=_flag(
                    _pick(road, "is_temperature_controlled", "isTemperatureControlled", default=False)
                ),
            ) if isinstance(road, dict) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe projection used for persistence."""
        out: Dict[str, Any] = {
            "modality": self.modality.value if self.modality else None,
            "origin": self.origin,
            "destination": self.destination,
            "pickup_address": self.pickup_address,
            "delivery_address": self.delivery_address,
            "incoterms": self.incoterms,
            "ready_date": self.ready_date,
            "commodity": self.commodity,
            "hs_code": self.hs_code,
            "cargo_lines": [line.to_dict() for line in self.cargo_lines],
            "cargo_value": str(self.cargo_value),
            "currency": self.currency,
            "is_dg": self.is_dg,
            "temp_control": self.temp_control,
            "shipper_id": self.shipper_id,
            "consignee_id": self.consignee_id,
            "handling_notes": self.handling_notes,
            "insurance_requested": self.insurance_requested,
            "sea_details": None,
            "air_details": asdict(self.air_details) if self.air_details else None,
            "courier_details": asdict(self.courier_details) if self.courier_details else None,
            "road_details": None,
        }
        if self.sea_details:
            sea = asdict(self.sea_details)
            sea["load_type"] = self.sea_details.load_type.value if self.sea_details.load_type else None
            out["sea_details"] = sea
        if self.road_details:
            road = asdict(self.road_details)
            road["truck_type"] = self.road_details.truck_type.value if self.road_details.truck_type else None
            out["road_details"] = road
        return out


@dataclass(frozen=True)
class CommercialParameters:
    """Tariff constants the engine is parameterised with."""
    air_volumetric_divisor: Decimal = Decimal("6000")
    courier_volumetric_divisor: Decimal = Decimal("5000")
    sea_wm_ratio_kg_per_cbm: Decimal = Decimal("1000")
    sea_lcl_min_cbm: Decimal = Decimal("1")
    road_density_kg_per_cbm: Decimal = Decimal("333")
    default_margin_percent: Decimal = Decimal("15")


@dataclass
class CargoMetrics:
    modality: Optional[Modality]
    total_actual_weight: Decimal = ZERO
    total_volume_cbm: Decimal = ZERO
    chargeable_units: Decimal = ZERO


@dataclass
class ValidationIssue:
    kind: ValidationIssueKind
    message: str
    line_index: Optional[int] = None


@dataclass
class PhaseCheck:
    ok: bool
    errors: List[str] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue]) -> "PhaseCheck":
        return cls(ok=not issues, errors=[i.message for i in issues], issues=list(issues))

    def kinds(self) -> List[ValidationIssueKind]:
        return [i.kind for i in self.issues]
