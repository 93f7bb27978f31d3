from enum import Enum


class Modality(str, Enum):
    SEA = "SEA"
    AIR = "AIR"
    COURIER = "COURIER"
    ROAD = "ROAD"


class JobPhase(str, Enum):
    DRAFT = "DRAFT"
    INTAKE = "INTAKE"
    MARKET = "MARKET"
    QUOTES = "QUOTES"
    AWARDED = "AWARDED"
    SHIPMENT = "SHIPMENT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PackagingType(str, Enum):
    PALLET = "PALLET"
    BOX = "BOX"
    CRATE = "CRATE"
    LOOSE = "LOOSE"
    CONTAINER = "CONTAINER"


class SeaLoadType(str, Enum):
    LCL = "LCL"
    FCL = "FCL"


class RoadTruckType(str, Enum):
    LTL = "LTL"
    FTL = "FTL"


class ValidationIssueKind(str, Enum):
    MISSING_INTAKE = "MISSING_INTAKE"
    MISSING_SHIPPER = "MISSING_SHIPPER"
    MISSING_CONSIGNEE = "MISSING_CONSIGNEE"
    MISSING_INCOTERMS = "MISSING_INCOTERMS"
    MISSING_ORIGIN = "MISSING_ORIGIN"
    MISSING_DESTINATION = "MISSING_DESTINATION"
    MISSING_CARGO_LINES = "MISSING_CARGO_LINES"
    MISSING_DIMENSIONS = "MISSING_DIMENSIONS"
    MISSING_COMMODITY = "MISSING_COMMODITY"


def coerce_enum(enum_cls, value):
    """Return the enum member for `value`, or None when it does not match."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        return None
