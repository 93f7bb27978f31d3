from decimal import Decimal

from cargo.dataclasses import AirDetails, CargoLine, IntakeData, RoadDetails, SeaDetails
from cargo.types import Modality, PackagingType, RoadTruckType, SeaLoadType


def make_line(qty=1, length=100, width=100, height=100, weight=50, **kwargs) -> CargoLine:
    return CargoLine(
        id=kwargs.pop("id", "L1"),
        type=kwargs.pop("type", PackagingType.PALLET),
        qty=qty,
        length_cm=None if length is None else Decimal(str(length)),
        width_cm=None if width is None else Decimal(str(width)),
        height_cm=None if height is None else Decimal(str(height)),
        weight_kg=None if weight is None else Decimal(str(weight)),
        **kwargs,
    )


def make_intake(**overrides) -> IntakeData:
    """A complete AIR intake; override any field to knock it out."""
    fields = dict(
        modality=Modality.AIR,
        origin="DXB",
        destination="LHR",
        pickup_address="Warehouse 4, Jebel Ali Free Zone",
        delivery_address="Unit 9, Heathrow Cargo Centre",
        incoterms="FOB",
        ready_date="2025-03-01",
        commodity="Auto spare parts",
        hs_code="8708.99",
        cargo_lines=[make_line(qty=2)],
        cargo_value=Decimal("25000"),
        currency="USD",
        shipper_id="C-100",
        consignee_id="C-200",
        air_details=AirDetails(airport_origin="DXB", airport_dest="LHR"),
    )
    fields.update(overrides)
    return IntakeData(**fields)


def make_sea_intake(load_type=SeaLoadType.FCL, **overrides) -> IntakeData:
    fields = dict(
        modality=Modality.SEA,
        sea_details=SeaDetails(load_type=load_type, container_type="40HC") if load_type else None,
        air_details=None,
        cargo_lines=[make_line(length=0, width=0, height=0, weight=20000)],
    )
    fields.update(overrides)
    return make_intake(**fields)


def make_road_intake(truck_type=RoadTruckType.FTL, **overrides) -> IntakeData:
    fields = dict(
        modality=Modality.ROAD,
        road_details=RoadDetails(truck_type=truck_type, vehicle_type="Tautliner") if truck_type else None,
        air_details=None,
        cargo_lines=[make_line(length=0, width=0, height=0, weight=8000)],
    )
    fields.update(overrides)
    return make_intake(**fields)
