from __future__ import annotations

from typing import Any, Optional

from ..types import Modality, RoadTruckType, SeaLoadType, coerce_enum
from .utils import ZERO, d_or_zero


def line_value(line: Any, *names):
    """Read a cargo line attribute from a CargoLine or a JSON-shaped dict."""
    if line is None:
        return None
    for name in names:
        if isinstance(line, dict):
            if line.get(name) is not None:
                return line[name]
        elif getattr(line, name, None) is not None:
            return getattr(line, name)
    return None


def line_weight(line: Any):
    return line_value(line, "weight_kg", "weight")


def line_qty(line: Any):
    return line_value(line, "qty", "quantity", "count")


def line_dims(line: Any):
    return (
        line_value(line, "length_cm", "length"),
        line_value(line, "width_cm", "width"),
        line_value(line, "height_cm", "height"),
    )


def line_has_dimensions(line: Any) -> bool:
    return all(d_or_zero(v) > ZERO for v in line_dims(line))


def line_has_weight(line: Any) -> bool:
    return d_or_zero(line_weight(line)) > ZERO


def requires_dimensions(modality, sea_load_type=None, road_truck_type=None) -> bool:
    """
    Dimensions are mandatory for AIR, COURIER, SEA LCL and ROAD LTL.

    Full loads (FCL/FTL) and sea/road jobs whose load type has not been
    chosen yet are priced without them.
    """
    mode: Optional[Modality] = coerce_enum(Modality, modality)
    if mode in (Modality.AIR, Modality.COURIER):
        return True
    if mode == Modality.SEA:
        return coerce_enum(SeaLoadType, sea_load_type) == SeaLoadType.LCL
    if mode == Modality.ROAD:
        return coerce_enum(RoadTruckType, road_truck_type) == RoadTruckType.LTL
    return False


def intake_requires_dimensions(intake) -> bool:
    return requires_dimensions(
        getattr(intake, "modality", None),
        getattr(intake, "sea_load_type", None),
        getattr(intake, "road_truck_type", None),
    )
