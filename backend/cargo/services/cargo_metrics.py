from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..dataclasses import CargoMetrics, CommercialParameters, IntakeData
from ..types import Modality, SeaLoadType, coerce_enum
from .conversions import (
    compute_chargeable,
    line_volume_cbm,
    line_weight_kg,
    volume_to_density_weight,
    volumetric_weight_kg,
    weight_to_revenue_tons,
)
from .dimension_rules import line_dims, line_qty, line_weight
from .utils import ZERO, d_or_zero, round_2dp

logger = logging.getLogger(__name__)

DEFAULT_PARAMETERS = CommercialParameters()


def total_actual_weight(lines: Optional[Iterable[Any]]) -> Decimal:
    return sum((line_weight_kg(line_weight(l), line_qty(l)) for l in (lines or []) if l is not None), ZERO)


def total_volume_cbm(lines: Optional[Iterable[Any]]) -> Decimal:
    return sum((line_volume_cbm(*line_dims(l), line_qty(l)) for l in (lines or []) if l is not None), ZERO)


def chargeable_units(
    weight_kg: Decimal,
    volume_cbm: Decimal,
    modality,
    params: Optional[CommercialParameters] = None,
    sea_load_type=None,
) -> Decimal:
    """
    Pricing basis for the modality, rounded to 2dp.

    AIR/COURIER and ROAD return kilograms; SEA returns CBM (revenue tons).
    An unknown modality falls back to the actual weight.
    """
    params = params or DEFAULT_PARAMETERS
    weight_kg = d_or_zero(weight_kg)
    volume_cbm = d_or_zero(volume_cbm)
    mode = coerce_enum(Modality, modality)

    if mode == Modality.AIR:
        vol_weight = volumetric_weight_kg(volume_cbm, params.air_volumetric_divisor)
        units = compute_chargeable(weight_kg, vol_weight)
    elif mode == Modality.COURIER:
        vol_weight = volumetric_weight_kg(volume_cbm, params.courier_volumetric_divisor)
        units = compute_chargeable(weight_kg, vol_weight)
    elif mode == Modality.SEA:
        revenue_tons = weight_to_revenue_tons(weight_kg, params.sea_wm_ratio_kg_per_cbm)
        units = compute_chargeable(volume_cbm, revenue_tons)
        # Floor only applies once there is cargo to charge
        if coerce_enum(SeaLoadType, sea_load_type) == SeaLoadType.LCL and units > ZERO:
            units = max(units, d_or_zero(params.sea_lcl_min_cbm))
    elif mode == Modality.ROAD:
        density_weight = volume_to_density_weight(volume_cbm, params.road_density_kg_per_cbm)
        units = compute_chargeable(weight_kg, density_weight)
    else:
        logger.debug(f"No chargeable rule for modality {modality!r}; using actual weight")
        units = weight_kg

    return round_2dp(units)


def compute_cargo_metrics(
    lines: Optional[Iterable[Any]],
    modality,
    params: Optional[CommercialParameters] = None,
    sea_load_type=None,
) -> CargoMetrics:
    """
    Aggregate cargo lines into weight, volume and chargeable units.

    Missing or malformed numbers count as zero, so this never raises.
    Weight and volume are returned unrounded; callers format for display.

    Args:
        lines: CargoLine instances or JSON-shaped dicts; None means no lines
        modality: Modality member or its name
        params: tariff constants; defaults when omitted
        sea_load_type: LCL applies the minimum CBM floor for SEA

    Returns:
        CargoMetrics
    """
    lines = list(lines or [])
    weight = total_actual_weight(lines)
    volume = total_volume_cbm(lines)
    units = chargeable_units(weight, volume, modality, params, sea_load_type)
    return CargoMetrics(
        modality=coerce_enum(Modality, modality),
        total_actual_weight=weight,
        total_volume_cbm=volume,
        chargeable_units=units,
    )


def metrics_for_intake(intake: Optional[IntakeData], params: Optional[CommercialParameters] = None) -> CargoMetrics:
    if intake is None:
        return CargoMetrics(modality=None)
    return compute_cargo_metrics(intake.cargo_lines, intake.modality, params, intake.sea_load_type)
