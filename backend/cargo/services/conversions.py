from __future__ import annotations

from decimal import Decimal

from .utils import CM3_PER_M3, ZERO, d, d_or_zero


def line_volume_cbm(length_cm, width_cm, height_cm, qty=1) -> Decimal:
    """Cubic metres for `qty` units of an L x W x H (cm) package."""
    l, w, h = d_or_zero(length_cm), d_or_zero(width_cm), d_or_zero(height_cm)
    return (l * w * h) / CM3_PER_M3 * d_or_zero(qty)


def line_weight_kg(weight_kg, qty=1) -> Decimal:
    return d_or_zero(weight_kg) * d_or_zero(qty)


def volumetric_weight_kg(volume_cbm, divisor) -> Decimal:
    """
    Dimensional weight for air/courier: cm3 / divisor.

    A zero or missing divisor yields ZERO instead of raising.
    """
    div = d_or_zero(divisor)
    if div == ZERO:
        return ZERO
    return d_or_zero(volume_cbm) * CM3_PER_M3 / div


def weight_to_revenue_tons(weight_kg, kg_per_cbm) -> Decimal:
    """Sea W/M: express weight in CBM-equivalents (1000 kg ~ 1 CBM by default)."""
    ratio = d_or_zero(kg_per_cbm)
    if ratio == ZERO:
        return ZERO
    return d_or_zero(weight_kg) / ratio


def volume_to_density_weight(volume_cbm, kg_per_cbm) -> Decimal:
    """Road freight: weight equivalent of a volume at a fixed density."""
    return d_or_zero(volume_cbm) * d_or_zero(kg_per_cbm)


def compute_chargeable(weight_kg: Decimal, equivalent: Decimal) -> Decimal:
    return max(d(weight_kg), d(equivalent))
