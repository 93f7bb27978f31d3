from __future__ import annotations

import logging
from typing import Optional

from ..dataclasses import IntakeData
from .dimension_rules import intake_requires_dimensions, line_has_dimensions, line_has_weight
from .utils import is_present

logger = logging.getLogger(__name__)

PARTIES_POINTS = 25
CARGO_POINTS = 25
ROUTING_POINTS = 25
COMMODITY_FULL_POINTS = 25
COMMODITY_PARTIAL_POINTS = 15
MAX_SCORE = 100


def _parties_complete(intake: IntakeData) -> bool:
    return all(is_present(v) for v in (intake.shipper_id, intake.consignee_id, intake.incoterms, intake.currency))


def _cargo_complete(intake: IntakeData) -> bool:
    lines = [l for l in intake.cargo_lines if l is not None]
    if not lines:
        return False
    if not all(line_has_weight(l) for l in lines):
        return False
    if intake_requires_dimensions(intake):
        return all(line_has_dimensions(l) for l in lines)
    return True


def _routing_complete(intake: IntakeData) -> bool:
    return all(is_present(v) for v in (intake.origin, intake.destination, intake.ready_date))


def _commodity_points(intake: IntakeData) -> int:
    if not is_present(intake.commodity):
        return 0
    if is_present(intake.hs_code) or intake.is_dg:
        return COMMODITY_FULL_POINTS
    return COMMODITY_PARTIAL_POINTS


def score_completeness(intake: Optional[IntakeData]) -> int:
    """Weighted 0-100 readiness score for an intake record."""
    if intake is None:
        return 0

    score = 0
    if _parties_complete(intake):
        score += PARTIES_POINTS
    if _cargo_complete(intake):
        score += CARGO_POINTS
    if _routing_complete(intake):
        score += ROUTING_POINTS
    score += _commodity_points(intake)

    return min(score, MAX_SCORE)
