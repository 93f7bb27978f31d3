"""
Phase gating for logistics jobs.

Jobs move along DRAFT -> INTAKE -> MARKET -> QUOTES -> AWARDED -> SHIPMENT ->
COMPLETED. CANCELLED can be reached from anywhere but is handled by the
caller, not here. Every rule is evaluated so the operator sees the full
defect list in one pass.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..dataclasses import IntakeData, PhaseCheck, ValidationIssue
from ..types import JobPhase, ValidationIssueKind as Kind, coerce_enum
from .dimension_rules import intake_requires_dimensions, line_has_dimensions
from .utils import is_present

logger = logging.getLogger(__name__)

PHASE_CHAIN: List[JobPhase] = [
    JobPhase.DRAFT,
    JobPhase.INTAKE,
    JobPhase.MARKET,
    JobPhase.QUOTES,
    JobPhase.AWARDED,
    JobPhase.SHIPMENT,
    JobPhase.COMPLETED,
]

MISSING_INTAKE_MESSAGE = "Shipment intake data is missing"

_REQUIRED_FIELDS = [
    ("shipper_id", Kind.MISSING_SHIPPER, "Shipper identity is required"),
    ("consignee_id", Kind.MISSING_CONSIGNEE, "Consignee identity is required"),
    ("incoterms", Kind.MISSING_INCOTERMS, "Incoterms are required"),
    ("origin", Kind.MISSING_ORIGIN, "Origin is required"),
    ("destination", Kind.MISSING_DESTINATION, "Destination is required"),
]


def next_phase(phase) -> Optional[JobPhase]:
    """Following phase on the primary chain; None at the end or off-chain."""
    current = coerce_enum(JobPhase, phase)
    if current not in PHASE_CHAIN:
        return None
    idx = PHASE_CHAIN.index(current)
    if idx + 1 >= len(PHASE_CHAIN):
        return None
    return PHASE_CHAIN[idx + 1]


def collect_issues(intake: IntakeData) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    for attr, kind, message in _REQUIRED_FIELDS:
        if not is_present(getattr(intake, attr, None)):
            issues.append(ValidationIssue(kind, message))

    lines = intake.cargo_lines or []
    if not lines:
        issues.append(ValidationIssue(Kind.MISSING_CARGO_LINES, "At least one cargo line is required"))
    elif intake_requires_dimensions(intake):
        mode = intake.modality.value if intake.modality else "current"
        for idx, line in enumerate(lines, start=1):
            if not line_has_dimensions(line):
                issues.append(ValidationIssue(
                    Kind.MISSING_DIMENSIONS,
                    f"Dimensions are mandatory for cargo line #{idx} in {mode} mode",
                    line_index=idx,
                ))

    if not is_present(intake.commodity):
        issues.append(ValidationIssue(Kind.MISSING_COMMODITY, "Commodity description is required"))

    return issues


def can_advance(current_phase, intake: Optional[IntakeData]) -> PhaseCheck:
    """
    Decide whether a job in `current_phase` may move forward.

    The phase itself does not change which rules apply; it is accepted so
    callers can log and gate uniformly. Nothing is mutated here.
    """
    if intake is None:
        return PhaseCheck.from_issues([ValidationIssue(Kind.MISSING_INTAKE, MISSING_INTAKE_MESSAGE)])

    check = PhaseCheck.from_issues(collect_issues(intake))
    if not check.ok:
        logger.debug(f"Phase advance from {current_phase} blocked by {len(check.errors)} issue(s)")
    return check
