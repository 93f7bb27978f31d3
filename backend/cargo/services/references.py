from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Union

from ..types import JobPhase, Modality, coerce_enum

PHASE_CODES = {
    JobPhase.DRAFT: "DFT",
    JobPhase.INTAKE: "INT",
    JobPhase.MARKET: "MKT",
    JobPhase.QUOTES: "QTE",
    JobPhase.AWARDED: "AWD",
    JobPhase.SHIPMENT: "TRN",
    JobPhase.COMPLETED: "CLS",
    JobPhase.CANCELLED: "CAN",
}
DEFAULT_PHASE_CODE = "DFT"
DEFAULT_MODALITY = Modality.SEA.value

Clock = Callable[[], Union[date, datetime]]


def phase_code(phase) -> str:
    return PHASE_CODES.get(coerce_enum(JobPhase, phase), DEFAULT_PHASE_CODE)


def modality_code(modality) -> str:
    if isinstance(modality, Modality):
        name = modality.value
    else:
        name = str(modality or "").strip() or DEFAULT_MODALITY
    return name[:3].upper()


def generate_reference(
    modality,
    phase,
    sequence: int,
    today: Optional[Union[date, datetime]] = None,
    clock: Optional[Clock] = None,
) -> str:
    """
    Build a job reference such as SEA-DFT-25-000007.

    The year comes from `today`, else `clock()`, else the current date.
    Uniqueness is the caller's job; pass a distinct sequence.
    """
    if today is None:
        today = clock() if clock else date.today()
    yy = f"{today.year % 100:02d}"
    seq = str(int(sequence)).zfill(6)
    return f"{modality_code(modality)}-{phase_code(phase)}-{yy}-{seq}"
