from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal, ROUND_CEILING
from typing import List, Optional

from cargo.dataclasses import CommercialParameters, IntakeData, ValidationIssue
from cargo.services.commercial_parameters import get_commercial_parameters
from cargo.services.completeness import score_completeness
from cargo.services.margins import HUNDRED, margin_percent, needs_approval
from cargo.services.phase_rules import can_advance, next_phase
from cargo.services.references import generate_reference
from cargo.services.utils import TWOPLACES, ZERO, d
from cargo.types import JobPhase, Modality, coerce_enum

from .models import Job, QuoteVersion, VendorBid
from .repository import DuplicateRecord, JobRepository

logger = logging.getLogger(__name__)

# Entering these phases re-issues the reference so the phase code stays current
REFERENCE_REISSUE_PHASES = {JobPhase.MARKET, JobPhase.SHIPMENT}
AWARDABLE_PHASES = {JobPhase.MARKET, JobPhase.QUOTES, JobPhase.AWARDED}
# Retries when a concurrent writer claims the same sequence or version number
ALLOCATION_ATTEMPTS = 5


class JobWorkflowError(Exception):
    """Base exception for job workflow failures"""
    pass


class PhaseAdvanceError(JobWorkflowError):
    """Raised when a job cannot move to its next phase; carries every reason"""

    def __init__(self, errors: List[str], issues: Optional[List[ValidationIssue]] = None):
        self.errors = list(errors)
        self.issues = list(issues or [])
        super().__init__("; ".join(self.errors))


class InvalidPhaseError(JobWorkflowError):
    """Raised when an operation is not allowed in the job's current phase"""
    pass


class ApprovalError(JobWorkflowError):
    pass


class AllocationError(JobWorkflowError):
    """Raised when a sequence or version number keeps colliding with concurrent writers"""
    pass


class BidError(JobWorkflowError):
    """Raised when a vendor bid cannot be recorded for a job"""
    pass


def _params(params: Optional[CommercialParameters]) -> CommercialParameters:
    return params or get_commercial_parameters()


def sync_job(job: Job, repo: JobRepository, user=None) -> Job:
    """Refresh derived fields and persist."""
    job.completeness_score = score_completeness(job.intake)
    return repo.save("jobs", job, user)


def create_job(
    repo: JobRepository,
    user=None,
    modality=Modality.SEA,
    intake: Optional[IntakeData] = None,
    today: Optional[date] = None,
) -> Job:
    mode = coerce_enum(Modality, modality) or Modality.SEA
    intake = intake or IntakeData(modality=mode)
    if intake.modality:
        mode = intake.modality
    else:
        intake = replace(intake, modality=mode)

    owner = user if getattr(user, "is_authenticated", False) else None
    for attempt in range(1, ALLOCATION_ATTEMPTS + 1):
        sequence = repo.next_sequence()
        job = Job(
            sequence=sequence,
            phase=JobPhase.DRAFT.value,
            reference=generate_reference(mode, JobPhase.DRAFT, sequence, today=today),
            owner=owner,
        )
        job.modality = mode.value
        job.set_intake(intake)
        try:
            sync_job(job, repo, user)
        except DuplicateRecord:
            logger.warning(f"Job sequence {sequence} already taken (attempt {attempt}/{ALLOCATION_ATTEMPTS})")
            continue
        logger.info(f"Created job {job.reference}")
        return job
    raise AllocationError("Could not allocate a job sequence, please retry")


def update_intake(job: Job, intake: IntakeData, repo: JobRepository, user=None) -> Job:
    job.set_intake(intake)
    return sync_job(job, repo, user)


def advance_job(job: Job, repo: JobRepository, user=None, today: Optional[date] = None) -> Job:
    """
    Move a job one step along the phase chain.

    Raises:
        PhaseAdvanceError: with the complete list of blocking reasons
    """
    current = coerce_enum(JobPhase, job.phase)
    check = can_advance(current, job.intake)
    if not check.ok:
        logger.info(f"Advance blocked for {job.reference}: {len(check.errors)} issue(s)")
        raise PhaseAdvanceError(check.errors, check.issues)

    following = next_phase(current)
    if following is None:
        raise PhaseAdvanceError([f"Job {job.reference} cannot advance from {job.phase}"])

    job.phase = following.value
    if following in REFERENCE_REISSUE_PHASES:
        job.reference = generate_reference(job.modality, following, job.sequence, today=today)

    sync_job(job, repo, user)
    logger.info(f"Job {job.reference} advanced {current.value} -> {following.value}")
    return job


def cancel_job(job: Job, repo: JobRepository, user=None) -> Job:
    if job.phase in (JobPhase.COMPLETED.value, JobPhase.CANCELLED.value):
        raise InvalidPhaseError(f"Job {job.reference} is already {job.phase.lower()}")
    job.phase = JobPhase.CANCELLED.value
    return sync_job(job, repo, user)


def next_version_no(job: Job, repo: JobRepository) -> int:
    existing = repo.load("quote_versions", job_id=job.id)
    return max((v.version_no for v in existing), default=0) + 1


def add_quote_version(
    job: Job,
    repo: JobRepository,
    buy_price,
    sell_price,
    user=None,
    currency: Optional[str] = None,
    valid_until: Optional[date] = None,
    buy_source: str = "",
    params: Optional[CommercialParameters] = None,
) -> QuoteVersion:
    """
    Record a new priced version of the customer quote.

    Versions under the default margin are parked for manager approval.
    """
    threshold = _params(params).default_margin_percent
    buy, sell = d(buy_price), d(sell_price)
    low_margin = needs_approval(sell, buy, threshold)

    for attempt in range(1, ALLOCATION_ATTEMPTS + 1):
        version_no = next_version_no(job, repo)
        version = QuoteVersion(
            job=job,
            version_no=version_no,
            buy_price=buy,
            sell_price=sell,
            margin_pct=margin_percent(sell, buy),
            currency=(currency or job.intake.currency or "USD").upper(),
            valid_until=valid_until,
            status="PENDING_APPROVAL" if low_margin else "DRAFT",
            buy_source=buy_source,
            created_by=user if getattr(user, "is_authenticated", False) else None,
        )
        try:
            repo.save("quote_versions", version, user)
        except DuplicateRecord:
            logger.warning(f"Quote {job.reference} v{version_no} already taken (attempt {attempt}/{ALLOCATION_ATTEMPTS})")
            continue
        break
    else:
        raise AllocationError(f"Could not allocate a quote version for {job.reference}, please retry")

    if low_margin:
        logger.warning(f"Quote {job.reference} v{version_no} margin {version.margin_pct}% below {threshold}%")
    return version


def sell_price_for_margin(buy_price, target_margin_percent) -> Decimal:
    """Sell price that yields the target margin on sell, rounded up to cents."""
    buy = d(buy_price)
    margin = d(target_margin_percent)
    if margin >= HUNDRED:
        raise ValueError("Target margin must be below 100%")
    sell = buy / (1 - margin / HUNDRED)
    return sell.quantize(TWOPLACES, rounding=ROUND_CEILING)


def approve_quote_version(version: QuoteVersion, repo: JobRepository, user) -> QuoteVersion:
    if not (user is not None and getattr(user, "is_staff", False)):
        raise ApprovalError("Only managers can approve low-margin quotes")
    if version.status != "PENDING_APPROVAL":
        raise ApprovalError(f"Quote version {version.version_no} is not awaiting approval")
    version.status = "DRAFT"
    return repo.save("quote_versions", version, user)


def mark_quote_sent(version: QuoteVersion, repo: JobRepository, user=None) -> QuoteVersion:
    if version.status != "DRAFT":
        raise ApprovalError(f"Quote version {version.version_no} cannot be sent while {version.status}")
    version.status = "SENT"
    return repo.save("quote_versions", version, user)


def record_quote_outcome(version: QuoteVersion, repo: JobRepository, accepted: bool, user=None) -> QuoteVersion:
    """Close a sent quote as won (ACCEPTED) or lost (REJECTED)."""
    if version.status != "SENT":
        raise ApprovalError(f"Quote version {version.version_no} has not been sent (status {version.status})")
    version.status = "ACCEPTED" if accepted else "REJECTED"
    logger.info(f"Quote version {version.version_no} marked {version.status}")
    return repo.save("quote_versions", version, user)


def record_bid(job: Job, repo: JobRepository, vendor_name: str, amount, user=None, **fields) -> VendorBid:
    """
    Log a vendor's offer against a job.

    When a Vendor record is passed its name fills a blank `vendor_name`, and
    the vendor must quote for the job's modality.
    """
    vendor = fields.get("vendor")
    if vendor is not None:
        if not vendor.serves(job.modality):
            raise BidError(f"{vendor.name} does not quote {job.modality} freight")
        vendor_name = vendor_name or vendor.name
    if not vendor_name:
        raise BidError("A vendor name or vendor record is required")

    bid = VendorBid(
        job=job,
        vendor_name=vendor_name,
        amount=d(amount),
        currency=(fields.pop("currency", None) or job.intake.currency or "USD").upper(),
        **fields,
    )
    return repo.save("vendor_bids", bid, user)


def award_bid(
    bid: VendorBid,
    repo: JobRepository,
    user=None,
    params: Optional[CommercialParameters] = None,
) -> QuoteVersion:
    """
    Award one vendor bid and draft the customer quote from it.

    Only one bid per job stays awarded. The job moves to AWARDED and a quote
    version priced at the default margin over the bid is created.
    """
    job = bid.job
    phase = coerce_enum(JobPhase, job.phase)
    if phase not in AWARDABLE_PHASES:
        raise InvalidPhaseError(f"Bids cannot be awarded while job {job.reference} is {job.phase}")

    for other in repo.load("vendor_bids", job_id=job.id):
        if other.is_awarded and other.id != bid.id:
            other.is_awarded = False
            repo.save("vendor_bids", other, user)
    bid.is_awarded = True
    repo.save("vendor_bids", bid, user)

    job.phase = JobPhase.AWARDED.value
    sync_job(job, repo, user)

    margin = _params(params).default_margin_percent
    sell = sell_price_for_margin(bid.amount, margin) if bid.amount > ZERO else ZERO
    return add_quote_version(
        job, repo, bid.amount, sell,
        user=user,
        currency=bid.currency,
        buy_source=bid.vendor_name,
        params=params,
    )
