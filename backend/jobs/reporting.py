"""
Desk KPIs computed from quote versions, vendor bids and jobs.

All functions take plain iterables so they run the same over ORM querysets
and in-memory repository collections.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable

from cargo.services.margins import HUNDRED
from cargo.services.utils import ZERO, d, d_or_zero, round_2dp
from cargo.types import JobPhase

from .repository import JobRepository

logger = logging.getLogger(__name__)

# A job counts as an enquiry once it has gone to market
ENQUIRY_PHASES = {
    JobPhase.MARKET.value,
    JobPhase.QUOTES.value,
    JobPhase.AWARDED.value,
    JobPhase.SHIPMENT.value,
    JobPhase.COMPLETED.value,
}


@dataclass
class JobKPIs:
    win_ratio: Decimal = ZERO
    revenue: Dict[str, Decimal] = field(default_factory=dict)
    avg_margin: Decimal = ZERO
    avg_bids_per_enquiry: Decimal = ZERO
    count_active: int = 0
    count_pending: int = 0
    count_confirmed: int = 0
    count_lost: int = 0


def _mean(values) -> Decimal:
    values = list(values)
    if not values:
        return ZERO
    return round_2dp(sum(values, ZERO) / len(values))


def calculate_kpis(quote_versions: Iterable, vendor_bids: Iterable, jobs: Iterable) -> JobKPIs:
    """
    Summarise commercial performance.

    - win ratio: ACCEPTED over ACCEPTED + REJECTED quotes, as a percentage
    - revenue: sum of ACCEPTED sell prices, per currency
    - average margin: mean margin_pct across all quote versions
    - bids per enquiry: bids on jobs that reached MARKET or later, per such job
    - active / pending: quotes SENT / awaiting approval
    """
    versions = list(quote_versions)
    kpis = JobKPIs()

    revenue = defaultdict(lambda: ZERO)
    for v in versions:
        if v.status == "ACCEPTED":
            kpis.count_confirmed += 1
            revenue[(v.currency or "USD").upper()] += d_or_zero(v.sell_price)
        elif v.status == "REJECTED":
            kpis.count_lost += 1
        elif v.status == "SENT":
            kpis.count_active += 1
        elif v.status == "PENDING_APPROVAL":
            kpis.count_pending += 1

    closed = kpis.count_confirmed + kpis.count_lost
    if closed:
        kpis.win_ratio = round_2dp(Decimal(kpis.count_confirmed) * HUNDRED / closed)
    kpis.revenue = {currency: round_2dp(total) for currency, total in sorted(revenue.items())}

    # margin_pct may be negative, so no lenient zero coercion here
    kpis.avg_margin = _mean(d(v.margin_pct) for v in versions if v.margin_pct is not None)

    enquiry_ids = {j.id for j in jobs if j.phase in ENQUIRY_PHASES}
    if enquiry_ids:
        bids = sum(1 for b in vendor_bids if b.job_id in enquiry_ids)
        kpis.avg_bids_per_enquiry = round_2dp(Decimal(bids) / len(enquiry_ids))

    logger.debug(f"KPIs over {len(versions)} quote version(s), {len(enquiry_ids)} enquiry job(s)")
    return kpis


def kpis_from_repo(repo: JobRepository) -> JobKPIs:
    return calculate_kpis(
        repo.load("quote_versions"),
        repo.load("vendor_bids"),
        repo.load("jobs"),
    )
