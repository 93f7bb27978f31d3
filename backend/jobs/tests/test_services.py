"""
Workflow tests run against the in-memory repository.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from cargo.dataclasses import CommercialParameters, IntakeData
from cargo.tests.factories import make_intake
from cargo.types import JobPhase, Modality, ValidationIssueKind
from crm.models import Vendor

from ..repository import InMemoryJobRepository
from .. import services
from ..services import (
    AllocationError,
    ApprovalError,
    BidError,
    InvalidPhaseError,
    PhaseAdvanceError,
    add_quote_version,
    advance_job,
    approve_quote_version,
    award_bid,
    cancel_job,
    create_job,
    mark_quote_sent,
    record_bid,
    record_quote_outcome,
    sell_price_for_margin,
    update_intake,
)

TODAY = date(2025, 6, 1)
MANAGER = SimpleNamespace(username="manager", is_staff=True)
CLERK = SimpleNamespace(username="clerk", is_staff=False)


@pytest.fixture
def repo():
    return InMemoryJobRepository()


@pytest.fixture
def ready_job(repo):
    return create_job(repo, intake=make_intake(), today=TODAY)


class TestCreateJob:
    def test_blank_job_defaults_to_sea(self, repo):
        job = create_job(repo, today=TODAY)

        assert job.reference == "SEA-DFT-25-000001"
        assert job.phase == "DRAFT"
        assert job.modality == "SEA"
        assert job.completeness_score == 0
        assert repo.audit[-1]["action"] == "SAVE"

    def test_sequence_increments(self, repo):
        create_job(repo, today=TODAY)
        second = create_job(repo, modality=Modality.ROAD, today=TODAY)

        assert second.sequence == 2
        assert second.reference == "ROA-DFT-25-000002"

    def test_intake_modality_wins(self, ready_job):
        assert ready_job.modality == "AIR"
        assert ready_job.reference == "AIR-DFT-25-000001"
        assert ready_job.completeness_score == 100

    def test_intake_without_modality_takes_the_job_modality(self, repo):
        job = create_job(repo, modality="COURIER", intake=IntakeData(origin="SIN"), today=TODAY)

        assert job.intake.modality == Modality.COURIER
        assert job.intake.origin == "SIN"

    def test_update_intake_rescores(self, repo):
        job = create_job(repo, modality=Modality.AIR, today=TODAY)

        update_intake(job, make_intake(hs_code=""), repo)

        assert job.completeness_score == 90
        assert job.intake.commodity == "Auto spare parts"


class TestAdvanceJob:
    def test_blocked_with_every_reason(self, repo):
        job = create_job(repo, today=TODAY)

        with pytest.raises(PhaseAdvanceError) as exc:
            advance_job(job, repo)

        assert len(exc.value.errors) == 7
        assert exc.value.issues[0].kind == ValidationIssueKind.MISSING_SHIPPER
        assert job.phase == "DRAFT"

    def test_walks_to_completion(self, repo, ready_job):
        seen = []
        for _ in range(6):
            advance_job(ready_job, repo, today=TODAY)
            seen.append((ready_job.phase, ready_job.reference))

        assert seen == [
            ("INTAKE", "AIR-DFT-25-000001"),
            ("MARKET", "AIR-MKT-25-000001"),
            ("QUOTES", "AIR-MKT-25-000001"),
            ("AWARDED", "AIR-MKT-25-000001"),
            ("SHIPMENT", "AIR-TRN-25-000001"),
            ("COMPLETED", "AIR-TRN-25-000001"),
        ]

        with pytest.raises(PhaseAdvanceError, match="cannot advance from COMPLETED"):
            advance_job(ready_job, repo, today=TODAY)

    def test_cancelled_job_cannot_advance(self, repo, ready_job):
        cancel_job(ready_job, repo)

        assert ready_job.phase == "CANCELLED"
        with pytest.raises(PhaseAdvanceError):
            advance_job(ready_job, repo)

    def test_cancel_twice(self, repo, ready_job):
        cancel_job(ready_job, repo)

        with pytest.raises(InvalidPhaseError, match="already cancelled"):
            cancel_job(ready_job, repo)


class TestQuoteVersions:
    def test_healthy_margin_is_draft(self, repo, ready_job):
        version = add_quote_version(ready_job, repo, "850", "1000")

        assert version.version_no == 1
        assert version.margin_pct == Decimal("15.00")
        assert version.status == "DRAFT"
        assert version.currency == "USD"

    def test_low_margin_needs_approval(self, repo, ready_job):
        add_quote_version(ready_job, repo, "850", "1000")
        version = add_quote_version(ready_job, repo, "950", "1000", currency="eur")

        assert version.version_no == 2
        assert version.status == "PENDING_APPROVAL"
        assert version.currency == "EUR"

    def test_threshold_is_configurable(self, repo, ready_job):
        params = CommercialParameters(default_margin_percent=Decimal("20"))

        version = add_quote_version(ready_job, repo, "850", "1000", params=params)

        assert version.status == "PENDING_APPROVAL"

    def test_only_managers_approve(self, repo, ready_job):
        version = add_quote_version(ready_job, repo, "990", "1000")

        with pytest.raises(ApprovalError, match="Only managers"):
            approve_quote_version(version, repo, CLERK)
        with pytest.raises(ApprovalError):
            approve_quote_version(version, repo, None)

        approve_quote_version(version, repo, MANAGER)
        assert version.status == "DRAFT"

        with pytest.raises(ApprovalError, match="not awaiting approval"):
            approve_quote_version(version, repo, MANAGER)

    def test_pending_quote_cannot_be_sent(self, repo, ready_job):
        version = add_quote_version(ready_job, repo, "990", "1000")

        with pytest.raises(ApprovalError):
            mark_quote_sent(version, repo)

        approve_quote_version(version, repo, MANAGER)
        mark_quote_sent(version, repo)
        assert version.status == "SENT"

    @pytest.mark.parametrize(
        "buy,margin,expected",
        [("850", 15, "1000.00"), ("1000", 15, "1176.48"), ("500", 0, "500.00")],
    )
    def test_sell_price_for_margin(self, buy, margin, expected):
        assert sell_price_for_margin(buy, margin) == Decimal(expected)

    def test_sell_price_for_impossible_margin(self):
        with pytest.raises(ValueError):
            sell_price_for_margin("100", 100)


class TestVendorBids:
    def test_award_requires_market_phase(self, repo, ready_job):
        bid = record_bid(ready_job, repo, "Blue Anchor Lines", "1200")

        with pytest.raises(InvalidPhaseError):
            award_bid(bid, repo)

    def test_award_drafts_quote_at_default_margin(self, repo, ready_job):
        ready_job.phase = JobPhase.MARKET.value
        cheap = record_bid(ready_job, repo, "Falcon Air Cargo", "1000", transit_time_days=3)
        dear = record_bid(ready_job, repo, "Gulf Express", "1400", currency="aed")

        award_bid(dear, repo)
        version = award_bid(cheap, repo)

        assert cheap.is_awarded is True
        assert dear.is_awarded is False
        assert dear.currency == "AED"
        assert ready_job.phase == "AWARDED"
        assert version.buy_price == Decimal("1000")
        assert version.sell_price == Decimal("1176.48")
        assert version.buy_source == "Falcon Air Cargo"
        assert version.status == "DRAFT"
        assert [v.version_no for v in repo.load("quote_versions", job_id=ready_job.id)] == [1, 2]

    def test_award_uses_injected_margin(self, repo, ready_job):
        ready_job.phase = JobPhase.QUOTES.value
        bid = record_bid(ready_job, repo, "Falcon Air Cargo", "800")

        version = award_bid(bid, repo, params=CommercialParameters(default_margin_percent=Decimal("20")))

        assert version.sell_price == Decimal("1000.00")
        assert version.margin_pct == Decimal("20.00")

    def test_bid_from_vendor_record_takes_its_name(self, repo, ready_job):
        vendor = Vendor(name="Falcon Air Cargo", capabilities=["AIR", "COURIER"])

        bid = record_bid(ready_job, repo, "", "950", vendor=vendor)

        assert bid.vendor is vendor
        assert bid.vendor_name == "Falcon Air Cargo"

    def test_explicit_vendor_name_is_kept(self, repo, ready_job):
        vendor = Vendor(name="Falcon Air Cargo")

        bid = record_bid(ready_job, repo, "Falcon (Dubai desk)", "950", vendor=vendor)

        assert bid.vendor_name == "Falcon (Dubai desk)"

    def test_vendor_must_handle_the_modality(self, repo, ready_job):
        vendor = Vendor(name="Blue Anchor Lines", capabilities=["SEA"])

        with pytest.raises(BidError, match="does not quote AIR"):
            record_bid(ready_job, repo, "", "950", vendor=vendor)
        assert repo.load("vendor_bids") == []

    def test_bid_needs_a_vendor(self, repo, ready_job):
        with pytest.raises(BidError):
            record_bid(ready_job, repo, "", "950")


class TestQuoteOutcome:
    def _sent(self, repo, job):
        version = add_quote_version(job, repo, "800", "1000")
        return mark_quote_sent(version, repo)

    @pytest.mark.parametrize("accepted,expected", [(True, "ACCEPTED"), (False, "REJECTED")])
    def test_sent_quote_closes(self, repo, ready_job, accepted, expected):
        version = self._sent(repo, ready_job)

        record_quote_outcome(version, repo, accepted)

        assert version.status == expected

    def test_unsent_quote_cannot_close(self, repo, ready_job):
        version = add_quote_version(ready_job, repo, "800", "1000")

        with pytest.raises(ApprovalError, match="has not been sent"):
            record_quote_outcome(version, repo, True)
        assert version.status == "DRAFT"


class TestConcurrentAllocation:
    def test_create_job_retries_a_taken_sequence(self, repo, monkeypatch):
        create_job(repo, today=TODAY)
        # Another writer read the same "highest" sequence first
        sequences = iter([1, 2])
        monkeypatch.setattr(repo, "next_sequence", lambda: next(sequences))

        job = create_job(repo, today=TODAY)

        assert job.sequence == 2
        assert job.reference == "SEA-DFT-25-000002"
        assert len(repo.load("jobs")) == 2

    def test_create_job_gives_up(self, repo, monkeypatch):
        create_job(repo, today=TODAY)
        monkeypatch.setattr(repo, "next_sequence", lambda: 1)

        with pytest.raises(AllocationError, match="job sequence"):
            create_job(repo, today=TODAY)
        assert len(repo.load("jobs")) == 1

    def test_quote_version_retries_a_taken_number(self, repo, ready_job, monkeypatch):
        add_quote_version(ready_job, repo, "800", "1000")
        numbers = iter([1, 2])
        monkeypatch.setattr(services, "next_version_no", lambda job, repo: next(numbers))

        version = add_quote_version(ready_job, repo, "800", "1000")

        assert version.version_no == 2

    def test_quote_version_gives_up(self, repo, ready_job, monkeypatch):
        add_quote_version(ready_job, repo, "800", "1000")
        monkeypatch.setattr(services, "next_version_no", lambda job, repo: 1)

        with pytest.raises(AllocationError, match="quote version"):
            add_quote_version(ready_job, repo, "800", "1000")
        assert len(repo.load("quote_versions")) == 1
