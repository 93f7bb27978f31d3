"""
KPI calculation over plain records, no database.
"""

from decimal import Decimal
from types import SimpleNamespace

from cargo.tests.factories import make_intake

from ..repository import InMemoryJobRepository
from ..reporting import JobKPIs, calculate_kpis, kpis_from_repo
from ..services import add_quote_version, create_job, mark_quote_sent, record_bid, record_quote_outcome


def _version(status, sell="1000", margin="20", currency="USD"):
    return SimpleNamespace(status=status, sell_price=Decimal(sell), margin_pct=Decimal(margin), currency=currency)


def _job(id, phase):
    return SimpleNamespace(id=id, phase=phase)


def _bid(job_id):
    return SimpleNamespace(job_id=job_id)


class TestCalculateKPIs:
    def test_empty_inputs_are_all_zero(self):
        kpis = calculate_kpis([], [], [])

        assert kpis == JobKPIs()
        assert kpis.win_ratio == 0
        assert kpis.revenue == {}

    def test_win_ratio_counts_closed_quotes_only(self):
        versions = [_version("ACCEPTED"), _version("REJECTED"), _version("REJECTED"), _version("SENT")]

        kpis = calculate_kpis(versions, [], [])

        assert kpis.win_ratio == Decimal("33.33")
        assert (kpis.count_confirmed, kpis.count_lost, kpis.count_active) == (1, 2, 1)

    def test_revenue_is_split_by_currency(self):
        versions = [
            _version("ACCEPTED", sell="1000.10"),
            _version("ACCEPTED", sell="500", currency="aed"),
            _version("ACCEPTED", sell="250.25"),
            _version("REJECTED", sell="9999"),
        ]

        assert calculate_kpis(versions, [], []).revenue == {
            "AED": Decimal("500.00"),
            "USD": Decimal("1250.35"),
        }

    def test_average_margin_includes_negative_margins(self):
        versions = [_version("DRAFT", margin="20"), _version("PENDING_APPROVAL", margin="-5")]

        kpis = calculate_kpis(versions, [], [])

        assert kpis.avg_margin == Decimal("7.50")
        assert kpis.count_pending == 1

    def test_bids_per_enquiry_ignores_jobs_not_in_market(self):
        jobs = [_job(1, "MARKET"), _job(2, "AWARDED"), _job(3, "DRAFT"), _job(4, "CANCELLED")]
        bids = [_bid(1), _bid(1), _bid(1), _bid(2), _bid(3), _bid(4)]

        kpis = calculate_kpis([], bids, jobs)

        assert kpis.avg_bids_per_enquiry == Decimal("2.00")

    def test_no_enquiries_means_zero_bids_per_enquiry(self):
        kpis = calculate_kpis([], [_bid(1)], [_job(1, "INTAKE")])

        assert kpis.avg_bids_per_enquiry == 0


class TestKPIsFromRepository:
    def test_reads_every_collection(self):
        repo = InMemoryJobRepository()
        job = create_job(repo, intake=make_intake())
        job.phase = "QUOTES"
        record_bid(job, repo, "Falcon Air Cargo", "800")
        won = mark_quote_sent(add_quote_version(job, repo, "800", "1000"), repo)
        record_quote_outcome(won, repo, accepted=True)
        add_quote_version(job, repo, "950", "1000")

        kpis = kpis_from_repo(repo)

        assert kpis.win_ratio == Decimal("100.00")
        assert kpis.revenue == {"USD": Decimal("1000.00")}
        assert kpis.avg_margin == Decimal("12.50")
        assert kpis.avg_bids_per_enquiry == Decimal("1.00")
        assert kpis.count_pending == 1
