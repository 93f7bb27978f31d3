import pytest

from cargo.types import Modality

from ..lookups import customers_by_code
from ..models import Customer, Vendor


class TestVendorServes:
    def test_no_capabilities_listed_serves_everything(self):
        vendor = Vendor(name="Generalist")

        assert vendor.serves(Modality.AIR)
        assert vendor.serves("sea", "DXB", "LHR")

    def test_capabilities_are_case_insensitive(self):
        vendor = Vendor(name="Falcon Air Cargo", capabilities=["air", "COURIER"])

        assert vendor.serves(Modality.AIR)
        assert vendor.serves("courier")
        assert not vendor.serves(Modality.SEA)

    def test_lane_checked_only_when_both_ends_given(self):
        vendor = Vendor(name="Gulf Express", capabilities=["ROAD"], lanes=["DXB-RUH"])

        assert vendor.serves("ROAD", "dxb", "ruh")
        assert not vendor.serves("ROAD", "DXB", "DOH")
        assert vendor.serves("ROAD", "DXB", "")


@pytest.mark.django_db
class TestCustomersByCode:
    def test_resolves_known_codes(self):
        acme = Customer.objects.create(code="C-100", company_name="Acme Trading")
        Customer.objects.create(code="C-300", company_name="Other Co")

        found = customers_by_code([" C-100 ", "C-999", ""])

        assert found == {"C-100": acme}

    def test_blank_codes_skip_the_query(self, django_assert_num_queries):
        with django_assert_num_queries(0):
            assert customers_by_code(["", "  ", None]) == {}
