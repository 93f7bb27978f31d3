from typing import Dict, Iterable

from .models import Customer


def customers_by_code(codes: Iterable[str]) -> Dict[str, Customer]:
    """Resolve intake shipper/consignee ids to Customer records; unknown codes are left out."""
    wanted = {c.strip() for c in codes if c and c.strip()}
    if not wanted:
        return {}
    return {c.code: c for c in Customer.objects.filter(code__in=wanted)}
