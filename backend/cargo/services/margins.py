from __future__ import annotations

from decimal import Decimal

from .utils import ZERO, d, round_2dp

HUNDRED = Decimal("100")


def margin_percent(sell_price, buy_price) -> Decimal:
    """Gross margin on the sell price, in percent (0 when nothing is sold)."""
    sell = d(sell_price or 0)
    buy = d(buy_price or 0)
    if sell <= ZERO:
        return ZERO
    return round_2dp((sell - buy) / sell * HUNDRED)


def needs_approval(sell_price, buy_price, threshold_percent) -> bool:
    """Quotes under the margin threshold go to a manager before release."""
    return margin_percent(sell_price, buy_price) < d(threshold_percent)
