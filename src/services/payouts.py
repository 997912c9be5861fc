"""Inspector payouts and price formatting."""

import math
from typing import NamedTuple, Optional

from src.utils.app_config import AppConfig


class Currency(NamedTuple):
    code: str
    symbol: str
    symbol_after: bool
    decimal_places: int


CURRENCIES = {
    c.code: c for c in (
        Currency("AUD", "$", False, 2),
        Currency("NZD", "$", False, 2),
        Currency("USD", "$", False, 2),
        Currency("CAD", "$", False, 2),
        Currency("HKD", "$", False, 2),
        Currency("SGD", "$", False, 2),
        Currency("GBP", "£", False, 2),
        Currency("EUR", "€", False, 2),
        Currency("JPY", "¥", False, 0),
        Currency("CNY", "¥", False, 2),
        Currency("INR", "₹", False, 2),
        Currency("KRW", "₩", False, 0),
        Currency("CHF", "Fr", False, 2),
        Currency("SEK", "kr", True, 2),
        Currency("NOK", "kr", True, 2),
        Currency("DKK", "kr", True, 2),
        Currency("AED", "د.إ", False, 2),
        Currency("ZAR", "R", False, 2),
    )
}

DEFAULT_CURRENCY = "AUD"


def inspector_earnings(agreed_price: Optional[float], share: Optional[float] = None) -> int:
    """Amount paid to the inspector for a job, rounded to a whole unit."""
    if share is None:
        share = AppConfig.INSPECTOR_PAYOUT_SHARE
    if not 0 <= share <= 1:
        raise ValueError(f"Payout share must be between 0 and 1, got {share}")
    # half-up, as shown to users
    return math.floor((agreed_price or 0) * share + 0.5)


def format_price(amount: float, currency: Optional[str] = None, whole_units: bool = True) -> str:
    """Render ``amount`` with the currency's symbol, e.g. ``$1,250`` or ``1 250 kr``."""
    code = (currency or DEFAULT_CURRENCY).upper()
    known = CURRENCIES.get(code)
    if known is None:
        return f"{code} {amount:,.0f}" if whole_units else f"{code} {amount:,.2f}"

    places = 0 if whole_units else known.decimal_places
    number = f"{amount:,.{places}f}"
    if known.symbol_after:
        return f"{number.replace(',', ' ')} {known.symbol}"
    return f"{known.symbol}{number}"
