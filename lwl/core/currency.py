"""Display currencies for subscription pricing."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

SupportedCurrency = Literal["USD", "EUR", "GBP", "TRY"]


@dataclass(frozen=True, slots=True)
class CurrencyDetails:
    code: SupportedCurrency
    symbol: str
    name: str
    base_multiplier: float  # against the USD base price


CURRENCIES: dict[str, CurrencyDetails] = {
    "USD": CurrencyDetails("USD", "$", "US Dollar", 1.0),
    "EUR": CurrencyDetails("EUR", "€", "Euro", 0.93),
    "GBP": CurrencyDetails("GBP", "£", "British Pound", 0.79),
    "TRY": CurrencyDetails("TRY", "₺", "Turkish Lira", 32.5),
}

DEFAULT_CURRENCY: SupportedCurrency = "USD"

COUNTRY_TO_CURRENCY: dict[str, SupportedCurrency] = {
    "US": "USD",
    "CA": "USD",
    "GB": "GBP",
    "IE": "EUR",
    "DE": "EUR",
    "FR": "EUR",
    "IT": "EUR",
    "ES": "EUR",
    "PT": "EUR",
    "NL": "EUR",
    "BE": "EUR",
    "AT": "EUR",
    "GR": "EUR",
    "TR": "TRY",
}


def currency_for_locale(locale: str | None) -> SupportedCurrency:
    """Pick a currency from a BCP-47 locale (``en-GB``) or bare country code."""

    if not locale:
        return DEFAULT_CURRENCY
    parts = locale.replace("_", "-").split("-")
    country = parts[1] if len(parts) > 1 else parts[0]
    return COUNTRY_TO_CURRENCY.get(country.upper(), DEFAULT_CURRENCY)


def _quantize(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def convert_price(price_usd: float, currency: str) -> float:
    """Convert a USD price, rounded to cents."""

    details = CURRENCIES.get(currency)
    if details is None:
        raise ValueError(f"Unsupported currency: {currency}")
    return _quantize(price_usd * details.base_multiplier)


def format_amount(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    details = CURRENCIES.get(currency)
    if details is None:
        raise ValueError(f"Unsupported currency: {currency}")
    return f"{details.symbol}{_quantize(amount):,.2f}"
