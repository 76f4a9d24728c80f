"""
Fiat currency validation
"""

from yodl.yapp.types import FiatCurrency


def allowed_currencies() -> list[str]:
    """Currency codes accepted by the host"""
    return [currency.value for currency in FiatCurrency]


def is_valid_fiat_currency(currency: object) -> bool:
    """
    Check if currency is a supported fiat currency code.

    Examples:
        is_valid_fiat_currency("USD")      -> True
        is_valid_fiat_currency("usd")      -> False
        is_valid_fiat_currency("INVALID")  -> False
    """
    if isinstance(currency, FiatCurrency):
        return True
    return isinstance(currency, str) and currency in allowed_currencies()
