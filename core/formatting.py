from typing import Optional

from babel.core import UnknownLocaleError
from babel.numbers import format_currency as babel_format_currency

import config


def format_money(amount: float, currency: str, locale: Optional[str] = None) -> str:
    """
    Formats an amount as currency for the configured locale, e.g. 150 CAD -> 'CA$150.00' in en_US.

    Unknown currency codes are rendered with the code as the symbol; an unusable locale
    falls back to '<amount> <code>' so advice text is never lost.
    """
    try:
        return babel_format_currency(amount, currency, locale=locale or config.CURRENCY_LOCALE)
    except (UnknownLocaleError, ValueError) as e:
        print(f"Currency formatting failed for {currency!r}: {e}")
        return f"{amount:,.2f} {currency}"
