"""
Currency code translation.

The gateway only accepts ISO 4217 numeric codes.
"""

from exceptions import UnsupportedCurrencyError


CURRENCY_CODES = {
    'EUR': '978',
    'USD': '840',
    'GBP': '826',
    'JPY': '392',
    'ARS': '032',
    'CAD': '124',
    'CLF': '152',
    'COP': '170',
    'INR': '356',
    'MXN': '484',
    'PEN': '604',
    'CHF': '756',
    'BRL': '986',
    'VEF': '937',
    'TRY': '949',
}


def to_numeric_code(currency: str) -> str:
    """
    Translate an alphabetic currency code to the gateway's numeric code.

    Args:
        currency: Alphabetic code, e.g. "EUR"

    Returns:
        Zero-padded 3-digit numeric code, e.g. "978"

    Raises:
        UnsupportedCurrencyError: If the currency is not in the table
    """
    try:
        return CURRENCY_CODES[currency]
    except (KeyError, TypeError):
        raise UnsupportedCurrencyError(str(currency)) from None
