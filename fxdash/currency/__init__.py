"""Conversion and display formatting of monetary amounts."""

from fxdash.currency.converter import (
    CurrencyConverter,
    as_amount,
    convert_from_base,
    convert_to_base,
)
from fxdash.currency.formatter import (
    CURRENCY_SYMBOLS,
    LANGUAGE_LOCALES,
    CurrencyFormatter,
    format_amount,
    format_number,
    format_rate,
    locale_from_language,
    resolve_locale,
)

__all__ = [
    "CURRENCY_SYMBOLS",
    "LANGUAGE_LOCALES",
    "CurrencyConverter",
    "CurrencyFormatter",
    "as_amount",
    "convert_from_base",
    "convert_to_base",
    "format_amount",
    "format_number",
    "format_rate",
    "locale_from_language",
    "resolve_locale",
]
