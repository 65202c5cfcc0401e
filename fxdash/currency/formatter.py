"""
Currency Formatter

Renders a base-currency amount as a display string in any currency.

Rendering rules:
1. The base currency always uses its fixed literal symbol, e.g. "฿1,234.5",
   followed by a locale-grouped number
2. Other currencies known to CLDR use Babel's locale-aware currency format
   (symbol, grouping, ISO 4217 minor units)
3. Anything else gets a symbol from a small table, or the raw code,
   in front of a locale-grouped number

DESIGN DECISION: format() never raises. A slightly plain rendering is
better than a widget that fails to draw.
"""

from typing import Any, Optional, Union

from babel import Locale, UnknownLocaleError
from babel.numbers import format_currency, format_decimal, is_currency

from fxdash.currency.converter import CurrencyConverter, as_amount


# Short symbols for input adornments and the fallback path
CURRENCY_SYMBOLS = {
    "THB": "฿",
    "USD": "$",
    "MMK": "MMK",
}

# Short language tag -> full locale for region-aware formatting
LANGUAGE_LOCALES = {
    "en": "en_US",
    "th": "th_TH",
    "my": "my_MM",
}

FALLBACK_LOCALE = "en"


def resolve_locale(tag: Any, default: str = FALLBACK_LOCALE) -> Locale:
    """
    Parse a language/locale tag ("en", "th-TH", "my_MM") into a Babel Locale.

    Unknown or malformed tags fall back to `default`, then to English.
    """
    for candidate in (tag, default, FALLBACK_LOCALE):
        if not isinstance(candidate, str) or not candidate.strip():
            continue
        try:
            return Locale.parse(candidate.strip().replace("-", "_"))
        except (ValueError, TypeError, UnknownLocaleError):
            continue
    return Locale(FALLBACK_LOCALE)


def locale_from_language(language: Any) -> str:
    """Map a short language tag to a full locale identifier (en_US by default)."""
    if isinstance(language, str):
        return LANGUAGE_LOCALES.get(language.strip().lower(), "en_US")
    return "en_US"


def format_number(amount: Any, locale: Union[Locale, str, None] = None) -> str:
    """Locale-grouped number with up to three fraction digits."""
    n = as_amount(amount)
    loc = locale if isinstance(locale, Locale) else resolve_locale(locale)
    try:
        return format_decimal(n, locale=loc)
    except Exception:
        return f"{n:,}"


def format_rate(rate: Any, locale: Union[Locale, str, None] = None) -> str:
    """Exchange rate with up to four fraction digits, "…" if unusable."""
    n = as_amount(rate)
    if n <= 0:
        return "…"
    loc = locale if isinstance(locale, Locale) else resolve_locale(locale)
    try:
        return format_decimal(n, format="#,##0.####", locale=loc)
    except Exception:
        return f"{n:,.4f}"


def _prefix(symbol: str) -> str:
    # Letter symbols ("MMK") need a space before the digits
    return f"{symbol} " if symbol[-1:].isalpha() else symbol


def format_amount(amount: Any, currency: Any = "THB", language: Any = "en") -> str:
    """
    Format an amount that is already in `currency` (no conversion).

    Used by charts and tooltips that receive display-currency values.
    Unknown codes render as "<CODE> <grouped number>".
    """
    code = currency.strip().upper() if isinstance(currency, str) and currency.strip() else "THB"
    n = as_amount(amount)
    loc = resolve_locale(locale_from_language(language))
    try:
        if is_currency(code, loc):
            return format_currency(n, code, locale=loc)
    except Exception:
        pass
    return f"{code} {format_number(n, loc)}"


class CurrencyFormatter:
    """Converts a base amount and renders it for display."""

    def __init__(
        self,
        converter: CurrencyConverter,
        base_symbol: str = "฿",
        default_locale: str = FALLBACK_LOCALE,
        symbols: Optional[dict[str, str]] = None,
    ):
        self._converter = converter
        self._base_symbol = base_symbol
        self._default_locale = default_locale
        self._symbols = dict(CURRENCY_SYMBOLS)
        self._symbols.update(symbols or {})
        self._symbols[converter.base_currency] = base_symbol

    @property
    def base_currency(self) -> str:
        return self._converter.base_currency

    def symbol(self, currency: Any) -> str:
        """Short symbol for a currency, or the code itself."""
        if not isinstance(currency, str) or not currency.strip():
            return self._base_symbol
        code = currency.strip().upper()
        return self._symbols.get(code, code)

    def format(self, amount_base: Any, to_currency: Any = None, locale: Any = None) -> str:
        """
        Convert a base amount to `to_currency` and render it.

        Never raises; any failure drops to the symbol-table fallback.
        """
        code = (
            to_currency.strip().upper()
            if isinstance(to_currency, str) and to_currency.strip()
            else self.base_currency
        )
        loc = resolve_locale(locale, self._default_locale)

        try:
            amount = self._converter.to_display(amount_base, code)
        except Exception:
            amount = as_amount(amount_base)

        if code == self.base_currency:
            return f"{self._base_symbol}{format_number(amount, loc)}"

        try:
            if is_currency(code, loc):
                return format_currency(amount, code, locale=loc)
        except Exception:
            pass

        return self.format_fallback(amount, code, loc)

    def format_fallback(self, amount: float, currency: str, locale: Any = None) -> str:
        """Symbol (or raw code) followed by a locale-grouped number."""
        loc = locale if isinstance(locale, Locale) else resolve_locale(locale, self._default_locale)
        return f"{_prefix(self.symbol(currency))}{format_number(amount, loc)}"
