"""
Tests for currency conversion.
"""

import math

import pytest

from fxdash.currency import as_amount, convert_from_base, convert_to_base
from fxdash.models import RateSnapshot


SNAPSHOT = RateSnapshot(
    rates={"THB": 1.0, "USD": 0.0285, "MMK": 60.5, "JPY": 4.17, "XTS": 0.0},
    last_updated=1,
)


class TestToDisplay:
    """Base -> display currency."""

    def test_multiplies_by_rate(self):
        """Test base amounts are multiplied by the target rate."""
        assert convert_from_base(SNAPSHOT, 1000, "USD", "THB") == pytest.approx(28.5)

    @pytest.mark.parametrize("amount", [0, 1, -250.5, 1e12, 0.001])
    def test_base_is_identity(self, amount):
        """Test converting to the base currency changes nothing."""
        assert convert_from_base(SNAPSHOT, amount, "THB", "THB") == amount

    @pytest.mark.parametrize("amount", [0, 1, -250.5, 1e12])
    def test_unknown_currency_is_identity(self, amount):
        """Test a currency missing from the snapshot changes nothing."""
        assert convert_from_base(SNAPSHOT, amount, "EUR", "THB") == amount

    def test_lowercase_code(self):
        """Test currency codes are case-insensitive."""
        assert convert_from_base(SNAPSHOT, 100, "usd", "THB") == pytest.approx(2.85)

    def test_missing_target_is_identity(self):
        """Test None and empty targets change nothing."""
        assert convert_from_base(SNAPSHOT, 100, None, "THB") == 100
        assert convert_from_base(SNAPSHOT, 100, "", "THB") == 100

    def test_zero_rate_is_identity(self):
        """Test that a zero rate is treated as missing."""
        assert convert_from_base(SNAPSHOT, 100, "XTS", "THB") == 100


class TestToBase:
    """Display currency -> base."""

    def test_divides_by_rate(self):
        """Test display amounts are divided by the source rate."""
        assert convert_to_base(SNAPSHOT, 28.5, "USD", "THB") == pytest.approx(1000)

    @pytest.mark.parametrize("amount", [0, 1, -250.5, 1e12])
    def test_base_is_identity(self, amount):
        """Test converting from the base currency changes nothing."""
        assert convert_to_base(SNAPSHOT, amount, "THB", "THB") == amount

    def test_unknown_currency_is_identity(self):
        """Test a currency missing from the snapshot changes nothing."""
        assert convert_to_base(SNAPSHOT, 77.7, "EUR", "THB") == 77.7

    def test_zero_rate_is_identity(self):
        """Test that a zero rate never divides."""
        assert convert_to_base(SNAPSHOT, 77.7, "XTS", "THB") == 77.7

    def test_non_finite_rate_is_identity(self):
        """Test an infinite rate is treated as missing in both directions."""
        snapshot = RateSnapshot(rates={"THB": 1.0, "USD": math.inf})
        assert convert_to_base(snapshot, 10, "USD", "THB") == 10
        assert convert_from_base(snapshot, 10, "USD", "THB") == 10


class TestRoundTrip:
    """toBase(toDisplay(x, C), C) stays within float tolerance of x."""

    @pytest.mark.parametrize("currency", ["USD", "MMK", "JPY", "THB", "EUR"])
    @pytest.mark.parametrize("amount", [0.0, 0.01, 1.0, 1234.5, -99.99, 987654321.12])
    def test_round_trip(self, currency, amount):
        """Test that converting there and back returns the original amount."""
        shown = convert_from_base(SNAPSHOT, amount, currency, "THB")
        back = convert_to_base(SNAPSHOT, shown, currency, "THB")
        assert back == pytest.approx(amount, rel=1e-12, abs=1e-12)


class TestAmountCoercion:
    """Bad input amounts never produce NaN for the UI."""

    @pytest.mark.parametrize("value", [None, "abc", math.nan, "nan", object(), 10 ** 400])
    def test_unusable_becomes_zero(self, value):
        """Test that None, NaN and junk become 0."""
        assert as_amount(value) == 0.0

    def test_numeric_strings_are_parsed(self):
        """Test numeric strings are accepted."""
        assert as_amount("12.5") == 12.5

    @pytest.mark.parametrize("value", [math.inf, -math.inf])
    def test_infinities_pass_through(self, value):
        """Test infinite amounts are kept, so base conversion stays the identity."""
        assert as_amount(value) == value
        assert convert_from_base(SNAPSHOT, value, "THB", "THB") == value
        assert convert_to_base(SNAPSHOT, value, "THB", "THB") == value
        assert convert_from_base(SNAPSHOT, value, "USD", "THB") == value

    def test_conversion_of_none_is_zero(self):
        """Test that converting None gives 0."""
        assert convert_from_base(SNAPSHOT, None, "USD", "THB") == 0.0


class TestCurrencyConverter:
    """CurrencyConverter always reads the store's latest snapshot."""

    def test_sees_new_snapshot_immediately(self, store, converter):
        """Test a saved snapshot is used on the next call."""
        assert converter.to_display(100, "USD") == 100
        store.save(RateSnapshot(rates={"USD": 0.03}, last_updated=1))
        assert converter.to_display(100, "USD") == pytest.approx(3.0)
        assert converter.to_base(3.0, "USD") == pytest.approx(100)

    def test_base_currency_from_store(self, converter):
        """Test the base currency comes from the store."""
        assert converter.base_currency == "THB"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
