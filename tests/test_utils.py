"""
Tests for amount helpers.
"""
import pytest

from intentbridge.exceptions import InvalidAmountError
from intentbridge.utils import (
    U64_MAX, from_usdc_units, parse_positive_u64, parse_u64, to_usdc_units,
)


class TestParseU64:

    @pytest.mark.parametrize("value,expected", [
        ("0", 0),
        ("1500000", 1500000),
        ("+42", 42),
        ("007", 7),
        (str(U64_MAX), U64_MAX),
    ])
    def test_valid(self, value, expected):
        assert parse_u64(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "-1", "1.5", "1e6", "0x10", " 1", "5\n", "1 ", "abc", str(U64_MAX + 1),
    ])
    def test_invalid(self, value):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_u64(value)
        assert exc_info.value.amount == value

    def test_positive_rejects_zero(self):
        with pytest.raises(InvalidAmountError):
            parse_positive_u64("0")
        assert parse_positive_u64("1") == 1


class TestUsdcUnits:

    @pytest.mark.parametrize("amount,units", [
        ("1.5", "1500000"),
        ("0", "0"),
        ("0.000001", "1"),
        ("100", "100000000"),
    ])
    def test_to_units(self, amount, units):
        assert to_usdc_units(amount) == units

    @pytest.mark.parametrize("amount", ["-1", "0.0000001", "abc", "NaN", "Infinity"])
    def test_to_units_invalid(self, amount):
        with pytest.raises(InvalidAmountError):
            to_usdc_units(amount)

    @pytest.mark.parametrize("units,amount", [
        ("1500000", "1.5"),
        ("1", "0.000001"),
        ("0", "0"),
        ("100000000", "100"),
    ])
    def test_from_units(self, units, amount):
        assert from_usdc_units(units) == amount
