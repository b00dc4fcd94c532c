"""Unit tests for money helpers."""

from decimal import Decimal

import pytest

from grantflow.domain.primitives.money import (
    MAX_AMOUNT,
    ZERO,
    is_valid_amount,
    round_cents,
    round_dollars,
    to_amount,
)


class TestToAmount:
    def test_float_goes_through_str(self) -> None:
        assert to_amount(0.1) == Decimal("0.1")

    def test_int_and_str(self) -> None:
        assert to_amount(150) == Decimal("150")
        assert to_amount("99.95") == Decimal("99.95")

    def test_decimal_passes_through(self) -> None:
        value = Decimal("12.34")
        assert to_amount(value) is value

    def test_bool_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_amount(True)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError, match="Not a monetary amount"):
            to_amount("ten dollars")


class TestIsValidAmount:
    @pytest.mark.parametrize("value", ["0", "0.01", "5000000"])
    def test_finite_non_negative(self, value: str) -> None:
        assert is_valid_amount(Decimal(value))

    @pytest.mark.parametrize("value", ["-0.01", "NaN", "Infinity", "-Infinity"])
    def test_negative_or_non_finite(self, value: str) -> None:
        assert not is_valid_amount(Decimal(value))

    def test_upper_bound(self) -> None:
        assert is_valid_amount(MAX_AMOUNT)
        assert not is_valid_amount(MAX_AMOUNT + Decimal("0.01"))
        assert not is_valid_amount(Decimal("1E+30"))


class TestRounding:
    def test_cents_round_half_up(self) -> None:
        assert round_cents(Decimal("10.005")) == Decimal("10.01")
        assert round_cents(Decimal("10.004")) == Decimal("10.00")

    def test_dollars_round_half_up(self) -> None:
        assert round_dollars(Decimal("99.5")) == Decimal("100")
        assert round_dollars(Decimal("99.49")) == Decimal("99")

    def test_zero_constant(self) -> None:
        assert ZERO == Decimal("0")
