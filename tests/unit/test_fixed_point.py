"""
Тесты для модуля Fixed Point

Проверяет:
1. Деление с явным направлением округления
2. Точное округление Fraction
3. Валидацию торговых количеств (bool, 0, отрицательные, MAX_SUPPLY)
"""

from fractions import Fraction

import pytest

from src.core.domain.errors import InvalidAmount
from src.core.math.fixed_point import (
    MAX_SUPPLY,
    Rounding,
    ceil_div,
    is_int,
    mul_div,
    round_fraction,
    validate_amount,
    validate_in_range,
    validate_non_negative,
)

# =============================================================================
# ДЕЛЕНИЕ И ОКРУГЛЕНИЕ
# =============================================================================


class TestCeilDiv:
    def test_exact_division(self):
        assert ceil_div(6, 2) == 3

    def test_rounds_up_remainder(self):
        assert ceil_div(7, 2) == 4
        assert ceil_div(1, 10**18) == 1

    def test_zero_numerator(self):
        assert ceil_div(0, 5) == 0

    def test_non_positive_denominator_rejected(self):
        with pytest.raises(ValueError):
            ceil_div(1, 0)
        with pytest.raises(ValueError):
            ceil_div(1, -3)


class TestMulDiv:
    def test_round_down_by_default(self):
        assert mul_div(10, 3, 4) == 7

    def test_round_up(self):
        assert mul_div(10, 3, 4, Rounding.UP) == 8

    def test_exact_result_same_in_both_directions(self):
        assert mul_div(12, 3, 4, Rounding.DOWN) == mul_div(12, 3, 4, Rounding.UP) == 9

    def test_no_overflow_at_max_supply(self):
        """Произведение двух uint128 не теряет точность."""
        assert mul_div(MAX_SUPPLY, MAX_SUPPLY, MAX_SUPPLY) == MAX_SUPPLY


class TestRoundFraction:
    def test_down_is_floor(self):
        assert round_fraction(Fraction(7, 2), Rounding.DOWN) == 3

    def test_up_is_ceil(self):
        assert round_fraction(Fraction(7, 2), Rounding.UP) == 4

    def test_integral_value_unchanged(self):
        assert round_fraction(Fraction(10, 5), Rounding.UP) == 2
        assert round_fraction(Fraction(10, 5), Rounding.DOWN) == 2


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


class TestValidation:
    def test_is_int_rejects_bool(self):
        assert is_int(1)
        assert not is_int(True)
        assert not is_int(1.0)

    @pytest.mark.parametrize("amount", [0, -1, True, 1.5, "10", MAX_SUPPLY + 1])
    def test_validate_amount_rejects(self, amount):
        with pytest.raises(InvalidAmount):
            validate_amount(amount)

    def test_validate_amount_accepts_bounds(self):
        validate_amount(1)
        validate_amount(MAX_SUPPLY)

    def test_invalid_amount_is_value_error(self):
        """InvalidAmount ловится и как ValueError."""
        with pytest.raises(ValueError):
            validate_amount(0)

    def test_validate_non_negative(self):
        validate_non_negative(0, "supply")
        with pytest.raises(InvalidAmount, match="supply"):
            validate_non_negative(-1, "supply")

    def test_validate_in_range(self):
        validate_in_range(30, "fee", 0, 10_000)
        with pytest.raises(ValueError, match="fee must be <= 10000"):
            validate_in_range(10_001, "fee", 0, 10_000)
        with pytest.raises(ValueError, match="fee must be >= 0"):
            validate_in_range(-1, "fee", 0, 10_000)
