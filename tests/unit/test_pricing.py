"""
Тесты интегрального ценообразования

Проверяет:
1. Эталонные цены линейной кривой (0.005501 / 0.011002 USDT за токен)
2. Аддитивность интеграла и симметрию buy/sell
3. Направление округления (покупка вверх, продажа вниз)
4. Полиномиальные кривые и плоский участок ниже supply_offset
5. Граничные случаи (MAX_SUPPLY, погашение сверх supply)
"""

from fractions import Fraction

import pytest

from src.core.domain.errors import InsufficientSupply, InvalidAmount, InvalidConfiguration
from src.core.domain.units import TOKEN_UNIT, tokens
from src.core.math.fixed_point import MAX_SUPPLY, WAD, Rounding
from src.core.math.pricing import (
    LinearCurve,
    PolynomialCurve,
    average_unit_price,
    buy_cost,
    sell_proceeds,
    spot_price,
)

from tests.unit.conftest import REFERENCE_SLOPE_WAD

ANCHOR = TOKEN_UNIT


# =============================================================================
# ЭТАЛОННАЯ ЛИНЕЙНАЯ КРИВАЯ
# =============================================================================


class TestReferenceLinearCurve:
    """Цены эталонной кривой с 6-значным резервом."""

    def test_price_at_anchor_is_zero(self, reference_curve):
        assert spot_price(reference_curve, ANCHOR) == 0

    def test_buy_1000_tokens_from_anchor(self, reference_curve):
        """1000 токенов после anchor: 5.501 USDT, средняя 0.005501 USDT."""
        cost = buy_cost(reference_curve, ANCHOR, tokens(1000))

        assert cost == 5_501_000
        assert average_unit_price(cost, tokens(1000), Rounding.UP) == 5501

    def test_buy_2000_tokens_from_anchor(self, reference_curve):
        """2000 токенов после anchor: средняя 0.011002 USDT."""
        cost = buy_cost(reference_curve, ANCHOR, tokens(2000))

        assert cost == 22_004_000
        assert average_unit_price(cost, tokens(2000), Rounding.UP) == 11002

    def test_spot_price_after_1000_tokens(self, reference_curve):
        assert spot_price(reference_curve, ANCHOR + tokens(1000)) == 11002

    def test_integral_is_additive(self, reference_curve):
        """Две покупки по 1000 стоят столько же, сколько одна на 2000."""
        first = buy_cost(reference_curve, ANCHOR, tokens(1000))
        second = buy_cost(reference_curve, ANCHOR + tokens(1000), tokens(1000))

        assert first + second == buy_cost(reference_curve, ANCHOR, tokens(2000))
        assert second == 16_503_000

    def test_sell_mirrors_buy(self, reference_curve):
        """Погашение последних 1000 токенов возвращает ровно их стоимость."""
        supply = ANCHOR + tokens(2000)
        assert sell_proceeds(reference_curve, supply, tokens(1000)) == 16_503_000

    def test_spot_price_underestimates_trade(self, reference_curve):
        """Маржинальная цена занижает стоимость конечной сделки на возрастающей кривой."""
        amount = tokens(1000)
        supply = ANCHOR + tokens(500)
        spot_cost = spot_price(reference_curve, supply) * amount // TOKEN_UNIT

        assert buy_cost(reference_curve, supply, amount) > spot_cost


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


class TestRounding:
    def test_dust_buy_costs_at_least_one_unit(self, reference_curve):
        """Минимальная покупка стоит 1 единицу резерва (округление вверх)."""
        assert buy_cost(reference_curve, ANCHOR, 1) == 1

    def test_dust_sell_pays_nothing(self, reference_curve):
        """Минимальная продажа не приносит ничего (округление вниз)."""
        assert sell_proceeds(reference_curve, ANCHOR + 1, 1) == 0

    @pytest.mark.parametrize("amount", [1, 7, 10**15 + 3, tokens(1) + 1, tokens(333)])
    def test_buy_never_below_sell_for_same_interval(self, reference_curve, amount):
        supply = ANCHOR + tokens(10)
        cost = buy_cost(reference_curve, supply, amount)
        proceeds = sell_proceeds(reference_curve, supply + amount, amount)

        assert cost >= proceeds
        assert cost - proceeds <= 1

    def test_average_price_rounding(self):
        assert average_unit_price(10, 3 * TOKEN_UNIT, Rounding.UP) == 4
        assert average_unit_price(10, 3 * TOKEN_UNIT, Rounding.DOWN) == 3


# =============================================================================
# КРИВЫЕ
# =============================================================================


class TestPolynomialCurve:
    def test_quadratic_area(self):
        """price = 2 + 3x²: ∫[0, 2] = 4 + 8 = 12."""
        curve = PolynomialCurve([2 * WAD, 0, 3 * WAD])
        assert curve.area(0, tokens(2)) == 12
        assert buy_cost(curve, 0, tokens(2)) == 12

    def test_flat_segment_below_offset(self):
        """Ниже supply_offset цена равна c_0."""
        curve = LinearCurve(slope_wad=WAD, base_price_wad=5 * WAD, supply_offset=TOKEN_UNIT)

        assert curve.spot_price(0) == 5
        assert curve.spot_price(TOKEN_UNIT // 2) == 5
        assert curve.area(0, TOKEN_UNIT) == 5
        # 5·2 + 2²/2
        assert curve.area(TOKEN_UNIT, TOKEN_UNIT + tokens(2)) == 12

    def test_price_is_monotonic(self, reference_curve):
        prices = [reference_curve.spot_price(ANCHOR + tokens(n)) for n in range(0, 5000, 250)]
        assert prices == sorted(prices)

    def test_area_is_exact_fraction(self, reference_curve):
        assert reference_curve.area(ANCHOR, ANCHOR + 1) == Fraction(11_002, 2 * 10**39)

    def test_linear_is_polynomial(self, reference_curve):
        assert reference_curve == PolynomialCurve([0, REFERENCE_SLOPE_WAD], supply_offset=ANCHOR)
        assert reference_curve.slope_wad == REFERENCE_SLOPE_WAD
        assert reference_curve.base_price_wad == 0

    def test_to_dict(self, reference_curve):
        assert reference_curve.to_dict() == {
            "kind": "linear",
            "coefficients_wad": ["0", str(REFERENCE_SLOPE_WAD)],
            "supply_offset": str(TOKEN_UNIT),
        }

    @pytest.mark.parametrize(
        "coefficients",
        [[], [-1], [WAD, -WAD], [1.5]],
    )
    def test_invalid_coefficients(self, coefficients):
        with pytest.raises(InvalidConfiguration):
            PolynomialCurve(coefficients)

    def test_invalid_offset(self):
        with pytest.raises(InvalidConfiguration):
            PolynomialCurve([WAD], supply_offset=-1)

    def test_inverted_bounds_rejected(self, reference_curve):
        with pytest.raises(InvalidAmount):
            reference_curve.area(10, 5)


# =============================================================================
# ГРАНИЧНЫЕ СЛУЧАИ
# =============================================================================


class TestEdgeCases:
    def test_sell_more_than_supply(self, reference_curve):
        with pytest.raises(InsufficientSupply):
            sell_proceeds(reference_curve, tokens(10), tokens(11))

    def test_buy_beyond_max_supply(self, reference_curve):
        with pytest.raises(InvalidAmount, match="MAX_SUPPLY"):
            buy_cost(reference_curve, MAX_SUPPLY - 10, 11)

    def test_buy_up_to_max_supply(self, reference_curve):
        """Интеграл на границе uint128 считается без переполнения."""
        cost = buy_cost(reference_curve, MAX_SUPPLY - tokens(1), tokens(1))
        assert cost > 0

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount(self, reference_curve, amount):
        with pytest.raises(InvalidAmount):
            buy_cost(reference_curve, ANCHOR, amount)
        with pytest.raises(InvalidAmount):
            sell_proceeds(reference_curve, ANCHOR, amount)
