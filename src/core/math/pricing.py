"""
Pricing — Интегральное ценообразование bonding curve

Модуль вычисляет стоимость выпуска и выручку погашения curve token как
определённый интеграл монотонной ценовой кривой по circulating supply:

    buy_cost(s0, Δ)      = ∫[s0, s0+Δ] price(s) ds    (округление ВВЕРХ)
    sell_proceeds(s0, Δ) = ∫[s0-Δ, s0] price(s) ds    (округление ВНИЗ)

Сделки всегда оцениваются интегралом, а не spot-ценой: маржинальная цена
занижает стоимость любой сделки конечного размера на выпуклой кривой.

Кривая подключаемая (PriceCurve). Подтверждённый случай: линейная кривая
price(s) = base + slope · s; PolynomialCurve обобщает её на произвольный
неубывающий полином.

ЕДИНИЦЫ:
    supply, amount       — минимальные единицы токена (18 знаков)
    coefficients_wad     — минимальные единицы резерва за целый токен
                           на (целый токен)^k, WAD-масштаб
    area / spot_price    — точные Fraction в минимальных единицах резерва
    buy_cost / proceeds  — int в минимальных единицах резерва
"""

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any, Sequence

from src.core.domain.errors import InsufficientSupply, InvalidAmount, InvalidConfiguration
from src.core.domain.units import TOKEN_UNIT
from src.core.math.fixed_point import (
    MAX_SUPPLY,
    WAD,
    Rounding,
    is_int,
    mul_div,
    round_fraction,
    validate_amount,
    validate_non_negative,
)


# =============================================================================
# КРИВЫЕ
# =============================================================================


class PriceCurve(ABC):
    """
    Абстрактная монотонная ценовая кривая.

    Реализация обязана гарантировать:
    - spot_price(s) >= 0 и не убывает по s
    - area(a, b) >= 0 и аддитивна: area(a, b) + area(b, c) == area(a, c)
    """

    @abstractmethod
    def spot_price(self, supply: int) -> Fraction:
        """Маржинальная цена (резерв за целый токен) при данном supply."""

    @abstractmethod
    def area(self, lower: int, upper: int) -> Fraction:
        """Точный интеграл цены от lower до upper (в единицах резерва)."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """JSON-совместимое описание параметров кривой."""


class PolynomialCurve(PriceCurve):
    """
    Полиномиальная кривая price(s) = Σ c_k · x^k, x = (s - supply_offset) / TOKEN_UNIT.

    Ниже supply_offset цена постоянна и равна c_0: смещение задаёт точку,
    в которой начинается рост цены (например, anchor supply, чтобы цена
    сразу после активации была равна base price).

    Все коэффициенты неотрицательны, поэтому кривая не убывает.
    """

    kind = "polynomial"

    def __init__(self, coefficients_wad: Sequence[int], supply_offset: int = 0):
        """
        Args:
            coefficients_wad: [c_0, c_1, ..., c_n] в WAD-масштабе
            supply_offset: supply (минимальные единицы токена), с которого
                начинается рост цены
        """
        coefficients = tuple(coefficients_wad)
        if not coefficients:
            raise InvalidConfiguration("curve needs at least one coefficient")

        for k, c in enumerate(coefficients):
            if not is_int(c) or c < 0:
                raise InvalidConfiguration(
                    f"coefficient c_{k} must be a non-negative int, got {c!r}"
                )

        if not is_int(supply_offset) or not 0 <= supply_offset <= MAX_SUPPLY:
            raise InvalidConfiguration(
                f"supply_offset must be an int in [0, MAX_SUPPLY], got {supply_offset!r}"
            )

        self._coefficients = coefficients
        self._supply_offset = supply_offset

    @property
    def coefficients_wad(self) -> tuple[int, ...]:
        return self._coefficients

    @property
    def supply_offset(self) -> int:
        return self._supply_offset

    def _x(self, supply: int) -> Fraction:
        return Fraction(max(supply - self._supply_offset, 0), TOKEN_UNIT)

    def spot_price(self, supply: int) -> Fraction:
        x = self._x(supply)
        return sum(
            (Fraction(c, WAD) * x**k for k, c in enumerate(self._coefficients)),
            Fraction(0),
        )

    def _antiderivative(self, supply: int) -> Fraction:
        # Плоский участок [0, offset] по цене c_0 + полином над offset
        flat = Fraction(self._coefficients[0] * min(supply, self._supply_offset), WAD * TOKEN_UNIT)
        x = self._x(supply)
        curved = sum(
            (Fraction(c, WAD * (k + 1)) * x ** (k + 1) for k, c in enumerate(self._coefficients)),
            Fraction(0),
        )
        return flat + curved

    def area(self, lower: int, upper: int) -> Fraction:
        if lower < 0 or upper < lower:
            raise InvalidAmount(f"invalid integration bounds [{lower}, {upper}]")
        return self._antiderivative(upper) - self._antiderivative(lower)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "coefficients_wad": [str(c) for c in self._coefficients],
            "supply_offset": str(self._supply_offset),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolynomialCurve):
            return NotImplemented
        return (
            self._coefficients == other._coefficients
            and self._supply_offset == other._supply_offset
        )

    def __hash__(self) -> int:
        return hash((self._coefficients, self._supply_offset))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(coefficients_wad={list(self._coefficients)}, "
            f"supply_offset={self._supply_offset})"
        )


class LinearCurve(PolynomialCurve):
    """
    Линейная кривая price(s) = base_price + slope · (s - supply_offset).

    При base_price = 0 и supply_offset = 0 это price(s) = slope · s.
    """

    kind = "linear"

    def __init__(self, slope_wad: int, base_price_wad: int = 0, supply_offset: int = 0):
        super().__init__([base_price_wad, slope_wad], supply_offset=supply_offset)

    @property
    def slope_wad(self) -> int:
        return self._coefficients[1]

    @property
    def base_price_wad(self) -> int:
        return self._coefficients[0]

    def __repr__(self) -> str:
        return (
            f"LinearCurve(slope_wad={self.slope_wad}, base_price_wad={self.base_price_wad}, "
            f"supply_offset={self._supply_offset})"
        )


# =============================================================================
# ЦЕНООБРАЗОВАНИЕ СДЕЛОК
# =============================================================================


def buy_cost(curve: PriceCurve, supply: int, amount: int) -> int:
    """
    Стоимость выпуска amount токенов при текущем supply.

    cost = ∫[supply, supply + amount] price(s) ds, округление вверх до
    минимальной единицы резерва.

    Args:
        curve: Ценовая кривая
        supply: Текущее circulating supply (минимальные единицы токена)
        amount: Количество к выпуску (минимальные единицы токена)

    Returns:
        Стоимость в минимальных единицах резерва

    Raises:
        InvalidAmount: Если amount <= 0 или supply + amount > MAX_SUPPLY
    """
    validate_amount(amount)
    validate_non_negative(supply, "supply")

    if supply + amount > MAX_SUPPLY:
        raise InvalidAmount(f"supply {supply} + amount {amount} exceeds MAX_SUPPLY")

    return round_fraction(curve.area(supply, supply + amount), Rounding.UP)


def sell_proceeds(curve: PriceCurve, supply: int, amount: int) -> int:
    """
    Выручка погашения amount токенов при текущем supply.

    proceeds = ∫[supply - amount, supply] price(s) ds, округление вниз.

    Raises:
        InvalidAmount: Если amount <= 0
        InsufficientSupply: Если amount > supply
    """
    validate_amount(amount)
    validate_non_negative(supply, "supply")

    if amount > supply:
        raise InsufficientSupply(f"cannot redeem {amount} from supply {supply}")

    return round_fraction(curve.area(supply - amount, supply), Rounding.DOWN)


def average_unit_price(total_amount: int, amount: int, rounding: Rounding) -> int:
    """
    Средняя цена за целый токен: total_amount / (amount / TOKEN_UNIT).

    Округление в ту же сторону, что и у исходной суммы (UP для покупки,
    DOWN для продажи).

    Examples:
        >>> average_unit_price(5_501_000, 1000 * 10**18, Rounding.UP)
        5501
    """
    validate_amount(amount)
    validate_non_negative(total_amount, "total_amount")
    return mul_div(total_amount, TOKEN_UNIT, amount, rounding)


def spot_price(curve: PriceCurve, supply: int) -> int:
    """
    Маржинальная цена при данном supply (резерв за целый токен), округление вниз.

    Только для информационных запросов; сделки оцениваются интегралом.
    """
    validate_non_negative(supply, "supply")
    return round_fraction(curve.spot_price(supply), Rounding.DOWN)
