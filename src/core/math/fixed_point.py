"""
Fixed Point — целочисленная арифметика с явным направлением округления

Все суммы в движке: Python int в минимальных единицах:
- токен: 18 знаков (TOKEN_UNIT = 10**18)
- резервный актив: decimals актива (6 для USDT-подобного)
- коэффициенты кривой: WAD-масштаб (10**18)

Промежуточные вычисления выполняются точно (int / Fraction), поэтому
квадрат supply на границе MAX_SUPPLY не переполняется. Округление
происходит ровно один раз, в конце, в явно указанную сторону.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Стоимость покупки округляется ВВЕРХ (пул не недополучает)
2. Выручка продажи округляется ВНИЗ (пул не переплачивает)
3. bool не принимается как int
4. Все операции детерминированы и воспроизводимы
"""

from enum import Enum
from fractions import Fraction
from typing import Final

from src.core.domain.errors import InvalidAmount

# =============================================================================
# МАСШТАБЫ И ГРАНИЦЫ
# =============================================================================

# Масштаб WAD для коэффициентов кривой и цен
WAD: Final[int] = 10**18

# Знаменатель basis points (10000 bps = 100%)
BPS_DENOMINATOR: Final[int] = 10_000

# Максимальное поддерживаемое supply (uint128 в минимальных единицах)
MAX_SUPPLY: Final[int] = 2**128 - 1


# =============================================================================
# ТИПЫ
# =============================================================================


class Rounding(str, Enum):
    """Направление округления результата"""

    DOWN = "down"
    UP = "up"


# =============================================================================
# ДЕЛЕНИЕ И ОКРУГЛЕНИЕ
# =============================================================================


def ceil_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вверх.

    Examples:
        >>> ceil_div(7, 2)
        4
        >>> ceil_div(6, 2)
        3
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    return -((-numerator) // denominator)


def round_fraction(value: Fraction, rounding: Rounding) -> int:
    """
    Округление точного рационального значения до int.

    Args:
        value: Точное значение
        rounding: Направление округления

    Returns:
        floor(value) для DOWN, ceil(value) для UP
    """
    if rounding == Rounding.UP:
        return ceil_div(value.numerator, value.denominator)
    return value.numerator // value.denominator


def mul_div(
    a: int,
    b: int,
    denominator: int,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """
    Вычисление a * b / denominator без потери точности.

    Произведение считается в неограниченной разрядности, округление
    выполняется один раз.

    Examples:
        >>> mul_div(10, 3, 4)
        7
        >>> mul_div(10, 3, 4, Rounding.UP)
        8
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    product = a * b
    if rounding == Rounding.UP:
        return ceil_div(product, denominator)
    return product // denominator


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_int(value: object) -> bool:
    """True для int, но не для bool."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_amount(value: int, name: str = "amount") -> None:
    """
    Валидация торгового количества: int, > 0, <= MAX_SUPPLY.

    Raises:
        InvalidAmount: Если количество нулевое, отрицательное, не int
            или превышает MAX_SUPPLY
    """
    if not is_int(value):
        raise InvalidAmount(f"{name} must be an int, got {type(value).__name__}")

    if value <= 0:
        raise InvalidAmount(f"{name} must be positive, got {value}")

    if value > MAX_SUPPLY:
        raise InvalidAmount(f"{name} {value} exceeds MAX_SUPPLY {MAX_SUPPLY}")


def validate_non_negative(value: int, name: str) -> None:
    """
    Валидация, что значение является неотрицательным int.

    Raises:
        InvalidAmount: Если value < 0 или не int
    """
    if not is_int(value):
        raise InvalidAmount(f"{name} must be an int, got {type(value).__name__}")

    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: int,
    name: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> None:
    """
    Валидация, что int-значение лежит в заданном диапазоне.

    Raises:
        ValueError: Если value вне диапазона или не int
    """
    if not is_int(value):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
