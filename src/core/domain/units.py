"""
Units — Централизованный модуль единиц и масштабов

Единственный допустимый способ преобразований между:
- человекочитаемыми количествами (Decimal, "1.5" токена, "0.25" USDT)
- минимальными единицами ledger (int, 18 знаков для токена, decimals резерва)
- basis points (int, 10000 = 100%)

ЗАПРЕЩЕНО смешивать масштабы без явного конвертера из этого модуля.
"""

from decimal import Decimal, localcontext
from fractions import Fraction
from typing import Final

from src.core.domain.errors import InvalidAmount

# =============================================================================
# МАСШТАБЫ
# =============================================================================

# Decimals curve token (ERC20-подобный токен)
TOKEN_DECIMALS: Final[int] = 18

# Одна целая единица curve token в минимальных единицах
TOKEN_UNIT: Final[int] = 10**TOKEN_DECIMALS

# Decimals резервного актива по умолчанию (USDT-подобный stable)
DEFAULT_RESERVE_DECIMALS: Final[int] = 6

# Anchor supply: минтится пулу при активации
ANCHOR_SUPPLY: Final[int] = TOKEN_UNIT

# Допустимый диапазон decimals
MAX_DECIMALS: Final[int] = 36

# Точность Decimal-контекста при конверсиях (запас для uint256)
DECIMAL_PRECISION: Final[int] = 80


# =============================================================================
# БАЗОВЫЕ КОНВЕРТЕРЫ
# =============================================================================


def validate_decimals(decimals: int) -> None:
    """
    Проверка корректности decimals актива.

    Raises:
        ValueError: Если decimals не int или вне [0, MAX_DECIMALS]
    """
    if not isinstance(decimals, int) or isinstance(decimals, bool):
        raise ValueError(f"decimals must be an int, got {decimals!r}")

    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {decimals}")


def unit_for(decimals: int) -> int:
    """
    Одна целая единица актива в минимальных единицах.

    Examples:
        >>> unit_for(6)
        1000000
    """
    validate_decimals(decimals)
    return 10**decimals


def to_base_units(amount: Decimal | int | str, decimals: int) -> int:
    """
    Конверсия: человекочитаемое количество → минимальные единицы.

    Args:
        amount: Количество в целых единицах ("1.5", Decimal("0.25"), 3)
        decimals: Decimals актива

    Returns:
        Количество в минимальных единицах

    Raises:
        InvalidAmount: Если количество отрицательное или точнее, чем decimals
    """
    validate_decimals(decimals)
    value = Decimal(amount) if not isinstance(amount, Decimal) else amount

    if not value.is_finite():
        raise InvalidAmount(f"amount must be finite, got {amount}")

    if value < 0:
        raise InvalidAmount(f"amount cannot be negative: {amount}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmount(
            f"amount {amount} has more precision than {decimals} decimals"
        )

    return int(scaled)


def from_base_units(value: int, decimals: int) -> Decimal:
    """
    Конверсия: минимальные единицы → человекочитаемое количество.

    Examples:
        >>> from_base_units(1500000, 6)
        Decimal('1.500000')
    """
    validate_decimals(decimals)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(value).scaleb(-decimals)


def tokens(amount: Decimal | int | str) -> int:
    """Количество curve token (целые единицы) → минимальные единицы."""
    return to_base_units(amount, TOKEN_DECIMALS)


def whole_tokens(value: int) -> Fraction:
    """Минимальные единицы токена → точное количество целых токенов."""
    return Fraction(value, TOKEN_UNIT)


# =============================================================================
# BASIS POINTS
# =============================================================================


def bps_to_fraction(bps: int) -> Fraction:
    """
    Конверсия basis points в точную дробь.

    Examples:
        >>> bps_to_fraction(30)
        Fraction(3, 1000)
    """
    return Fraction(bps, 10_000)
