"""
Core math modules для bonding curve engine

Целочисленные fixed-point примитивы, интегральное ценообразование и комиссии.
Все функции чистые: без состояния и без побочных эффектов.
"""

# Fixed point
from src.core.math.fixed_point import (
    BPS_DENOMINATOR,
    MAX_SUPPLY,
    WAD,
    Rounding,
    ceil_div,
    is_int,
    mul_div,
    round_fraction,
    validate_amount,
    validate_in_range,
    validate_non_negative,
)

# Pricing
from src.core.math.pricing import (
    LinearCurve,
    PolynomialCurve,
    PriceCurve,
    average_unit_price,
    buy_cost,
    sell_proceeds,
    spot_price,
)

# Fees
from src.core.math.fees import (
    FEE_RATE_BPS_MAX,
    FeeSplit,
    compute_fee,
    split_fee,
)

__all__ = [
    # Fixed point — constants
    "BPS_DENOMINATOR",
    "MAX_SUPPLY",
    "WAD",
    # Fixed point — types
    "Rounding",
    # Fixed point — functions
    "ceil_div",
    "is_int",
    "mul_div",
    "round_fraction",
    "validate_amount",
    "validate_in_range",
    "validate_non_negative",
    # Pricing — curves
    "PriceCurve",
    "PolynomialCurve",
    "LinearCurve",
    # Pricing — functions
    "average_unit_price",
    "buy_cost",
    "sell_proceeds",
    "spot_price",
    # Fees
    "FEE_RATE_BPS_MAX",
    "FeeSplit",
    "compute_fee",
    "split_fee",
]
