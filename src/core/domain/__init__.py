"""
Domain models and value objects.

Contains the pool state snapshot, domain events, error taxonomy and units.
Domain modules do not depend on src.core.math.
"""

from src.core.domain.curve_state import CurveState, PoolPhase
from src.core.domain.errors import (
    AlreadyActive,
    CurvePoolError,
    FeeOutOfRange,
    InsufficientAllowance,
    InsufficientFunds,
    InsufficientSupply,
    InvalidAmount,
    InvalidConfiguration,
    MarketingBudgetTooLow,
    NotActive,
    Unauthorized,
)
from src.core.domain.events import (
    Activated,
    Bought,
    FeeConfigured,
    PoolEvent,
    Sold,
    TreasuryClaimed,
)
from src.core.domain.units import (
    ANCHOR_SUPPLY,
    DEFAULT_RESERVE_DECIMALS,
    TOKEN_DECIMALS,
    TOKEN_UNIT,
    bps_to_fraction,
    from_base_units,
    to_base_units,
    tokens,
    unit_for,
    validate_decimals,
    whole_tokens,
)

__all__ = [
    # Units module
    "ANCHOR_SUPPLY",
    "DEFAULT_RESERVE_DECIMALS",
    "TOKEN_DECIMALS",
    "TOKEN_UNIT",
    "bps_to_fraction",
    "from_base_units",
    "to_base_units",
    "tokens",
    "unit_for",
    "validate_decimals",
    "whole_tokens",
    # State
    "CurveState",
    "PoolPhase",
    # Events
    "Activated",
    "Bought",
    "FeeConfigured",
    "PoolEvent",
    "Sold",
    "TreasuryClaimed",
    # Errors
    "AlreadyActive",
    "CurvePoolError",
    "FeeOutOfRange",
    "InsufficientAllowance",
    "InsufficientFunds",
    "InsufficientSupply",
    "InvalidAmount",
    "InvalidConfiguration",
    "MarketingBudgetTooLow",
    "NotActive",
    "Unauthorized",
]
