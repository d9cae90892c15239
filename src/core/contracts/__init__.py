"""
Contract Validation Module

Модуль для валидации JSON контрактов пула (события, состояние, конфигурация).
"""

from .validators import (
    ContractValidator,
    CurveConfigValidator,
    PoolEventValidator,
    PoolStateValidator,
    SchemaLoader,
    to_contract,
    validate_curve_config,
    validate_pool_event,
    validate_pool_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PoolEventValidator",
    "PoolStateValidator",
    "CurveConfigValidator",
    # Functions
    "to_contract",
    "validate_pool_event",
    "validate_pool_state",
    "validate_curve_config",
]
