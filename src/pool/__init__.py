"""Pool — bonding curve пул и его жизненный цикл.

- CurvePool: состояние, buy/sell/activate, simulate_*, governance
- ActivationController: атомарная активация с preemption и marketing
- PoolLifecycle: переходы UNINITIALIZED → INACTIVE → ACTIVE
- PoolFactory: создание пары curve token + пул
"""

from .activation import ActivationController, ActivationPlan, marketing_allocation
from .atomic import LedgerBatch, RollbackFailed
from .config import CurveConfig, PoolSettings
from .curve_pool import CurvePool, TradeReceipt
from .factory import PoolDeployment, PoolFactory
from .quotes import BuyQuote, SellQuote, quote_buy, quote_sell
from .state_machine import PoolLifecycle, PoolTransition, PoolTransitionResult

__all__ = [
    "ActivationController",
    "ActivationPlan",
    "marketing_allocation",
    "LedgerBatch",
    "RollbackFailed",
    "CurveConfig",
    "PoolSettings",
    "CurvePool",
    "TradeReceipt",
    "PoolDeployment",
    "PoolFactory",
    "BuyQuote",
    "SellQuote",
    "quote_buy",
    "quote_sell",
    "PoolLifecycle",
    "PoolTransition",
    "PoolTransitionResult",
]
