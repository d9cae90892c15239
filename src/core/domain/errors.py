"""
Errors — Таксономия ошибок пула

Все ошибки локальные и синхронные: операция пула либо применяется целиком,
либо не применяется вообще, а вызывающий получает типизированное исключение
и сам решает, повторять ли операцию с другими параметрами.

Иерархия:
    CurvePoolError
    ├── NotActive
    ├── AlreadyActive
    ├── InvalidAmount (ValueError)
    ├── InsufficientSupply
    ├── InsufficientFunds          (поднимается ledger-коллаборатором)
    ├── InsufficientAllowance      (поднимается ledger-коллаборатором)
    ├── Unauthorized
    ├── FeeOutOfRange (ValueError)
    ├── MarketingBudgetTooLow
    └── InvalidConfiguration (ValueError)
"""


class CurvePoolError(Exception):
    """Базовая ошибка движка bonding curve."""


class NotActive(CurvePoolError):
    """Торговая операция вызвана до активации пула."""


class AlreadyActive(CurvePoolError):
    """Повторная активация: пул не находится в фазе INACTIVE."""


class InvalidAmount(CurvePoolError, ValueError):
    """Нулевое, отрицательное или выходящее за MAX_SUPPLY количество."""


class InsufficientSupply(CurvePoolError):
    """Продажа превышает доступное circulating supply."""


class InsufficientFunds(CurvePoolError):
    """Баланс аккаунта в ledger меньше списываемой суммы."""


class InsufficientAllowance(CurvePoolError):
    """Allowance, выданный пулу, меньше запрашиваемой суммы."""


class Unauthorized(CurvePoolError):
    """Вызывающий не обладает нужной ролью (owner, receiver, minter)."""


class FeeOutOfRange(CurvePoolError, ValueError):
    """Ставка комиссии выше допустимого потолка."""


class MarketingBudgetTooLow(CurvePoolError):
    """Маркетинговая аллокация меньше сконфигурированного минимума."""


class InvalidConfiguration(CurvePoolError, ValueError):
    """Некорректная конфигурация пула или фабрики."""
