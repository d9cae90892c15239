"""
Ledger interfaces — capability-интерфейсы внешних ledger-коллабораторов

Пул не знает, как устроен ledger: он получает handle, привязанный к
собственному аккаунту пула, и вызывает только перечисленные методы.

Pull-based allowance: перед buy/sell вызывающий обязан выдать пулу
allowance не меньше результата соответствующего simulate_*; пул не
проверяет allowance заранее, а получает InsufficientAllowance от ledger.

Ошибки ledger (InsufficientFunds, InsufficientAllowance, Unauthorized)
пробрасываются пулом без изменений.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ReserveLedger(Protocol):
    """Ledger резервного актива, видимый пулу."""

    @property
    def account(self) -> str:
        """Аккаунт пула в этом ledger."""

    @property
    def decimals(self) -> int:
        """Decimals актива."""

    def balance_of(self, account: str) -> int:
        """Баланс аккаунта в минимальных единицах."""

    def transfer_allowance_pull(self, holder: str, amount: int) -> None:
        """Перевести amount от holder к пулу по ранее выданному allowance."""

    def refund_allowance_pull(self, holder: str, amount: int) -> None:
        """Вернуть holder amount, ранее списанный по allowance, и восстановить allowance."""

    def transfer(self, to: str, amount: int) -> None:
        """Перевести amount с баланса пула на аккаунт to."""


@runtime_checkable
class TokenLedger(ReserveLedger, Protocol):
    """Ledger curve token: ReserveLedger плюс mint/burn."""

    def mint(self, to: str, amount: int) -> None:
        """Выпустить amount на аккаунт to (требует minter-роль у пула)."""

    def burn(self, holder: str, amount: int) -> None:
        """Сжечь amount с аккаунта holder."""


@runtime_checkable
class BindableLedger(Protocol):
    """Ledger, умеющий выдать capability-handle для произвольного аккаунта."""

    decimals: int

    def bind(self, account: str) -> ReserveLedger:
        """Handle, действующий от имени account."""
