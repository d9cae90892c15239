"""
InMemoryLedger — референсная реализация fungible ledger

Балансы, allowances и minter-роль в памяти процесса. Используется фабрикой
(свежий curve token на каждый пул) и тестами (USDT-подобный резерв).

Каждый вызов сериализован собственным RLock ledger, поэтому несколько пулов,
работающих в разных потоках, могут разделять один ledger резерва.
"""

import logging
import threading
from typing import Dict, Set, Tuple

from src.core.domain.errors import InsufficientAllowance, InsufficientFunds, Unauthorized
from src.core.domain.units import validate_decimals
from src.core.math.fixed_point import validate_non_negative

logger = logging.getLogger(__name__)


class InMemoryLedger:
    """
    Fungible ledger (ERC20-подобный) в памяти.

    Роли:
    - owner: выдаёт и отзывает minter-роль, может передать владение
    - minters: могут выпускать и сжигать с любого аккаунта
    """

    def __init__(self, name: str, symbol: str, decimals: int, owner: str):
        validate_decimals(decimals)
        if not owner:
            raise ValueError("owner must be a non-empty account id")

        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._owner = owner

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._minters: Set[str] = {owner}
        self._total_supply = 0
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self._allowances.get((holder, spender), 0)

    def is_minter(self, account: str) -> bool:
        return account in self._minters

    # -------------------------------------------------------------------------
    # Роли
    # -------------------------------------------------------------------------

    def grant_minter(self, caller: str, account: str) -> None:
        with self._lock:
            self._require_owner(caller)
            self._minters.add(account)
            logger.debug("%s: minter role granted to %s", self.symbol, account)

    def revoke_minter(self, caller: str, account: str) -> None:
        with self._lock:
            self._require_owner(caller)
            self._minters.discard(account)
            logger.debug("%s: minter role revoked from %s", self.symbol, account)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self._require_owner(caller)
            if not new_owner:
                raise ValueError("new_owner must be a non-empty account id")
            self._owner = new_owner
            logger.debug("%s: ownership transferred to %s", self.symbol, new_owner)

    def _require_owner(self, caller: str) -> None:
        if caller != self._owner:
            raise Unauthorized(f"{caller} is not the owner of {self.symbol}")

    # -------------------------------------------------------------------------
    # Переводы
    # -------------------------------------------------------------------------

    def approve(self, holder: str, spender: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        with self._lock:
            self._allowances[(holder, spender)] = amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        with self._lock:
            self._debit(sender, amount)
            self._credit(to, amount)
            logger.debug("%s: transfer %d %s -> %s", self.symbol, amount, sender, to)

    def transfer_from(self, spender: str, holder: str, to: str, amount: int) -> None:
        """
        Перевод по allowance: spender переводит amount от holder к to.

        Raises:
            InsufficientAllowance: Если allowance(holder, spender) < amount
            InsufficientFunds: Если баланс holder < amount
        """
        validate_non_negative(amount, "amount")
        with self._lock:
            allowed = self.allowance(holder, spender)
            if allowed < amount:
                raise InsufficientAllowance(
                    f"{self.symbol}: allowance {allowed} of {spender} over {holder} "
                    f"is below {amount}"
                )
            self._debit(holder, amount)
            self._allowances[(holder, spender)] = allowed - amount
            self._credit(to, amount)
            logger.debug(
                "%s: transfer_from %d %s -> %s by %s", self.symbol, amount, holder, to, spender
            )

    def refund_transfer_from(self, spender: str, holder: str, amount: int) -> None:
        """
        Компенсация transfer_from: spender возвращает amount holder и
        восстанавливает израсходованный allowance.

        Raises:
            InsufficientFunds: Если баланс spender < amount
        """
        validate_non_negative(amount, "amount")
        with self._lock:
            self._debit(spender, amount)
            self._credit(holder, amount)
            self._allowances[(holder, spender)] = self.allowance(holder, spender) + amount
            logger.debug(
                "%s: refund %d %s -> %s, allowance restored", self.symbol, amount, spender, holder
            )

    # -------------------------------------------------------------------------
    # Эмиссия
    # -------------------------------------------------------------------------

    def mint(self, caller: str, to: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        with self._lock:
            if caller not in self._minters:
                raise Unauthorized(f"{caller} has no mint capability on {self.symbol}")
            self._credit(to, amount)
            self._total_supply += amount
            logger.debug("%s: mint %d -> %s", self.symbol, amount, to)

    def burn(self, caller: str, holder: str, amount: int) -> None:
        validate_non_negative(amount, "amount")
        with self._lock:
            if caller != holder and caller not in self._minters:
                raise Unauthorized(f"{caller} cannot burn {self.symbol} held by {holder}")
            self._debit(holder, amount)
            self._total_supply -= amount
            logger.debug("%s: burn %d from %s", self.symbol, amount, holder)

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _debit(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientFunds(
                f"{self.symbol}: balance {balance} of {account} is below {amount}"
            )
        self._balances[account] = balance - amount

    def _credit(self, account: str, amount: int) -> None:
        self._balances[account] = self.balance_of(account) + amount

    def bind(self, account: str) -> "LedgerHandle":
        """Capability-handle ledger, действующий от имени account."""
        return LedgerHandle(self, account)


class LedgerHandle:
    """
    Handle InMemoryLedger, привязанный к аккаунту.

    Реализует TokenLedger и ReserveLedger: все вызовы выполняются от имени
    account (обычно аккаунта пула).
    """

    def __init__(self, ledger: InMemoryLedger, account: str):
        self._ledger = ledger
        self._account = account

    @property
    def ledger(self) -> InMemoryLedger:
        return self._ledger

    @property
    def account(self) -> str:
        return self._account

    @property
    def decimals(self) -> int:
        return self._ledger.decimals

    def balance_of(self, account: str) -> int:
        return self._ledger.balance_of(account)

    def transfer_allowance_pull(self, holder: str, amount: int) -> None:
        self._ledger.transfer_from(self._account, holder, self._account, amount)

    def refund_allowance_pull(self, holder: str, amount: int) -> None:
        self._ledger.refund_transfer_from(self._account, holder, amount)

    def transfer(self, to: str, amount: int) -> None:
        self._ledger.transfer(self._account, to, amount)

    def mint(self, to: str, amount: int) -> None:
        self._ledger.mint(self._account, to, amount)

    def burn(self, holder: str, amount: int) -> None:
        self._ledger.burn(self._account, holder, amount)

    def __repr__(self) -> str:
        return f"LedgerHandle({self._ledger.symbol}, account={self._account!r})"
