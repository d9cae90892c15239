"""
CurvePool — bonding curve пул с непрерывным ценообразованием

Единственный компонент с изменяемым состоянием. Операции:
- activate / buy / sell: мутирующие, атомарные
- simulate_buy / simulate_sell / simulate_activation_buy: только чтение
- set_transaction_fee: governance (owner)
- claim_treasury: вывод накопленных комиссий receiver'ом

МОДЕЛЬ КОНКУРЕНТНОСТИ:
- Мутирующие операции сериализованы RLock пула (single writer)
- Состояние: immutable CurveState; операция подменяет ссылку целиком
  после успеха всех ledger-вызовов, поэтому simulate_* читают
  согласованный снапшот без блокировки
- Разные пулы не разделяют состояние и работают параллельно

ПОТОК ОПЕРАЦИИ:
    проверка фазы → котировка (pricing + fees) → новый CurveState
    (валидация инвариантов) → LedgerBatch → commit → событие

Pull-based allowance: перед buy вызывающий разрешает пулу списать
simulate_buy(amount).total_payment резерва, перед sell: amount токенов.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from src.core.domain.curve_state import CurveState, PoolPhase
from src.core.domain.errors import InsufficientSupply, InvalidConfiguration, Unauthorized
from src.core.domain.events import Bought, FeeConfigured, PoolEvent, Sold, TreasuryClaimed
from src.core.math.fixed_point import validate_amount
from src.core.math.pricing import spot_price
from src.ledger.interfaces import ReserveLedger, TokenLedger
from src.pool.activation import ActivationController, ActivationPlan
from src.pool.atomic import LedgerBatch
from src.pool.config import CurveConfig, PoolSettings
from src.pool.quotes import BuyQuote, SellQuote, quote_buy, quote_sell
from src.pool.state_machine import PoolLifecycle, PoolTransition

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[PoolEvent], None]


@dataclass(frozen=True)
class TradeReceipt:
    """Результат исполненной сделки: использованная котировка, событие и новое состояние."""

    quote: Union[BuyQuote, SellQuote]
    event: PoolEvent
    state: CurveState


class CurvePool:
    """
    Пул, выпускающий и погашающий curve token за резервный актив по кривой.

    Аккаунт пула: аккаунт, к которому привязаны оба ledger-handle.
    """

    def __init__(
        self,
        config: CurveConfig,
        token: TokenLedger,
        reserve: ReserveLedger,
        settings: Optional[PoolSettings] = None,
    ):
        """
        Args:
            config: конфигурация пула (кривая, комиссия, роли)
            token: handle ledger curve token от имени пула (с mint-ролью)
            reserve: handle ledger резерва от имени пула
            settings: параметры движка (anchor supply, потолки)
        """
        if token.account != reserve.account:
            raise InvalidConfiguration(
                f"token handle ({token.account}) and reserve handle ({reserve.account}) "
                f"must act for the same pool account"
            )

        if reserve.decimals != config.reserve_decimals:
            raise InvalidConfiguration(
                f"reserve ledger has {reserve.decimals} decimals, "
                f"config expects {config.reserve_decimals}"
            )

        self.settings = settings or PoolSettings()

        if config.max_fee_rate_bps > self.settings.max_fee_rate_bps:
            raise InvalidConfiguration(
                f"config fee ceiling {config.max_fee_rate_bps} exceeds engine ceiling "
                f"{self.settings.max_fee_rate_bps}"
            )

        self._config = config
        self._token = token
        self._reserve = reserve
        self._activation = ActivationController(self.settings)
        self._lifecycle = PoolLifecycle()

        self._lock = threading.RLock()
        self._events: List[PoolEvent] = []
        self._subscribers: List[EventSubscriber] = []

        # Конструктор выполняет INITIALIZE: пул привязан к токену и резерву
        initial = CurveState(anchor_supply=self.settings.anchor_supply)
        transition = self._lifecycle.evaluate_transition(initial.phase, PoolTransition.INITIALIZE)
        self._state = initial.model_copy(update={"phase": self._lifecycle.commit(transition)})

        logger.info("pool %s initialized (curve=%r)", self.account, config.curve)

    # =========================================================================
    # ЧТЕНИЕ
    # =========================================================================

    @property
    def account(self) -> str:
        return self._token.account

    @property
    def config(self) -> CurveConfig:
        return self._config

    @property
    def state(self) -> CurveState:
        return self._state

    @property
    def phase(self) -> PoolPhase:
        return self._state.phase

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def token(self) -> TokenLedger:
        return self._token

    @property
    def reserve(self) -> ReserveLedger:
        return self._reserve

    @property
    def owner(self) -> str:
        return self._config.owner

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        return tuple(self._events)

    @property
    def lifecycle(self) -> PoolLifecycle:
        return self._lifecycle

    @property
    def current_price(self) -> int:
        """Spot-цена при текущем supply (резерв за целый токен)."""
        return spot_price(self._config.curve, self._state.circulating_supply)

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Подписка на доменные события пула.

        Подписчики вызываются синхронно после фиксации состояния. Исключение
        подписчика логируется и не доходит до вызывающего: операция уже
        применена, остальные подписчики получают событие.
        """
        self._subscribers.append(subscriber)

    # =========================================================================
    # SIMULATE (только чтение)
    # =========================================================================

    def simulate_buy(self, amount: int) -> BuyQuote:
        """
        Котировка покупки против текущего состояния.

        Raises:
            NotActive, InvalidAmount
        """
        state, config = self._state, self._config
        PoolLifecycle.require_active(state.phase)
        return quote_buy(config.curve, config.fee_rate_bps, state.circulating_supply, amount)

    def simulate_sell(self, amount: int) -> SellQuote:
        """
        Котировка продажи против текущего состояния.

        Anchor supply принадлежит пулу и не погашается: доступно
        circulating_supply - anchor_supply.

        Raises:
            NotActive, InvalidAmount, InsufficientSupply
        """
        state, config = self._state, self._config
        PoolLifecycle.require_active(state.phase)
        validate_amount(amount)

        redeemable = state.circulating_supply - state.anchor_supply
        if amount > redeemable:
            raise InsufficientSupply(
                f"cannot redeem {amount}: only {redeemable} above anchor supply"
            )

        return quote_sell(config.curve, config.fee_rate_bps, state.circulating_supply, amount)

    def simulate_activation_buy(
        self,
        amount: int,
        marketing_budget_bps: int = 0,
    ) -> ActivationPlan:
        """
        План активации с preemption-покупкой amount токенов.

        Raises:
            AlreadyActive, InvalidAmount, InvalidConfiguration, MarketingBudgetTooLow
        """
        PoolLifecycle.require_inactive(self._state.phase)
        return self._activation.plan(self._config, amount, marketing_budget_bps)

    def calculate_buy_price(self, amount: int) -> int:
        """Средняя цена покупки amount токенов (резерв за целый токен, без комиссии)."""
        return self.simulate_buy(amount).average_price

    def calculate_sell_price(self, amount: int) -> int:
        """Средняя цена продажи amount токенов (резерв за целый токен, без комиссии)."""
        return self.simulate_sell(amount).average_price

    # =========================================================================
    # МУТИРУЮЩИЕ ОПЕРАЦИИ
    # =========================================================================

    def activate(
        self,
        caller: str,
        preemption_amount: int = 0,
        marketing_budget_bps: int = 0,
    ) -> ActivationPlan:
        """
        Активация пула INACTIVE → ACTIVE.

        Args:
            caller: активатор (должен быть owner пула)
            preemption_amount: токенов купить при активации (0: без покупки)
            marketing_budget_bps: доля marketing allocation в выпуске активации

        Returns:
            Исполненный ActivationPlan

        Raises:
            Unauthorized, AlreadyActive, InvalidAmount, MarketingBudgetTooLow,
            InsufficientFunds, InsufficientAllowance (от ledger резерва)
        """
        with self._lock:
            self._require_owner(caller, "activate")
            transition = self._lifecycle.evaluate_transition(
                self._state.phase, PoolTransition.ACTIVATE
            )

            plan = self._activation.plan(self._config, preemption_amount, marketing_budget_bps)
            new_state, event = self._activation.execute(
                plan,
                self._config,
                self._state,
                self._token,
                self._reserve,
                activator=caller,
            )

            self._lifecycle.commit(transition)
            self._commit(new_state, event)
            return plan

    def buy(self, caller: str, amount: int) -> TradeReceipt:
        """
        Покупка amount токенов по кривой.

        Пул списывает cost + fee резерва по allowance caller, выпускает
        amount токенов на caller. В резерв кривой идёт cost, fee в treasury.

        Raises:
            NotActive, InvalidAmount,
            InsufficientFunds, InsufficientAllowance (от ledger резерва)
        """
        with self._lock:
            quote = self.simulate_buy(amount)
            state = self._state

            new_state = self._evolve(
                state,
                circulating_supply=quote.supply_after,
                reserve_balance=state.reserve_balance + quote.cost,
                owner_treasury_amount=state.owner_treasury_amount + quote.fee.owner_share,
                protocol_treasury_amount=state.protocol_treasury_amount + quote.fee.protocol_share,
            )

            payment = quote.total_payment
            with LedgerBatch("buy") as batch:
                batch.call(
                    f"pull {payment} reserve from {caller}",
                    lambda: self._reserve.transfer_allowance_pull(caller, payment),
                    undo=lambda: self._reserve.refund_allowance_pull(caller, payment),
                )
                batch.call(
                    f"mint {amount} to {caller}",
                    lambda: self._token.mint(caller, amount),
                    undo=lambda: self._token.burn(caller, amount),
                )

            event = Bought(buyer=caller, amount=amount, gross_cost=payment, fee=quote.fee.fee)
            self._commit(new_state, event)

            logger.info(
                "pool %s: %s bought %d for %d (fee %d), supply=%d",
                self.account,
                caller,
                amount,
                payment,
                quote.fee.fee,
                new_state.circulating_supply,
            )
            return TradeReceipt(quote, event, new_state)

    def sell(self, caller: str, amount: int) -> TradeReceipt:
        """
        Продажа amount токенов обратно в кривую.

        Пул забирает amount токенов по allowance caller и сжигает их,
        переводит caller proceeds - fee резерва. Резерв кривой уменьшается
        на proceeds, fee остаётся у пула как treasury.

        Raises:
            NotActive, InvalidAmount, InsufficientSupply,
            InsufficientFunds, InsufficientAllowance (от ledger токена)
        """
        with self._lock:
            quote = self.simulate_sell(amount)
            state = self._state

            new_state = self._evolve(
                state,
                circulating_supply=quote.supply_after,
                reserve_balance=state.reserve_balance - quote.proceeds,
                owner_treasury_amount=state.owner_treasury_amount + quote.fee.owner_share,
                protocol_treasury_amount=state.protocol_treasury_amount + quote.fee.protocol_share,
            )

            net = quote.net_proceeds
            pool = self.account
            with LedgerBatch("sell") as batch:
                batch.call(
                    f"pull {amount} tokens from {caller}",
                    lambda: self._token.transfer_allowance_pull(caller, amount),
                    undo=lambda: self._token.refund_allowance_pull(caller, amount),
                )
                batch.call(
                    f"burn {amount} tokens",
                    lambda: self._token.burn(pool, amount),
                    undo=lambda: self._token.mint(pool, amount),
                )
                batch.call(
                    f"pay {net} reserve to {caller}",
                    lambda: self._reserve.transfer(caller, net),
                    undo=None,
                )

            event = Sold(seller=caller, amount=amount, net_proceeds=net, fee=quote.fee.fee)
            self._commit(new_state, event)

            logger.info(
                "pool %s: %s sold %d for %d (fee %d), supply=%d",
                self.account,
                caller,
                amount,
                net,
                quote.fee.fee,
                new_state.circulating_supply,
            )
            return TradeReceipt(quote, event, new_state)

    def set_transaction_fee(self, caller: str, new_fee_rate_bps: int) -> FeeConfigured:
        """
        Изменение ставки комиссии (только owner).

        Raises:
            Unauthorized: caller не owner
            FeeOutOfRange: ставка выше config.max_fee_rate_bps
        """
        with self._lock:
            self._require_owner(caller, "set_transaction_fee")

            previous = self._config.fee_rate_bps
            self._config = self._config.with_fee_rate(new_fee_rate_bps)

            event = FeeConfigured(new_fee_rate_bps=new_fee_rate_bps, previous_fee_rate_bps=previous)
            self._publish(event)

            logger.info(
                "pool %s: fee rate %d -> %d bps", self.account, previous, new_fee_rate_bps
            )
            return event

    def claim_treasury(self, caller: str) -> int:
        """
        Вывод невыведенной доли комиссий на аккаунт receiver.

        Если caller одновременно owner и protocol receiver, выводятся обе доли.
        Накопленные суммы не уменьшаются: растут только *_claimed.

        Returns:
            Выведенная сумма (0, если выводить нечего)

        Raises:
            Unauthorized: caller не является treasury receiver
        """
        with self._lock:
            state, config = self._state, self._config
            is_owner_receiver = caller == config.owner_treasury_receiver
            is_protocol_receiver = caller == config.protocol_treasury_receiver

            if not (is_owner_receiver or is_protocol_receiver):
                raise Unauthorized(f"{caller} is not a treasury receiver of pool {self.account}")

            owner_part = state.owner_treasury_unclaimed() if is_owner_receiver else 0
            protocol_part = state.protocol_treasury_unclaimed() if is_protocol_receiver else 0
            amount = owner_part + protocol_part

            if amount == 0:
                return 0

            new_state = self._evolve(
                state,
                owner_treasury_claimed=state.owner_treasury_claimed + owner_part,
                protocol_treasury_claimed=state.protocol_treasury_claimed + protocol_part,
            )

            with LedgerBatch("claim_treasury") as batch:
                batch.call(
                    f"pay {amount} treasury to {caller}",
                    lambda: self._reserve.transfer(caller, amount),
                    undo=None,
                )

            self._commit(new_state, TreasuryClaimed(receiver=caller, amount=amount))
            logger.info("pool %s: treasury %d claimed by %s", self.account, amount, caller)
            return amount

    # =========================================================================
    # ВНУТРЕННЕЕ
    # =========================================================================

    def _require_owner(self, caller: str, operation: str) -> None:
        if caller != self._config.owner:
            raise Unauthorized(f"{operation}: {caller} is not the owner of pool {self.account}")

    @staticmethod
    def _evolve(state: CurveState, **changes) -> CurveState:
        """Новый снапшот с полной валидацией инвариантов."""
        return CurveState.model_validate({**state.model_dump(), **changes})

    def _commit(self, new_state: CurveState, event: PoolEvent) -> None:
        self._state = new_state
        self._publish(event)

    def _publish(self, event: PoolEvent) -> None:
        self._events.append(event)
        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception(
                    "pool %s: subscriber %r failed on %s", self.account, subscriber, event.event_type
                )
