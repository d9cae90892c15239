"""
ActivationController — атомарная активация пула

Активация INACTIVE → ACTIVE:
1. Anchor supply (1 токен) минтится на аккаунт пула
2. Опционально: preemption-покупка preemption_amount токенов активатором,
   оценённая по кривой от post-anchor supply
3. Опционально: marketing allocation, токены для marketing receiver,
   составляющие marketing_budget_bps от ВСЕГО выпуска активации

ФОРМУЛА MARKETING ALLOCATION:
    total     = anchor + preemption + marketing
    marketing >= total · bps / 10000
    marketing = ceil(bps · (anchor + preemption) / (10000 - bps))

Округление вверх: фактическая доля receiver никогда не меньше заявленной.

Активатор оплачивает по кривой весь выпуск сверх anchor (preemption +
marketing), поэтому резерв остаётся равен интегралу кривой по supply.

Атомарность: новое состояние строится и валидируется до ledger-вызовов,
ledger-вызовы идут одним LedgerBatch; при любой ошибке пул остаётся
INACTIVE, а уже выпущенные токены сжигаются.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.domain.curve_state import CurveState, PoolPhase
from src.core.domain.errors import InvalidAmount, InvalidConfiguration, MarketingBudgetTooLow
from src.core.domain.events import Activated
from src.core.math.fixed_point import (
    BPS_DENOMINATOR,
    MAX_SUPPLY,
    ceil_div,
    validate_in_range,
    validate_non_negative,
)
from src.ledger.interfaces import ReserveLedger, TokenLedger
from src.pool.atomic import LedgerBatch
from src.pool.config import CurveConfig, PoolSettings
from src.pool.quotes import BuyQuote, quote_buy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationPlan:
    """Полный расчёт активации (результат simulate_activation_buy)."""

    anchor_supply: int
    preemption_amount: int
    marketing_budget_bps: int
    marketing_amount: int

    # Котировка покупки preemption + marketing от post-anchor supply
    buy: Optional[BuyQuote]

    @property
    def total_payment(self) -> int:
        """Сколько резерва активатор должен разрешить пулу списать."""
        return self.buy.total_payment if self.buy is not None else 0

    @property
    def circulating_supply_after(self) -> int:
        return self.anchor_supply + self.preemption_amount + self.marketing_amount


def marketing_allocation(base_issuance: int, marketing_budget_bps: int) -> int:
    """
    Маркетинговая аллокация как доля от полного выпуска.

    Args:
        base_issuance: anchor + preemption
        marketing_budget_bps: доля marketing в полном выпуске (bps, < 10000)

    Returns:
        ceil(bps · base_issuance / (10000 - bps))

    Examples:
        >>> marketing_allocation(100, 1000)
        12
    """
    validate_non_negative(base_issuance, "base_issuance")
    validate_in_range(marketing_budget_bps, "marketing_budget_bps", 0, BPS_DENOMINATOR - 1)
    return ceil_div(marketing_budget_bps * base_issuance, BPS_DENOMINATOR - marketing_budget_bps)


class ActivationController:
    """Планирование и атомарное исполнение активации пула."""

    def __init__(self, settings: PoolSettings):
        self.settings = settings

    def plan(
        self,
        config: CurveConfig,
        preemption_amount: int = 0,
        marketing_budget_bps: int = 0,
    ) -> ActivationPlan:
        """
        Расчёт активации без побочных эффектов.

        Raises:
            InvalidAmount: Отрицательный preemption, bps вне диапазона,
                marketing без preemption, выпуск сверх MAX_SUPPLY
            InvalidConfiguration: marketing без marketing_receiver
            MarketingBudgetTooLow: allocation < config.min_marketing_budget
        """
        validate_non_negative(preemption_amount, "preemption_amount")
        validate_non_negative(marketing_budget_bps, "marketing_budget_bps")

        if marketing_budget_bps > self.settings.max_marketing_budget_bps:
            raise InvalidAmount(
                f"marketing_budget_bps {marketing_budget_bps} exceeds "
                f"{self.settings.max_marketing_budget_bps}"
            )

        anchor = self.settings.anchor_supply

        if preemption_amount == 0:
            if marketing_budget_bps > 0:
                raise InvalidAmount("marketing allocation requires a preemption purchase")
            return ActivationPlan(
                anchor_supply=anchor,
                preemption_amount=0,
                marketing_budget_bps=0,
                marketing_amount=0,
                buy=None,
            )

        marketing_amount = 0
        if marketing_budget_bps > 0:
            if config.marketing_receiver is None:
                raise InvalidConfiguration("marketing allocation requires a marketing_receiver")

            marketing_amount = marketing_allocation(anchor + preemption_amount, marketing_budget_bps)

            if marketing_amount < config.min_marketing_budget:
                raise MarketingBudgetTooLow(
                    f"marketing allocation {marketing_amount} below minimum "
                    f"{config.min_marketing_budget}"
                )

        if anchor + preemption_amount + marketing_amount > MAX_SUPPLY:
            raise InvalidAmount("activation issuance exceeds MAX_SUPPLY")

        buy = quote_buy(
            config.curve,
            config.fee_rate_bps,
            supply=anchor,
            amount=preemption_amount + marketing_amount,
        )

        return ActivationPlan(
            anchor_supply=anchor,
            preemption_amount=preemption_amount,
            marketing_budget_bps=marketing_budget_bps,
            marketing_amount=marketing_amount,
            buy=buy,
        )

    def execute(
        self,
        plan: ActivationPlan,
        config: CurveConfig,
        state: CurveState,
        token: TokenLedger,
        reserve: ReserveLedger,
        activator: str,
    ) -> tuple[CurveState, Activated]:
        """
        Исполнение плана: ledger-вызовы одним пакетом и новое состояние.

        Возвращает состояние ACTIVE и событие; фиксирует их вызывающий пул.
        Ошибки ledger пробрасываются после компенсации.
        """
        buy = plan.buy
        fee = buy.fee if buy is not None else None

        # Валидация инвариантов до любого ledger-вызова
        new_state = CurveState.model_validate(
            {
                **state.model_dump(),
                "phase": PoolPhase.ACTIVE,
                "circulating_supply": plan.circulating_supply_after,
                "reserve_balance": state.reserve_balance + (buy.cost if buy else 0),
                "owner_treasury_amount": state.owner_treasury_amount
                + (fee.owner_share if fee else 0),
                "protocol_treasury_amount": state.protocol_treasury_amount
                + (fee.protocol_share if fee else 0),
            }
        )

        pool = token.account

        with LedgerBatch("activate") as batch:
            batch.call(
                f"mint anchor {plan.anchor_supply} to pool",
                lambda: token.mint(pool, plan.anchor_supply),
                undo=lambda: token.burn(pool, plan.anchor_supply),
            )

            if buy is not None:
                payment = buy.total_payment
                batch.call(
                    f"pull {payment} reserve from {activator}",
                    lambda: reserve.transfer_allowance_pull(activator, payment),
                    undo=lambda: reserve.refund_allowance_pull(activator, payment),
                )
                batch.call(
                    f"mint preemption {plan.preemption_amount} to {activator}",
                    lambda: token.mint(activator, plan.preemption_amount),
                    undo=lambda: token.burn(activator, plan.preemption_amount),
                )

            if plan.marketing_amount > 0:
                receiver = config.marketing_receiver
                batch.call(
                    f"mint marketing {plan.marketing_amount} to {receiver}",
                    lambda: token.mint(receiver, plan.marketing_amount),
                    undo=lambda: token.burn(receiver, plan.marketing_amount),
                )

        event = Activated(
            activator=activator,
            anchor_supply=plan.anchor_supply,
            preemption_amount=plan.preemption_amount,
            marketing_amount=plan.marketing_amount,
            gross_cost=plan.total_payment,
            fee=fee.fee if fee else 0,
        )

        logger.info(
            "pool %s activated by %s: anchor=%d preemption=%d marketing=%d payment=%d",
            pool,
            activator,
            plan.anchor_supply,
            plan.preemption_amount,
            plan.marketing_amount,
            plan.total_payment,
        )

        return new_state, event
