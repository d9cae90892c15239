"""
PoolFactory — создание пары (curve token, CurvePool)

Явная фабрика вместо глобального реестра: экземпляр фабрики хранит
protocol fee receiver, кривую по умолчанию и список созданных пар.

create_pool:
1. Новый InMemoryLedger для curve token (totalSupply = 0)
2. Пулу выдаётся minter-роль, владение токеном передаётся пулу
3. CurvePool в фазе INACTIVE, owner = создатель,
   owner treasury → создатель, protocol treasury → protocol_fee_receiver
"""

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from src.core.domain.errors import InvalidConfiguration
from src.core.math.pricing import PriceCurve
from src.ledger.in_memory import InMemoryLedger
from src.ledger.interfaces import BindableLedger
from src.pool.config import CurveConfig, PoolSettings
from src.pool.curve_pool import CurvePool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolDeployment:
    """Созданная пара токен + пул."""

    creator: str
    token: InMemoryLedger
    pool: CurvePool

    @property
    def pool_account(self) -> str:
        return self.pool.account


class PoolFactory:
    """Фабрика пулов одного протокола."""

    def __init__(
        self,
        protocol_fee_receiver: str,
        default_curve: PriceCurve,
        settings: Optional[PoolSettings] = None,
        account: str = "factory",
    ):
        """
        Args:
            protocol_fee_receiver: получатель protocol-доли комиссий всех пулов
            default_curve: кривая для пулов без явно заданной
            settings: параметры движка для всех пулов фабрики
            account: аккаунт фабрики (первичный owner новых токенов)
        """
        if not protocol_fee_receiver:
            raise InvalidConfiguration("protocol_fee_receiver must be a non-empty account id")

        self.protocol_fee_receiver = protocol_fee_receiver
        self.default_curve = default_curve
        self.settings = settings or PoolSettings()
        self.account = account
        # Префикс аккаунтов пулов: фабрики над общим reserve ledger не пересекаются
        self.factory_id = uuid.uuid4().hex
        self._deployments: List[PoolDeployment] = []

    @property
    def deployments(self) -> tuple[PoolDeployment, ...]:
        return tuple(self._deployments)

    def get_deployment(self, pool_account: str) -> PoolDeployment:
        for deployment in self._deployments:
            if deployment.pool_account == pool_account:
                return deployment
        raise KeyError(f"unknown pool {pool_account}")

    def create_pool(
        self,
        creator: str,
        name: str,
        symbol: str,
        reserve: BindableLedger,
        fee_rate_bps: int,
        marketing_receiver: Optional[str] = None,
        min_marketing_budget: int = 0,
        curve: Optional[PriceCurve] = None,
    ) -> PoolDeployment:
        """
        Создание нового curve token и пула, привязанного к нему.

        Args:
            creator: создатель (owner пула и owner treasury receiver)
            name, symbol: метаданные токена
            reserve: ledger резервного актива
            fee_rate_bps: начальная ставка комиссии
            marketing_receiver: получатель marketing allocation при активации
            min_marketing_budget: минимальная marketing allocation
            curve: кривая пула (по умолчанию default_curve фабрики)

        Returns:
            PoolDeployment с токеном и пулом в фазе INACTIVE
        """
        if not creator:
            raise InvalidConfiguration("creator must be a non-empty account id")

        pool_account = f"pool:{symbol}:{self.factory_id}:{len(self._deployments)}"

        config = CurveConfig(
            curve=curve or self.default_curve,
            fee_rate_bps=fee_rate_bps,
            max_fee_rate_bps=self.settings.max_fee_rate_bps,
            owner=creator,
            owner_treasury_receiver=creator,
            protocol_treasury_receiver=self.protocol_fee_receiver,
            marketing_receiver=marketing_receiver,
            min_marketing_budget=min_marketing_budget,
            reserve_decimals=reserve.decimals,
        )

        token = InMemoryLedger(name, symbol, self.settings.token_decimals, owner=self.account)
        token.grant_minter(self.account, pool_account)
        token.revoke_minter(self.account, self.account)
        token.transfer_ownership(self.account, pool_account)

        pool = CurvePool(
            config=config,
            token=token.bind(pool_account),
            reserve=reserve.bind(pool_account),
            settings=self.settings,
        )

        deployment = PoolDeployment(creator=creator, token=token, pool=pool)
        self._deployments.append(deployment)

        logger.info(
            "factory %s: created %s (%s) pool %s for %s, fee %d bps",
            self.account,
            name,
            symbol,
            pool_account,
            creator,
            fee_rate_bps,
        )
        return deployment
