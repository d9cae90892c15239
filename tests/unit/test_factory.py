"""
Тесты PoolFactory и конструктора CurvePool

Coverage:
- Создание пары token + пул: роли, владение, конфигурация
- Реестр созданных пулов
- Валидация связки ledger-handle и конфига
"""

import pytest
from pydantic import ValidationError

from src.core.domain.curve_state import PoolPhase
from src.core.domain.errors import InvalidConfiguration
from src.core.domain.units import tokens
from src.core.math.fixed_point import WAD
from src.core.math.pricing import LinearCurve
from src.ledger import InMemoryLedger
from src.pool import CurvePool, PoolFactory, PoolSettings

from tests.unit.conftest import CREATOR, MARKETING, PROTOCOL, TRADER, approve_and_buy


class TestCreatePool:
    def test_deployment(self, factory, deployment, reference_curve):
        pool, token = deployment.pool, deployment.token

        assert deployment.creator == CREATOR
        assert deployment.pool_account == pool.account
        assert pool.account.startswith("pool:CRV:")
        assert factory.factory_id in pool.account
        assert pool.phase == PoolPhase.INACTIVE
        assert pool.config.curve == reference_curve
        assert pool.config.owner == CREATOR
        assert pool.config.owner_treasury_receiver == CREATOR
        assert pool.config.protocol_treasury_receiver == PROTOCOL
        assert pool.config.marketing_receiver == MARKETING
        assert pool.config.fee_rate_bps == 30

    def test_token_roles(self, factory, deployment):
        token, pool = deployment.token, deployment.pool

        assert token.symbol == "CRV"
        assert token.decimals == 18
        assert token.total_supply == 0
        assert token.owner == pool.account
        assert token.is_minter(pool.account)
        assert not token.is_minter(factory.account)

    def test_registry(self, factory, reserve_ledger):
        first = factory.create_pool(CREATOR, "One", "ONE", reserve_ledger, 0)
        second = factory.create_pool(CREATOR, "Two", "TWO", reserve_ledger, 0)

        assert factory.deployments == (first, second)
        assert first.pool_account != second.pool_account
        assert factory.get_deployment(second.pool_account) is second
        with pytest.raises(KeyError):
            factory.get_deployment("pool:NONE:9")

    def test_factories_sharing_reserve_are_isolated(self, reference_curve, reserve_ledger):
        """Два экземпляра фабрики над одним reserve ledger не делят аккаунт пула."""
        first = PoolFactory(PROTOCOL, reference_curve).create_pool(
            CREATOR, "Curve Token", "CRV", reserve_ledger, 30
        )
        second = PoolFactory(PROTOCOL, reference_curve).create_pool(
            CREATOR, "Curve Token", "CRV", reserve_ledger, 30
        )
        a, b = first.pool, second.pool

        assert a.account != b.account

        a.activate(CREATOR)
        b.activate(CREATOR)
        approve_and_buy(a, reserve_ledger, TRADER, tokens(1000))

        assert reserve_ledger.balance_of(a.account) == a.state.pool_reserve_holdings()
        assert reserve_ledger.balance_of(b.account) == b.state.pool_reserve_holdings() == 0
        assert second.token.balance_of(TRADER) == 0

    def test_custom_curve(self, factory, reserve_ledger):
        curve = LinearCurve(slope_wad=WAD, base_price_wad=WAD)
        deployment = factory.create_pool(CREATOR, "Flat", "FLT", reserve_ledger, 0, curve=curve)

        assert deployment.pool.config.curve is curve

    def test_fee_above_engine_ceiling(self, factory, reserve_ledger):
        with pytest.raises(ValidationError):
            factory.create_pool(CREATOR, "Greedy", "GRD", reserve_ledger, 1_001)

    def test_empty_creator(self, factory, reserve_ledger):
        with pytest.raises(InvalidConfiguration):
            factory.create_pool("", "Anon", "ANO", reserve_ledger, 0)

    def test_empty_protocol_receiver(self, reference_curve):
        with pytest.raises(InvalidConfiguration):
            PoolFactory("", reference_curve)

    def test_reserve_with_other_decimals(self, reference_curve):
        dai = InMemoryLedger("Dai", "DAI", 18, owner="issuer")
        deployment = PoolFactory(PROTOCOL, reference_curve).create_pool(
            CREATOR, "Curve Token", "CRV", dai, 30
        )

        assert deployment.pool.config.reserve_decimals == 18


class TestCurvePoolConstruction:
    def test_handles_must_share_account(self, deployment, reserve_ledger):
        pool = deployment.pool

        with pytest.raises(InvalidConfiguration, match="same pool account"):
            CurvePool(pool.config, deployment.token.bind("other"), reserve_ledger.bind(pool.account))

    def test_reserve_decimals_must_match(self, deployment):
        pool = deployment.pool
        dai = InMemoryLedger("Dai", "DAI", 18, owner="issuer")

        with pytest.raises(InvalidConfiguration, match="decimals"):
            CurvePool(pool.config, pool.token, dai.bind(pool.account))

    def test_config_ceiling_within_engine_ceiling(self, deployment):
        pool = deployment.pool

        with pytest.raises(InvalidConfiguration, match="ceiling"):
            CurvePool(
                pool.config,
                pool.token,
                pool.reserve,
                settings=PoolSettings(max_fee_rate_bps=500),
            )
