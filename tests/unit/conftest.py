"""Общие фикстуры: эталонная линейная кривая, USDT-подобный резерв, фабрика и пул."""

import pytest

from src.core.domain.units import TOKEN_UNIT, to_base_units
from src.core.math.pricing import LinearCurve
from src.ledger import InMemoryLedger
from src.pool import PoolFactory

# Эталонная кривая: цена растёт на 11.002 мин. единицы резерва за каждый
# целый токен сверх anchor supply.
REFERENCE_SLOPE_WAD = 11_002 * 10**15

CREATOR = "alice"
TRADER = "bob"
PROTOCOL = "protocol-treasury"
MARKETING = "marketing"


def usdt(amount) -> int:
    return to_base_units(amount, 6)


@pytest.fixture
def reference_curve():
    return LinearCurve(slope_wad=REFERENCE_SLOPE_WAD, supply_offset=TOKEN_UNIT)


@pytest.fixture
def reserve_ledger():
    """USDT-подобный резерв (6 decimals) с балансами участников."""
    ledger = InMemoryLedger("Tether USD", "USDT", 6, owner="issuer")
    for account in (CREATOR, TRADER, "carol"):
        ledger.mint("issuer", account, usdt(1_000_000))
    return ledger


@pytest.fixture
def factory(reference_curve):
    return PoolFactory(protocol_fee_receiver=PROTOCOL, default_curve=reference_curve)


@pytest.fixture
def deployment(factory, reserve_ledger):
    """Неактивный пул с комиссией 30 bps и marketing receiver."""
    return factory.create_pool(
        creator=CREATOR,
        name="Curve Token",
        symbol="CRV",
        reserve=reserve_ledger,
        fee_rate_bps=30,
        marketing_receiver=MARKETING,
    )


@pytest.fixture
def pool(deployment):
    return deployment.pool


@pytest.fixture
def active_pool(pool):
    """Пул, активированный создателем без preemption-покупки."""
    pool.activate(CREATOR)
    return pool


def approve_and_buy(pool, reserve_ledger, buyer, amount):
    """Разрешить пулу списать ровно total_payment и купить."""
    quote = pool.simulate_buy(amount)
    reserve_ledger.approve(buyer, pool.account, quote.total_payment)
    return pool.buy(buyer, amount)


def approve_and_sell(pool, token_ledger, seller, amount):
    token_ledger.approve(seller, pool.account, amount)
    return pool.sell(seller, amount)
