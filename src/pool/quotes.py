"""
Quotes — котировки покупки и продажи

Одна и та же функция считает котировку и для simulate_*, и для мутирующей
операции, поэтому при неизменном состоянии числа совпадают точно: именно
столько вызывающий должен заранее разрешить пулу списать.
"""

from dataclasses import dataclass

from src.core.math.fees import FeeSplit, split_fee
from src.core.math.fixed_point import Rounding
from src.core.math.pricing import PriceCurve, average_unit_price, buy_cost, sell_proceeds


@dataclass(frozen=True)
class BuyQuote:
    """Котировка выпуска amount токенов."""

    amount: int
    supply_before: int
    cost: int  # интеграл по кривой, округлён вверх
    fee: FeeSplit

    @property
    def total_payment(self) -> int:
        """Сколько резерва пул спишет с покупателя (cost + fee)."""
        return self.cost + self.fee.fee

    @property
    def supply_after(self) -> int:
        return self.supply_before + self.amount

    @property
    def average_price(self) -> int:
        """Средняя цена за целый токен без комиссии, округление вверх."""
        return average_unit_price(self.cost, self.amount, Rounding.UP)


@dataclass(frozen=True)
class SellQuote:
    """Котировка погашения amount токенов."""

    amount: int
    supply_before: int
    proceeds: int  # интеграл по кривой, округлён вниз
    fee: FeeSplit

    @property
    def net_proceeds(self) -> int:
        """Сколько резерва получит продавец (proceeds - fee)."""
        return self.proceeds - self.fee.fee

    @property
    def supply_after(self) -> int:
        return self.supply_before - self.amount

    @property
    def average_price(self) -> int:
        """Средняя цена за целый токен без комиссии, округление вниз."""
        return average_unit_price(self.proceeds, self.amount, Rounding.DOWN)


def quote_buy(curve: PriceCurve, fee_rate_bps: int, supply: int, amount: int) -> BuyQuote:
    cost = buy_cost(curve, supply, amount)
    return BuyQuote(
        amount=amount,
        supply_before=supply,
        cost=cost,
        fee=split_fee(cost, fee_rate_bps),
    )


def quote_sell(curve: PriceCurve, fee_rate_bps: int, supply: int, amount: int) -> SellQuote:
    proceeds = sell_proceeds(curve, supply, amount)
    return SellQuote(
        amount=amount,
        supply_before=supply,
        proceeds=proceeds,
        fee=split_fee(proceeds, fee_rate_bps),
    )
