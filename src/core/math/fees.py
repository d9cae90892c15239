"""
Fees — Расчёт торговой комиссии и её двустороннее разделение

fee = floor(gross · fee_rate_bps / 10000)

Комиссия делится между owner treasury и protocol treasury поровну;
единственная неделимая единица остатка (нечётный fee) достаётся owner.

    protocol_share = fee // 2
    owner_share    = fee - protocol_share

Покупка: покупатель платит cost + fee.
Продажа: продавец получает proceeds - fee. При fee_rate_bps <= 10000
floor(gross · bps / 10000) <= gross, поэтому fee никогда не превышает
proceeds и нетто-сумма неотрицательна без отдельного ограничения.
"""

from dataclasses import dataclass
from typing import Final

from src.core.math.fixed_point import (
    BPS_DENOMINATOR,
    Rounding,
    is_int,
    mul_div,
    validate_in_range,
    validate_non_negative,
)

# Абсолютный потолок ставки (100%)
FEE_RATE_BPS_MAX: Final[int] = BPS_DENOMINATOR


@dataclass(frozen=True)
class FeeSplit:
    """Результат расчёта комиссии."""

    fee: int
    owner_share: int
    protocol_share: int

    def __post_init__(self) -> None:
        for name, v in (
            ("fee", self.fee),
            ("owner_share", self.owner_share),
            ("protocol_share", self.protocol_share),
        ):
            if not is_int(v):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

        if self.owner_share + self.protocol_share != self.fee:
            raise ValueError(
                f"fee split leaks: {self.owner_share} + {self.protocol_share} != {self.fee}"
            )


def compute_fee(gross_amount: int, fee_rate_bps: int) -> int:
    """
    Комиссия со сделки, округление вниз.

    Examples:
        >>> compute_fee(1_000_000, 30)
        3000
    """
    validate_non_negative(gross_amount, "gross_amount")
    validate_in_range(fee_rate_bps, "fee_rate_bps", 0, FEE_RATE_BPS_MAX)
    return mul_div(gross_amount, fee_rate_bps, BPS_DENOMINATOR, Rounding.DOWN)


def split_fee(gross_amount: int, fee_rate_bps: int) -> FeeSplit:
    """
    Расчёт комиссии и её разделение owner/protocol.

    Args:
        gross_amount: Сумма сделки (cost для покупки, proceeds для продажи)
        fee_rate_bps: Ставка комиссии в basis points

    Returns:
        FeeSplit с гарантией owner_share + protocol_share == fee
        и fee <= gross_amount

    Examples:
        >>> split_fee(16_503, 30)
        FeeSplit(fee=49, owner_share=25, protocol_share=24)
    """
    fee = compute_fee(gross_amount, fee_rate_bps)

    protocol_share = fee // 2
    owner_share = fee - protocol_share

    return FeeSplit(fee=fee, owner_share=owner_share, protocol_share=protocol_share)
