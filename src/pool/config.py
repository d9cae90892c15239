"""
Pool configuration — параметры пула и движка

PoolSettings — frozen dataclass с дефолтами движка (anchor supply, потолки).
CurveConfig  — immutable Pydantic модель конкретного пула. Единственное
               изменяемое поле, fee_rate_bps, меняется заменой всего конфига
               через with_fee_rate() по решению owner.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer, model_validator

from src.core.domain.errors import FeeOutOfRange, InvalidConfiguration
from src.core.domain.units import ANCHOR_SUPPLY, DEFAULT_RESERVE_DECIMALS, TOKEN_DECIMALS
from src.core.math.fees import FEE_RATE_BPS_MAX
from src.core.math.fixed_point import BPS_DENOMINATOR, is_int
from src.core.math.pricing import PriceCurve

# Практический потолок комиссии по умолчанию (10%)
DEFAULT_MAX_FEE_RATE_BPS = 1_000

# Потолок доли маркетинговой аллокации при активации (50%)
DEFAULT_MAX_MARKETING_BUDGET_BPS = 5_000


@dataclass(frozen=True)
class PoolSettings:
    """Параметры движка, общие для пулов одной фабрики.

    - anchor_supply: supply, минтящийся пулу при активации (1 токен)
    - max_fee_rate_bps: практический потолок ставки комиссии
    - max_marketing_budget_bps: потолок доли marketing allocation
    - token_decimals: decimals curve token
    """

    anchor_supply: int = ANCHOR_SUPPLY
    max_fee_rate_bps: int = DEFAULT_MAX_FEE_RATE_BPS
    max_marketing_budget_bps: int = DEFAULT_MAX_MARKETING_BUDGET_BPS
    token_decimals: int = TOKEN_DECIMALS

    def __post_init__(self) -> None:
        if not is_int(self.anchor_supply) or self.anchor_supply <= 0:
            raise InvalidConfiguration(f"anchor_supply must be positive, got {self.anchor_supply}")

        if not is_int(self.max_fee_rate_bps) or not 0 <= self.max_fee_rate_bps <= FEE_RATE_BPS_MAX:
            raise InvalidConfiguration(
                f"max_fee_rate_bps must be in [0, {FEE_RATE_BPS_MAX}], got {self.max_fee_rate_bps}"
            )

        # 100% маркетинга недостижимо: доля считается от общего выпуска
        if (
            not is_int(self.max_marketing_budget_bps)
            or not 0 <= self.max_marketing_budget_bps < BPS_DENOMINATOR
        ):
            raise InvalidConfiguration(
                f"max_marketing_budget_bps must be in [0, {BPS_DENOMINATOR}), "
                f"got {self.max_marketing_budget_bps}"
            )


class CurveConfig(BaseModel):
    """
    Конфигурация bonding curve пула.

    Immutable модель (frozen=True). Создаётся фабрикой один раз при
    конструировании пула.
    """

    curve: PriceCurve = Field(..., description="Ценовая кривая")
    fee_rate_bps: int = Field(0, ge=0, le=FEE_RATE_BPS_MAX, description="Ставка комиссии (bps)")
    max_fee_rate_bps: int = Field(
        DEFAULT_MAX_FEE_RATE_BPS, ge=0, le=FEE_RATE_BPS_MAX, description="Потолок ставки (bps)"
    )

    # Роли
    owner: str = Field(..., min_length=1, description="Governance owner пула")
    owner_treasury_receiver: str = Field(..., min_length=1, description="Получатель доли owner")
    protocol_treasury_receiver: str = Field(
        ..., min_length=1, description="Получатель доли protocol"
    )

    # Маркетинг
    marketing_receiver: Optional[str] = Field(
        None, min_length=1, description="Получатель marketing allocation"
    )
    min_marketing_budget: int = Field(
        0, ge=0, description="Минимальная marketing allocation (минимальные единицы токена)"
    )

    reserve_decimals: int = Field(DEFAULT_RESERVE_DECIMALS, ge=0, le=36)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def validate_fee_ceiling(self) -> "CurveConfig":
        """Ставка не выше потолка пула"""
        if self.fee_rate_bps > self.max_fee_rate_bps:
            raise ValueError(
                f"fee_rate_bps {self.fee_rate_bps} exceeds max_fee_rate_bps {self.max_fee_rate_bps}"
            )
        return self

    @field_serializer("curve")
    def serialize_curve(self, curve: PriceCurve) -> dict[str, Any]:
        return curve.to_dict()

    def with_fee_rate(self, new_fee_rate_bps: int) -> "CurveConfig":
        """
        Копия конфига с новой ставкой комиссии.

        Raises:
            FeeOutOfRange: Если ставка не int, отрицательна или выше потолка
        """
        if (
            not is_int(new_fee_rate_bps)
            or not 0 <= new_fee_rate_bps <= self.max_fee_rate_bps
        ):
            raise FeeOutOfRange(
                f"fee rate {new_fee_rate_bps!r} bps outside [0, {self.max_fee_rate_bps}]"
            )
        return self.model_copy(update={"fee_rate_bps": new_fee_rate_bps})
