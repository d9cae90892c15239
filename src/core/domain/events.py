"""
Events — Доменные события пула

Immutable Pydantic модели. Каждое событие сериализуется в JSON
(model_dump(mode="json")) и валидируется контрактом
contracts/schema/pool_event.json.

События:
- Activated: пул активирован (anchor + опциональные preemption/marketing)
- Bought: выпуск токенов по кривой
- Sold: погашение токенов по кривой
- FeeConfigured: изменена ставка комиссии
- TreasuryClaimed: receiver вывел накопленную долю комиссий
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Activated(BaseModel):
    """Пул переведён INACTIVE → ACTIVE."""

    event_type: Literal["Activated"] = "Activated"
    activator: str = Field(..., min_length=1, description="Аккаунт, активировавший пул")
    anchor_supply: int = Field(..., gt=0, description="Anchor supply, минтнутый пулу")
    preemption_amount: int = Field(0, ge=0, description="Токенов куплено при активации")
    marketing_amount: int = Field(0, ge=0, description="Токенов минтнуто marketing receiver")
    gross_cost: int = Field(0, ge=0, description="Оплачено активатором (cost + fee)")
    fee: int = Field(0, ge=0, description="Комиссия preemption-покупки")

    model_config = {"frozen": True}


class Bought(BaseModel):
    """Покупка токенов по кривой."""

    event_type: Literal["Bought"] = "Bought"
    buyer: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Выпущено токенов")
    gross_cost: int = Field(..., ge=0, description="Оплачено покупателем (cost + fee)")
    fee: int = Field(..., ge=0)

    model_config = {"frozen": True}


class Sold(BaseModel):
    """Продажа токенов обратно в кривую."""

    event_type: Literal["Sold"] = "Sold"
    seller: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Сожжено токенов")
    net_proceeds: int = Field(..., ge=0, description="Получено продавцом (proceeds - fee)")
    fee: int = Field(..., ge=0)

    model_config = {"frozen": True}


class FeeConfigured(BaseModel):
    """Owner изменил ставку комиссии."""

    event_type: Literal["FeeConfigured"] = "FeeConfigured"
    new_fee_rate_bps: int = Field(..., ge=0, le=10_000)
    previous_fee_rate_bps: int = Field(..., ge=0, le=10_000)

    model_config = {"frozen": True}


class TreasuryClaimed(BaseModel):
    """Receiver вывел накопленную долю комиссий."""

    event_type: Literal["TreasuryClaimed"] = "TreasuryClaimed"
    receiver: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    model_config = {"frozen": True}


PoolEvent = Annotated[
    Union[Activated, Bought, Sold, FeeConfigured, TreasuryClaimed],
    Field(discriminator="event_type"),
]
