"""
CurveState — Снапшот состояния пула

Immutable Pydantic модель. Пул никогда не мутирует снапшот: операция
собирает новый CurveState и подменяет ссылку целиком только после успеха
всех ledger-вызовов, поэтому читатели видят состояние либо до, либо после
операции, но не промежуточное.

Неотрицательность всех количеств гарантируется Field(ge=0): невалидное
состояние невозможно построить.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

# =============================================================================
# ENUMS
# =============================================================================


class PoolPhase(str, Enum):
    """
    Фаза жизненного цикла пула.

    UNINITIALIZED → INACTIVE → ACTIVE (терминальная)
    """

    UNINITIALIZED = "UNINITIALIZED"
    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"


# =============================================================================
# CURVE STATE MODEL
# =============================================================================


class CurveState(BaseModel):
    """
    Состояние bonding curve пула.

    Все суммы — int в минимальных единицах:
    - circulating_supply, anchor_supply: 18 знаков токена
    - reserve_balance, *_treasury_*: decimals резервного актива
    """

    phase: PoolPhase = Field(PoolPhase.UNINITIALIZED, description="Фаза жизненного цикла")
    anchor_supply: int = Field(..., gt=0, description="Supply, минтящийся при активации")

    circulating_supply: int = Field(0, ge=0, description="Текущее circulating supply")
    reserve_balance: int = Field(0, ge=0, description="Резерв под кривой (без комиссий)")

    owner_treasury_amount: int = Field(0, ge=0, description="Накопленная доля owner")
    protocol_treasury_amount: int = Field(0, ge=0, description="Накопленная доля protocol")
    owner_treasury_claimed: int = Field(0, ge=0, description="Выведено owner receiver")
    protocol_treasury_claimed: int = Field(0, ge=0, description="Выведено protocol receiver")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_phase_invariants(self) -> "CurveState":
        """Supply == 0 до активации, >= anchor после; claimed <= accrued."""
        if self.phase != PoolPhase.ACTIVE and self.circulating_supply != 0:
            raise ValueError(
                f"circulating_supply must be 0 in phase {self.phase.value}, "
                f"got {self.circulating_supply}"
            )

        if self.phase == PoolPhase.ACTIVE and self.circulating_supply < self.anchor_supply:
            raise ValueError(
                f"circulating_supply {self.circulating_supply} below anchor "
                f"{self.anchor_supply} in ACTIVE phase"
            )

        if self.owner_treasury_claimed > self.owner_treasury_amount:
            raise ValueError("owner_treasury_claimed exceeds owner_treasury_amount")

        if self.protocol_treasury_claimed > self.protocol_treasury_amount:
            raise ValueError("protocol_treasury_claimed exceeds protocol_treasury_amount")

        return self

    @property
    def is_active(self) -> bool:
        return self.phase == PoolPhase.ACTIVE

    def treasury_total(self) -> int:
        """Сумма всех собранных комиссий за жизнь пула."""
        return self.owner_treasury_amount + self.protocol_treasury_amount

    def owner_treasury_unclaimed(self) -> int:
        return self.owner_treasury_amount - self.owner_treasury_claimed

    def protocol_treasury_unclaimed(self) -> int:
        return self.protocol_treasury_amount - self.protocol_treasury_claimed

    def pool_reserve_holdings(self) -> int:
        """
        Сколько резерва пул должен держать в ledger.

        Резерв под кривой плюс ещё не выведенные комиссии.
        """
        return (
            self.reserve_balance
            + self.owner_treasury_unclaimed()
            + self.protocol_treasury_unclaimed()
        )
