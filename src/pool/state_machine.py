"""Pool lifecycle state machine — фазы жизненного цикла пула.

UNINITIALIZED → INACTIVE → ACTIVE (терминальная):
- INITIALIZE: пул привязан к токену и резерву (выполняется конструктором)
- ACTIVATE: anchor supply выпущен, торговля открыта

Обратных переходов нет. Повторная активация запрещена.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from src.core.domain.curve_state import PoolPhase
from src.core.domain.errors import AlreadyActive, InvalidConfiguration, NotActive


class PoolTransition(str, Enum):
    """Переход жизненного цикла."""
    INITIALIZE = "INITIALIZE"
    ACTIVATE = "ACTIVATE"


@dataclass(frozen=True)
class PoolTransitionResult:
    """Результат перехода фазы пула."""

    new_phase: PoolPhase
    previous_phase: PoolPhase
    transition: PoolTransition

    # Диагностика
    transition_reason: str
    details: str


class PoolLifecycle:
    """Валидатор переходов фаз пула.

    Таблица переходов:
    - UNINITIALIZED --INITIALIZE--> INACTIVE
    - INACTIVE      --ACTIVATE-->   ACTIVE

    Любой другой переход является ошибкой:
    - ACTIVATE не из INACTIVE → AlreadyActive
    - INITIALIZE не из UNINITIALIZED → InvalidConfiguration
    """

    _TRANSITIONS = {
        (PoolPhase.UNINITIALIZED, PoolTransition.INITIALIZE): PoolPhase.INACTIVE,
        (PoolPhase.INACTIVE, PoolTransition.ACTIVATE): PoolPhase.ACTIVE,
    }

    def __init__(self):
        # Зафиксированные переходы (для диагностики)
        self._history: List[PoolTransitionResult] = []

    @property
    def history(self) -> tuple[PoolTransitionResult, ...]:
        return tuple(self._history)

    def evaluate_transition(
        self,
        current_phase: PoolPhase,
        transition: PoolTransition,
    ) -> PoolTransitionResult:
        """Проверка допустимости перехода без его фиксации.

        Args:
            current_phase: текущая фаза пула
            transition: запрошенный переход

        Returns:
            PoolTransitionResult с целевой фазой

        Raises:
            AlreadyActive: ACTIVATE из фазы, отличной от INACTIVE
            InvalidConfiguration: повторная INITIALIZE
        """
        target = self._TRANSITIONS.get((current_phase, transition))

        if target is None:
            if transition == PoolTransition.ACTIVATE:
                raise AlreadyActive(
                    f"pool cannot be activated from phase {current_phase.value}"
                )
            raise InvalidConfiguration(
                f"pool cannot be initialized from phase {current_phase.value}"
            )

        return PoolTransitionResult(
            new_phase=target,
            previous_phase=current_phase,
            transition=transition,
            transition_reason=f"{transition.value.lower()}_{current_phase.value}_to_{target.value}",
            details=f"{current_phase.value} → {target.value}",
        )

    def commit(self, result: PoolTransitionResult) -> PoolPhase:
        """Фиксация перехода после успешного применения всех эффектов."""
        self._history.append(result)
        return result.new_phase

    @staticmethod
    def require_active(phase: PoolPhase) -> None:
        """Raises NotActive, если торговля ещё не открыта."""
        if phase != PoolPhase.ACTIVE:
            raise NotActive(f"pool is {phase.value}, trading requires ACTIVE")

    @staticmethod
    def require_inactive(phase: PoolPhase) -> None:
        """Raises AlreadyActive, если пул не в фазе INACTIVE."""
        if phase != PoolPhase.INACTIVE:
            raise AlreadyActive(f"pool is {phase.value}, activation requires INACTIVE")
