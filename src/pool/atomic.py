"""
Atomic ledger batch — all-or-nothing последовательность ledger-вызовов

Операция пула может затрагивать два ledger (токен и резерв). Если вызов
посередине падает, уже применённые вызовы компенсируются в обратном
порядке, а исходная ошибка пробрасывается вызывающему.

Необратимый шаг (исходящий transfer пользователю) допускается только
последним: после него в пакете не может быть вызовов, которые способны
упасть.
"""

import logging
from typing import Callable, List, Optional, Tuple

from src.core.domain.errors import CurvePoolError

logger = logging.getLogger(__name__)


class RollbackFailed(CurvePoolError):
    """Компенсация упала: ledger может быть рассинхронизирован с пулом."""


class LedgerBatch:
    """
    Журнал компенсаций для ledger-вызовов одной операции.

    Usage:
        with LedgerBatch("buy") as batch:
            batch.call("pull reserve", pull, undo=refund)
            batch.call("mint tokens", mint, undo=burn)
    """

    def __init__(self, operation: str):
        self.operation = operation
        self._undo_log: List[Tuple[str, Callable[[], None]]] = []
        self._sealed = False

    def call(
        self,
        description: str,
        action: Callable[[], None],
        undo: Optional[Callable[[], None]],
    ) -> None:
        """
        Выполнить ledger-вызов и запомнить компенсацию.

        Args:
            description: Описание шага для логов
            action: Ledger-вызов
            undo: Компенсирующий вызов; None для необратимого последнего шага
        """
        if self._sealed:
            raise RuntimeError(
                f"{self.operation}: step '{description}' after an irreversible step"
            )

        action()
        logger.debug("%s: %s applied", self.operation, description)

        if undo is None:
            self._sealed = True
        else:
            self._undo_log.append((description, undo))

    def rollback(self) -> None:
        """
        Компенсировать применённые шаги в обратном порядке.

        Упавшая компенсация не останавливает откат: остальные шаги всё равно
        компенсируются, а все ошибки собираются в один RollbackFailed.
        """
        failures = []
        while self._undo_log:
            description, undo = self._undo_log.pop()
            try:
                undo()
            except Exception as exc:
                logger.exception("%s: compensation of %s failed", self.operation, description)
                failures.append(f"{description}: {type(exc).__name__}: {exc}")
            else:
                logger.debug("%s: %s compensated", self.operation, description)

        if failures:
            raise RollbackFailed(
                f"{self.operation}: compensation failed for " + "; ".join(failures)
            )

    def __enter__(self) -> "LedgerBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and self._undo_log:
            logger.warning(
                "%s failed (%s), rolling back %d ledger step(s)",
                self.operation,
                exc_type.__name__,
                len(self._undo_log),
            )
            self.rollback()
        return False
