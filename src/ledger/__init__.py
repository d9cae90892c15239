"""Ledger — capability-интерфейсы ledger-коллабораторов и in-memory реализация."""

from .interfaces import BindableLedger, ReserveLedger, TokenLedger
from .in_memory import InMemoryLedger, LedgerHandle

__all__ = [
    "BindableLedger",
    "ReserveLedger",
    "TokenLedger",
    "InMemoryLedger",
    "LedgerHandle",
]
