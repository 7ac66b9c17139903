"""
Contract Validation Module

Модуль для валидации JSON контрактов реестра (уведомления и снапшоты).
"""

from .validators import (
    ApprovalEventValidator,
    ContractValidator,
    LedgerSnapshotValidator,
    SchemaLoader,
    TransferEventValidator,
    validate_approval_event,
    validate_event,
    validate_ledger_snapshot,
    validate_transfer_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TransferEventValidator",
    "ApprovalEventValidator",
    "LedgerSnapshotValidator",
    # Functions
    "validate_transfer_event",
    "validate_approval_event",
    "validate_ledger_snapshot",
    "validate_event",
]
