"""
Domain models and value objects.

Contains the ledger's fundamental entities: identities, token records,
notifications, snapshots and the error taxonomy.
"""

from nft_ledger.core.domain.errors import (
    AlreadyExistsError,
    InvalidApproveeError,
    InvalidArgumentError,
    InvalidRecipientError,
    LedgerError,
    LedgerErrorKind,
    LedgerInvariantError,
    NotFoundError,
    NotOwnerError,
    RecipientRejectedError,
    ReentrancyError,
    RedundantApprovalError,
    UnauthorizedError,
)
from nft_ledger.core.domain.events import (
    ApprovalEvent,
    LedgerEvent,
    TransferEvent,
    event_from_dict,
    event_to_dict,
)
from nft_ledger.core.domain.identity import (
    IDENTITY_BYTES,
    MAX_TOKEN_ID,
    NULL_IDENTITY,
    IdentityStr,
    identity_from_int,
    is_null_identity,
    normalize_identity,
    validate_token_id,
)
from nft_ledger.core.domain.ledger_state import LedgerSnapshot
from nft_ledger.core.domain.token import TokenRecord

__all__ = [
    # Identity module
    "IDENTITY_BYTES",
    "MAX_TOKEN_ID",
    "NULL_IDENTITY",
    "IdentityStr",
    "identity_from_int",
    "is_null_identity",
    "normalize_identity",
    "validate_token_id",
    # Token record
    "TokenRecord",
    # Events
    "TransferEvent",
    "ApprovalEvent",
    "LedgerEvent",
    "event_to_dict",
    "event_from_dict",
    # Snapshot
    "LedgerSnapshot",
    # Errors
    "LedgerErrorKind",
    "LedgerError",
    "UnauthorizedError",
    "InvalidRecipientError",
    "InvalidApproveeError",
    "AlreadyExistsError",
    "NotFoundError",
    "NotOwnerError",
    "RedundantApprovalError",
    "RecipientRejectedError",
    "InvalidArgumentError",
    "ReentrancyError",
    "LedgerInvariantError",
]
