"""
nft_ledger: ownership and transfer-authorization ledger for non-fungible tokens.

Contains:
- nft_ledger.core    : domain models, error taxonomy, JSON contracts
- nft_ledger.ledger  : TokenLedger state machine and its collaborators
"""

__version__ = "0.1.0"
