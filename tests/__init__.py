"""
Test suite for nft_ledger

Contains:
- tests/unit/          : Unit tests for individual modules
"""
