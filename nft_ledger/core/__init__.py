"""
Core domain models, contracts, and invariants.

This module contains the foundational building blocks that are independent
of the hosting environment (event transport, account store, receivers).
"""
