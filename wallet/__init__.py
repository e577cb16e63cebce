"""
Wallet Ledger - Source Package

An in-process ledger of phone-identified accounts, the payments made
from them, and favorite payment templates, with flat-file dumps.

DESIGN PRINCIPLES:
1. A balance never goes negative
2. Validate first, mutate second
3. Errors are raised to the caller, never swallowed
4. Every successful mutation is auditable
5. The store is swappable; the dump format is not
"""

__version__ = "1.0.0"
__author__ = "Wallet Ledger Team"
