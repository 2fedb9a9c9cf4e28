"""
Wallet Ledger - Source Package

A personal multi-wallet money tracker engine: named wallets, income/expense/
adjustment/transfer transactions and day-scoped statistics.

DESIGN PRINCIPLES:
1. A wallet's balance always equals the sum of its transactions
2. Fail early, fail visibly - rejected operations change nothing
3. No silent corrections
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Wallet Ledger Team"
