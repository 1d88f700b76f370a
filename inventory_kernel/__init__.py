"""
Inventory Kernel - weighted-average-cost stock ledger.

Domain types, typed exceptions, structured logging and persistence models for:
- Per-product running balances (quantity, value, average cost)
- Zero-crossing bookkeeping
- Append-only price history
- Chronological, auditable ledger rows
"""

__version__ = "0.1.0"
