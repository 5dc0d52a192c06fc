"""
Backend Redeem — redemption-code storage and Solana transaction statistics.

Persists redemption codes per wallet address and keeps a periodically
refreshed count of transactions against a fixed program-derived address.
"""

__version__ = "0.1.0"
