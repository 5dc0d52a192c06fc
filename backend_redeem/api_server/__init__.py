"""
API server package — HTTP interface for redemption codes and transaction stats.
"""
