"""
Core utilities — shared exceptions and cross-cutting concerns used by the
stats refresher, the code storage layer and the API server.
"""
