"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn backend_redeem.api_server.app:app --host 0.0.0.0 --port 3001
"""

from backend_redeem.api_server.server import create_app

app = create_app()

__all__ = ["app"]
