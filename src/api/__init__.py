"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Complete reply in one JSON response
    - POST /chat/stream: Reply as a Server-Sent Events token stream
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
