"""chatgraph backend API.

FastAPI service for workspace membership:
- Session-authenticated member listing
- Membership checks before exposing workspace data
"""

from chatgraph.backend.app import create_app

__all__ = ["create_app"]
