"""HTTP surface for a renderer driving one in-memory session.

Run with: uvicorn frost_journey.api.app:app
"""

from .app import build_service, create_app

__all__ = ["build_service", "create_app"]
