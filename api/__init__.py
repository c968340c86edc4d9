"""
API Module for the knowledge reference service.

FastAPI application with routes for:
- Search parameter inspection
- Knowledge reference assembly
- Reranking
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
