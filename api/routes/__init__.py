"""
API Routes for the knowledge reference service.
"""

from . import knowledge

__all__ = ["knowledge"]
