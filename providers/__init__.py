"""
AI provider resolution.

This module provides:
- Provider and model records
- Model-to-provider resolution
- Base URL and API key derivation per provider family
"""

from .models import Provider, ModelRef, ProviderType
from .registry import ProviderRegistry, ProviderNotFoundError
from .client import ProviderClient

__all__ = [
    "Provider",
    "ModelRef",
    "ProviderType",
    "ProviderRegistry",
    "ProviderNotFoundError",
    "ProviderClient",
]
