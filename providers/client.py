"""
Provider client.

Derives connection details (base URL, API key) from a provider record.
"""

from typing import Optional

from .models import Provider, ProviderType


def format_api_host(host: str) -> str:
    """
    Format an OpenAI-compatible host into a base URL.

    A trailing ``/`` keeps the host as given, a trailing ``#`` forces the
    host verbatim without the marker, anything else gets ``/v1/``.
    """
    if host.endswith("/"):
        return host
    if host.endswith("#"):
        return host[:-1]
    return f"{host}/v1/"


class ProviderClient:
    """Connection details for a single provider."""

    RAW_HOST_TYPES = (ProviderType.GEMINI, ProviderType.ANTHROPIC)

    def __init__(self, provider: Provider):
        self.provider = provider

    def get_base_url(self) -> str:
        host = self.provider.api_host or ""
        if self.provider.type in self.RAW_HOST_TYPES:
            return host
        return format_api_host(host)

    def get_api_key(self) -> Optional[str]:
        """Return the first configured key; providers may list several, comma separated."""
        keys = [k.strip() for k in (self.provider.api_key or "").split(",") if k.strip()]
        return keys[0] if keys else None
