"""
Provider registry.

Resolves model references to the provider that serves them.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import ModelRef, Provider

logger = logging.getLogger(__name__)


class ProviderNotFoundError(LookupError):
    """Raised when a model cannot be mapped to a configured provider."""

    def __init__(self, model: Optional[ModelRef]):
        self.model = model
        if model is None:
            message = "No model configured"
        else:
            message = f"No provider '{model.provider}' configured for model '{model.id}'"
        super().__init__(message)


class ProviderRegistry:
    """In-process registry of configured providers, keyed by provider id."""

    def __init__(self, providers: Optional[Iterable[Provider]] = None):
        self._providers: Dict[str, Provider] = {}
        for provider in providers or []:
            self.register(provider)

    @classmethod
    def from_dicts(cls, items: Iterable[Dict[str, Any]]) -> "ProviderRegistry":
        return cls(Provider.from_dict(item) for item in items)

    @classmethod
    def from_file(cls, path: str) -> "ProviderRegistry":
        """
        Load providers from a JSON file.

        The file holds either a list of providers or an object with a
        ``providers`` list.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("providers", [])
        registry = cls.from_dicts(data)
        logger.info(f"Loaded {len(registry)} providers from {path}")
        return registry

    def register(self, provider: Provider) -> None:
        self._providers[provider.id] = provider

    def get(self, provider_id: str) -> Optional[Provider]:
        return self._providers.get(provider_id)

    def providers(self) -> List[Provider]:
        return list(self._providers.values())

    def get_provider_by_model(self, model: Optional[ModelRef]) -> Provider:
        """
        Resolve the provider backing a model.

        Raises:
            ProviderNotFoundError: if the model is unset or its provider is
                not registered.
        """
        if model is None:
            raise ProviderNotFoundError(model)
        provider = self._providers.get(model.provider)
        if provider is None:
            raise ProviderNotFoundError(model)
        return provider

    def __len__(self) -> int:
        return len(self._providers)
