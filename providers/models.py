"""
Provider and model records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ProviderType(Enum):
    """Supported provider families."""
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    AZURE_OPENAI = "azure-openai"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProviderType":
        try:
            return cls((value or "openai").lower())
        except ValueError:
            # Unknown families speak the OpenAI-compatible protocol
            return cls.OPENAI


@dataclass(frozen=True)
class ModelRef:
    """Reference to a model hosted by a provider."""
    id: str
    provider: str
    name: Optional[str] = None
    group: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelRef":
        return cls(
            id=data["id"],
            provider=data["provider"],
            name=data.get("name"),
            group=data.get("group"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "provider": self.provider, "name": self.name, "group": self.group}


@dataclass
class Provider:
    """Configured AI provider."""
    id: str
    type: ProviderType
    api_host: str
    api_key: str = ""
    api_version: Optional[str] = None
    name: Optional[str] = None
    models: List[ModelRef] = field(default_factory=list)
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provider":
        provider_id = data["id"]
        return cls(
            id=provider_id,
            type=ProviderType.parse(data.get("type")),
            api_host=data.get("apiHost") or data.get("api_host") or "",
            api_key=data.get("apiKey") or data.get("api_key") or "",
            api_version=data.get("apiVersion") or data.get("api_version"),
            name=data.get("name"),
            models=[
                ModelRef.from_dict({"provider": provider_id, **m})
                for m in data.get("models", [])
            ],
            enabled=data.get("enabled", True),
        )
