from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

import yaml

from orchestrator.dispatch_types import ProviderDescriptor

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"

DEFAULT_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("https://api-rebix.vercel.app/api/cohere", "q", "Rebix-Ai"),
    ProviderDescriptor("https://api.siputzx.my.id/api/ai/blackboxai-pro", "content", "BlackboxAI-Pro"),
    ProviderDescriptor("https://api.siputzx.my.id/api/ai/blackboxai", "content", "BlackboxAI"),
    ProviderDescriptor("https://vapis.my.id/api/blackbox", "q", "Blackbox-Vapis"),
    ProviderDescriptor("https://apis.davidcyriltech.my.id/blackbox", "q", "Blackbox-DavidCyril"),
)


def build_request_url(descriptor: ProviderDescriptor, query_text: str) -> str:
    # Lone surrogates are encoded as their raw UTF-8 bytes so every str yields a URL.
    encoded = quote(query_text, safe=_URI_COMPONENT_SAFE, errors="surrogatepass")
    return f"{descriptor.endpoint_base}?{descriptor.query_param_name}={encoded}"


@dataclass(frozen=True)
class ProviderRegistry:
    _providers: tuple[ProviderDescriptor, ...]

    def __post_init__(self):
        providers = tuple(self._providers)
        seen: set[str] = set()
        for descriptor in providers:
            if descriptor.display_name in seen:
                raise ValueError(f"Duplicate provider name in registry: {descriptor.display_name}")
            seen.add(descriptor.display_name)
        object.__setattr__(self, "_providers", providers)

    @classmethod
    def default(cls) -> "ProviderRegistry":
        return cls(DEFAULT_PROVIDERS)

    @classmethod
    def from_yaml(cls, path: str | None = None) -> "ProviderRegistry":
        registry_path = (
            Path(path)
            if path
            else Path(__file__).resolve().parent.parent / "config" / "provider_registry.yaml"
        )
        if not registry_path.exists():
            raise ValueError(f"Provider registry not found at {registry_path}")

        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        if not data or "providers" not in data:
            raise ValueError("Invalid provider registry: missing providers")

        entries = data["providers"]
        if not isinstance(entries, list) or not entries:
            raise ValueError("Invalid provider registry: providers must be a non-empty list")

        providers: list[ProviderDescriptor] = []
        for entry in entries:
            required = ["name", "url", "param"]
            if not isinstance(entry, dict) or any(key not in entry for key in required):
                raise ValueError(f"Missing required fields in provider entry: {entry!r}")
            providers.append(
                ProviderDescriptor(
                    endpoint_base=str(entry["url"]),
                    query_param_name=str(entry["param"]),
                    display_name=str(entry["name"]),
                )
            )

        return cls(tuple(providers))

    def list(self) -> tuple[ProviderDescriptor, ...]:
        return self._providers

    def filter(self, display_name: str) -> tuple[ProviderDescriptor, ...]:
        for descriptor in self._providers:
            if descriptor.display_name == display_name:
                return (descriptor,)
        return ()

    def names(self) -> list[str]:
        return [p.display_name for p in self._providers]

    def __len__(self) -> int:
        return len(self._providers)
