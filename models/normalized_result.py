from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ResultMetadata:
    source: str
    timestamp: str = field(default_factory=utc_timestamp)


@dataclass(frozen=True)
class NormalizedResult:
    content: str
    metadata: ResultMetadata

    @classmethod
    def from_provider(cls, content: str, source: str) -> "NormalizedResult":
        return cls(content=content, metadata=ResultMetadata(source=source))

    @property
    def source(self) -> str:
        return self.metadata.source

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "metadata": {
                "timestamp": self.metadata.timestamp,
                "source": self.metadata.source,
            },
        }
