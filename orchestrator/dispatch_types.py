from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ProviderDescriptor:
    endpoint_base: str
    query_param_name: str
    display_name: str


@dataclass(frozen=True)
class QueryOptions:
    retry_count: int | None = None
    specific_provider: str | None = None


@dataclass(frozen=True)
class AttemptError:
    provider_name: str
    attempt_number: int
    message: str

    def __str__(self) -> str:
        return f"[{self.provider_name} attempt {self.attempt_number}]: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = "ok"
    content: str | None = None


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    FETCH_FAILED = "fetch_failed"
    NO_USABLE_CONTENT = "no_usable_content"


class NextAction(str, Enum):
    SUCCEED = "succeed"
    RETRY_SAME_PROVIDER = "retry_same_provider"
    ADVANCE_PROVIDER = "advance_provider"
    EXHAUST = "exhaust"


@dataclass(frozen=True)
class DispatchDecision:
    action: NextAction
    reason: str
    delay_s: float = 0.0
