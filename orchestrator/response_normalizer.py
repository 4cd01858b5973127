import json
from typing import Any

from models.normalized_result import NormalizedResult
from orchestrator.dispatch_types import ValidationResult
from orchestrator.errors import NoUsableContent

RECOGNIZED_FIELDS = ("message", "data", "result", "response")


class ResponseNormalizer:
    def __init__(self, fields: tuple[str, ...] = RECOGNIZED_FIELDS):
        self._fields = fields

    def extract(self, body: Any) -> ValidationResult:
        if not isinstance(body, dict):
            return ValidationResult(ok=False, reason="not_an_object")

        for name in self._fields:
            value = body.get(name)
            if value:
                return ValidationResult(ok=True, reason=name, content=self._as_text(value))

        return ValidationResult(ok=False, reason="no_recognized_field")

    def normalize(self, body: Any, provider_name: str) -> NormalizedResult:
        validation = self.extract(body)
        if not validation.ok:
            raise NoUsableContent(
                f"Response did not contain any of {', '.join(self._fields)} ({validation.reason})"
            )
        return NormalizedResult.from_provider(content=validation.content, source=provider_name)

    def _as_text(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)
