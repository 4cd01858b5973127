import re

import pytest

from orchestrator.errors import NoUsableContent
from orchestrator.response_normalizer import ResponseNormalizer


def test_message_has_priority():
    result = ResponseNormalizer().extract({"response": "r", "data": "d", "message": "m"})
    assert result.ok is True
    assert result.reason == "message"
    assert result.content == "m"


def test_falls_through_empty_fields():
    result = ResponseNormalizer().extract({"message": "", "data": None, "result": "answer"})
    assert result.ok is True
    assert result.content == "answer"


def test_response_field_recognized():
    assert ResponseNormalizer().extract({"status": True, "response": "hi"}).content == "hi"


def test_no_recognized_field():
    result = ResponseNormalizer().extract({"status": True, "answer": "hidden"})
    assert result.ok is False
    assert result.reason == "no_recognized_field"


@pytest.mark.parametrize("body", [None, [], "text", 42])
def test_non_object_body(body):
    assert ResponseNormalizer().extract(body).ok is False


def test_structured_content_serialized():
    result = ResponseNormalizer().extract({"data": {"text": "héllo"}})
    assert result.content == '{"text": "héllo"}'


def test_normalize_tags_source_and_timestamp():
    result = ResponseNormalizer().normalize({"result": "42"}, "Rebix-Ai")
    assert result.content == "42"
    assert result.metadata.source == "Rebix-Ai"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", result.metadata.timestamp)


def test_normalize_raises_on_unusable_body():
    with pytest.raises(NoUsableContent):
        ResponseNormalizer().normalize({"error": "busy"}, "A")
