import json
from unittest.mock import MagicMock

import pytest
import requests

from api.http_client import RequestsFetchClient
from orchestrator.errors import ProviderFetchError


def _response(status=200, content_type="application/json", body=b"{}", chunks=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.headers = {"content-type": content_type} if content_type else {}
    response.encoding = "utf-8"
    response.iter_content.return_value = chunks if chunks is not None else [body]
    return response


def _client(response=None, side_effect=None, clock=None):
    session = MagicMock()
    session.headers = {}
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    if clock is None:
        return RequestsFetchClient(session=session), session
    return RequestsFetchClient(session=session, clock=clock), session


def test_returns_parsed_json():
    client, session = _client(_response(body=json.dumps({"message": "hi"}).encode()))
    assert client.fetch_json("https://x.example?q=a", 2500) == {"message": "hi"}
    session.get.assert_called_once_with("https://x.example?q=a", timeout=2.5, stream=True)


def test_sets_accept_header():
    _, session = _client(_response())
    assert session.headers["Accept"] == "application/json"


def test_json_with_charset_accepted():
    client, _ = _client(_response(content_type="application/json; charset=utf-8", body=b'{"data": 1}'))
    assert client.fetch_json("https://x.example", 1000) == {"data": 1}


def test_wrong_content_type_reports_excerpt():
    client, _ = _client(_response(content_type="text/html", body=b"<html>" + b"x" * 200))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    err = exc_info.value
    assert err.code == "content_type"
    assert str(err).startswith("Invalid content-type. Received: text/html. Response: <html>")
    assert len(err.details["excerpt"]) == 100


def test_missing_content_type_checked_before_status():
    client, _ = _client(_response(status=503, content_type=None, body=b"unavailable"))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.code == "content_type"
    assert "Received: unknown" in str(exc_info.value)


def test_http_error_attaches_payload():
    client, _ = _client(_response(status=429, body=b'{"error": "slow down"}'))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    err = exc_info.value
    assert err.code == "http_status"
    assert err.status_code == 429
    assert str(err) == "HTTP error! status: 429"
    assert err.details["payload"] == {"error": "slow down"}


def test_http_error_with_unparseable_payload():
    client, _ = _client(_response(status=500, body=b"not json"))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.details["payload"] == {}


def test_invalid_json_body():
    client, _ = _client(_response(body=b"{broken"))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.code == "invalid_json"


def test_connect_timeout_maps_to_timeout():
    client, _ = _client(side_effect=requests.exceptions.ConnectTimeout("slow"))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 750)
    assert exc_info.value.code == "timeout"
    assert "750ms" in str(exc_info.value)


def test_connection_error_maps_to_transport():
    client, _ = _client(side_effect=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.code == "transport"


def test_slow_body_cut_off_at_deadline():
    ticks = iter([0.0, 0.2, 0.5, 5.0])
    response = _response(chunks=[b'{"mes', b'sage": "late"}'])
    client, _ = _client(response, clock=lambda: next(ticks))

    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.code == "timeout"
    response.close.assert_called_once()


def test_late_headers_cut_off_before_body():
    ticks = iter([0.0, 1.5])
    response = _response(body=b'{"message": "late"}')
    client, _ = _client(response, clock=lambda: next(ticks))

    with pytest.raises(ProviderFetchError) as exc_info:
        client.fetch_json("https://x.example", 1000)
    assert exc_info.value.code == "timeout"
    response.iter_content.assert_not_called()
    response.close.assert_called_once()


def test_close_closes_session():
    client, session = _client(_response())
    client.close()
    session.close.assert_called_once()
