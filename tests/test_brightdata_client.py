"""
Tests for BrightDataClient against an in-process httpx transport.
"""

import asyncio
import json

import httpx
import pytest

from api.brightdata_client import BrightDataClient
from api.errors import ProtocolError, TransportError
from models.job import JobStatus
from orchestrator.poller import PollPolicy, wait_for_results
from models.search_spec import create_search


def _client(settings, handler) -> BrightDataClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BrightDataClient(settings, http_client=http)


def test_trigger_posts_specs_with_auth_and_dataset(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"snapshot_id": "s_abc"})

    client = _client(settings, handler)
    specs = [create_search("money", "Google", "edition.cnn.com/business")]

    response = asyncio.run(client.trigger(specs))

    assert response.job_id == "s_abc"
    assert seen["method"] == "POST"
    assert seen["path"] == "/datasets/v3/trigger"
    assert seen["params"] == {"dataset_id": "gd_test", "include_errors": "true"}
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"] == [
        {
            "url": "https://google.com",
            "with": "Google",
            "where": "edition.cnn.com/business",
            "find": "money",
            "timeline": 5000,
        }
    ]


def test_status_hits_progress_endpoint(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/datasets/v3/progress/s_abc"
        assert request.headers["Authorization"] == "Bearer test-key"
        return httpx.Response(200, json={"status": "running", "snapshot_id": "s_abc"})

    progress = asyncio.run(_client(settings, handler).status("s_abc"))

    assert progress.job_status is JobStatus.RUNNING


def test_download_requests_json_format_and_passes_payload_through(settings):
    payload = [{"keyword": "money", "organic": [{"rank": 1, "link": "https://cnn.com"}]}]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/datasets/v3/snapshot/s_abc"
        assert request.url.params["format"] == "json"
        return httpx.Response(200, json=payload)

    assert asyncio.run(_client(settings, handler).download("s_abc")) == payload


@pytest.mark.parametrize("operation", ["trigger", "status", "download"])
def test_non_2xx_raises_transport_error(settings, operation):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Unauthorized")

    client = _client(settings, handler)
    calls = {
        "trigger": lambda: client.trigger([create_search("x")]),
        "status": lambda: client.status("s_abc"),
        "download": lambda: client.download("s_abc"),
    }

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(calls[operation]())

    assert exc_info.value.status_code == 401
    assert exc_info.value.operation == operation
    assert "status: 401" in str(exc_info.value)


def test_network_failure_raises_transport_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(_client(settings, handler).status("s_abc"))

    assert exc_info.value.status_code is None


def test_trigger_with_non_object_body_is_protocol_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    with pytest.raises(ProtocolError):
        asyncio.run(_client(settings, handler).trigger([create_search("x")]))


def test_invalid_json_is_protocol_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(ProtocolError):
        asyncio.run(_client(settings, handler).download("s_abc"))


def test_injected_http_client_is_not_closed(settings):
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))

    async def scenario():
        async with BrightDataClient(settings, http_client=http):
            pass
        return http.is_closed

    assert asyncio.run(scenario()) is False


def test_trigger_accepts_numeric_request_id(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"request_id": 12345})

    response = asyncio.run(_client(settings, handler).trigger([create_search("x")]))

    assert response.job_id == "12345"


def test_non_string_status_keeps_polling_until_ready(settings, fake_timer):
    bodies = [{"status": 1}, {"status": "ready"}]
    downloads = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/progress/s_abc"):
            return httpx.Response(200, json=bodies.pop(0))
        downloads.append(request.url.path)
        return httpx.Response(200, json=[{"ok": True}])

    policy = PollPolicy(sleep=fake_timer.sleep, clock=fake_timer.clock)
    result = asyncio.run(wait_for_results(_client(settings, handler), "s_abc", policy))

    assert result == [{"ok": True}]
    assert fake_timer.sleeps == [10.0]
    assert downloads == ["/datasets/v3/snapshot/s_abc"]
