"""Tests for the Scaleway HTTP client and the product API classes."""

import json

import httpx
import pytest

from scwprovider.api import ContainerAPI, ScalewayClient
from scwprovider.api.container import UpdateContainerRequest
from scwprovider.errors import NotFoundError, ResponseError, TransientHTTPError


def make_client(handler, max_retries=3):
    return ScalewayClient(
        api_url="https://api.example.test",
        secret_key="secret",
        max_retries=max_retries,
        backoff_factor=0,
        transport=httpx.MockTransport(handler),
    )


def test_get_sends_auth_token():
    """Test the secret key is sent as X-Auth-Token."""
    seen = {}

    def handler(request):
        seen["token"] = request.headers.get("X-Auth-Token")
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"id": "c1"})

    with make_client(handler) as client:
        assert client.get("/containers/v1beta1/regions/fr-par/containers/c1") == {"id": "c1"}

    assert seen["token"] == "secret"
    assert seen["url"] == "https://api.example.test/containers/v1beta1/regions/fr-par/containers/c1"


def test_404_raises_not_found():
    def handler(request):
        return httpx.Response(404, json={"message": "resource is not found", "type": "not_found"})

    client = make_client(handler)

    with pytest.raises(NotFoundError) as exc_info:
        client.get("/anything")

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_type == "not_found"


def test_client_error_raises_response_error_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"message": "could not validate domain x.example.com"})

    client = make_client(handler)

    with pytest.raises(ResponseError) as exc_info:
        client.post("/domains", json={"hostname": "x.example.com"})

    assert exc_info.value.message.startswith("could not validate domain")
    assert "http error 400" in str(exc_info.value)
    assert len(calls) == 1


def test_transient_errors_are_retried():
    """Test 503 answers are retried until success."""
    responses = [httpx.Response(503), httpx.Response(503), httpx.Response(200, json={"ok": True})]

    def handler(request):
        return responses.pop(0)

    assert make_client(handler).get("/status") == {"ok": True}
    assert responses == []


def test_transient_errors_exhaust_retries():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientHTTPError):
        make_client(handler, max_retries=2).get("/status")

    assert len(calls) == 2


def test_protocol_error_is_transient():
    """Test any transport failure, not only connect errors, is retried."""
    responses = [httpx.RemoteProtocolError("server disconnected"), httpx.Response(200, json={})]

    def handler(request):
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    assert make_client(handler).get("/status") == {}
    assert responses == []


def test_unexpected_payload_raises_response_error():
    def handler(request):
        return httpx.Response(200, json={"status": "ready", "min_scale": "many"})

    api = ContainerAPI(make_client(handler))

    with pytest.raises(ResponseError, match="unexpected Container payload"):
        api.get_container("fr-par", "c1")


def test_empty_body_returns_empty_dict():
    def handler(request):
        return httpx.Response(204)

    assert make_client(handler).delete("/servers/s1") == {}


def test_update_container_sends_only_assigned_fields():
    """Test a partial update request body holds only explicitly set fields."""
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "c1", "status": "pending"})

    api = ContainerAPI(make_client(handler))
    req = UpdateContainerRequest()
    req.min_scale = 0
    req.description = ""

    container = api.update_container("fr-par", "c1", req)

    assert bodies == [{"min_scale": 0, "description": ""}]
    assert container.status == "pending"


def test_from_settings(settings):
    client = ScalewayClient.from_settings(settings)

    assert client.default_region == "fr-par"
    assert client.default_project_id == settings.default_project_id
    client.close()
