"""
Unit tests for DefaultNetwork

Synthetic responses are served by httpx.MockTransport, so no real
network access happens.
"""

import asyncio
from typing import List
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from lib.network import (
    CustomHost,
    DefaultNetwork,
    Endpoint,
    NoNetworkError,
    ServerError,
    TransportError,
    hasSuccessStatusCode,
)

HOST = CustomHost(secure=True, host="api.example.com", path="/v1")
URL = Endpoint(HOST, "/users").url


def makeNetwork(handler) -> DefaultNetwork:
    return DefaultNetwork(customHost=HOST, transport=httpx.MockTransport(handler))


def test_success_status_range():
    """Test 2xx classification bounds, dood!"""
    assert hasSuccessStatusCode(200)
    assert hasSuccessStatusCode(204)
    assert hasSuccessStatusCode(299)
    assert not hasSuccessStatusCode(199)
    assert not hasSuccessStatusCode(300)
    assert not hasSuccessStatusCode(404)
    assert not hasSuccessStatusCode(500)


@pytest.mark.asyncio
async def test_get_returns_body_on_200():
    """Test GET returns exact body bytes, dood!"""
    network = makeNetwork(lambda request: httpx.Response(200, content=b'{"id":1}'))

    assert await network.get(URL) == b'{"id":1}'


@pytest.mark.asyncio
@pytest.mark.parametrize("statusCode", [200, 201, 202, 204, 250, 299])
async def test_all_2xx_return_body(statusCode):
    """Test every 2xx code is success and body is returned unchanged"""
    body = b"" if statusCode == 204 else f"body-{statusCode}".encode()
    network = makeNetwork(lambda request: httpx.Response(statusCode, content=body))

    assert await network.get(URL) == body


@pytest.mark.asyncio
@pytest.mark.parametrize("statusCode", [301, 304, 400, 401, 404, 418, 429, 500, 503])
async def test_non_2xx_raise_server_error_with_body(statusCode):
    """Test non-2xx codes raise ServerError carrying exact body, dood!"""
    body = f'{{"error":"status {statusCode}"}}'.encode()
    network = makeNetwork(lambda request: httpx.Response(statusCode, content=body))

    with pytest.raises(ServerError) as excInfo:
        await network.get(URL)

    assert excInfo.value.reason == body
    assert excInfo.value.statusCode == statusCode


@pytest.mark.asyncio
async def test_server_error_500():
    """Test 500 response carries server payload"""
    network = makeNetwork(lambda request: httpx.Response(500, content=b'{"error":"boom"}'))

    with pytest.raises(ServerError) as excInfo:
        await network.get(URL)

    assert excInfo.value == ServerError(reason=b'{"error":"boom"}')


@pytest.mark.asyncio
async def test_post_sends_method_headers_and_body():
    """Test POST request carries method, caller headers and body, dood!"""
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, content=b'{"created":true}')

    network = makeNetwork(handler)
    data = await network.post(URL, headers={"Content-Type": "application/json"}, body=b'{"name":"Alice"}')

    assert data == b'{"created":true}'
    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.com/v1/users"
    assert request.headers["Content-Type"] == "application/json"
    assert request.content == b'{"name":"Alice"}'


@pytest.mark.asyncio
async def test_get_sends_no_cache_and_caller_headers():
    """Test default no-cache header and caller headers on GET"""
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, content=b"ok")

    network = makeNetwork(handler)
    await network.get(URL, headers={"Authorization": "Bearer token"})

    request = captured[0]
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer token"
    assert request.headers["Cache-Control"] == "no-cache"
    assert request.content == b""


@pytest.mark.asyncio
async def test_caller_cache_control_wins():
    """Test caller can override Cache-Control regardless of case, dood!"""
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200)

    network = makeNetwork(handler)
    await network.get(URL, headers={"cache-control": "max-age=60"})

    assert captured[0].headers.get_list("Cache-Control") == ["max-age=60"]


@pytest.mark.asyncio
async def test_connection_error_is_transport_error():
    """Test connection failure maps to TransportError"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(TransportError):
        await makeNetwork(handler).get(URL)


@pytest.mark.asyncio
async def test_timeout_is_transport_error():
    """Test timeout maps to TransportError, dood!"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("Timed out", request=request)

    with pytest.raises(TransportError) as excInfo:
        await makeNetwork(handler).post(URL, body=b"{}")

    assert isinstance(excInfo.value.__cause__, httpx.TimeoutException)


@pytest.mark.asyncio
async def test_malformed_url_is_transport_error():
    """Test request to unsupported URL maps to TransportError"""
    network = DefaultNetwork()

    with pytest.raises(TransportError):
        await network.get("ftp://example.com/file")


@pytest.mark.asyncio
async def test_cancellation_is_transport_error():
    """Test cancelled request surfaces as TransportError, dood!"""
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(10)
        return httpx.Response(200)

    task = asyncio.create_task(makeNetwork(handler).get(URL))
    await started.wait()
    task.cancel()

    with pytest.raises(TransportError):
        await task


@pytest.mark.asyncio
async def test_ping_success_uses_head():
    """Test ping sends HEAD and succeeds on 2xx"""
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    await makeNetwork(handler).ping("https://api.example.com")

    assert captured[0].method == "HEAD"


@pytest.mark.asyncio
@pytest.mark.parametrize("statusCode", [301, 404, 500])
async def test_ping_non_2xx_is_no_network(statusCode):
    """Test ping narrows non-2xx responses to NoNetworkError, dood!"""
    network = makeNetwork(lambda request: httpx.Response(statusCode, content=b"nope"))

    with pytest.raises(NoNetworkError):
        await network.ping("https://api.example.com")


@pytest.mark.asyncio
async def test_ping_transport_failure_is_no_network():
    """Test ping narrows transport failures to NoNetworkError"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("DNS failure", request=request)

    with pytest.raises(NoNetworkError):
        await makeNetwork(handler).ping("https://api.example.com")


@pytest.mark.asyncio
async def test_fresh_session_per_call_and_tls_verification():
    """Test every call builds its own client with TLS verification on, dood!"""
    with patch("httpx.AsyncClient") as mock_client:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = b"ok"
        session = AsyncMock()
        session.request.return_value = mock_response
        mock_client.return_value.__aenter__.return_value = session

        network = DefaultNetwork(timeout=5)
        await network.get(URL)
        await network.get(URL)

        assert mock_client.call_count == 2
        assert mock_client.call_args.kwargs["verify"] is True
        assert mock_client.call_args.kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_trust_all_certificates_disables_verification():
    """Test trust-all flag turns TLS verification off"""
    with patch("httpx.AsyncClient") as mock_client:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = b"ok"
        session = AsyncMock()
        session.request.return_value = mock_response
        mock_client.return_value.__aenter__.return_value = session

        network = DefaultNetwork(trustAllCertificates=True)
        await network.get(URL)

        assert mock_client.call_args.kwargs["verify"] is False
