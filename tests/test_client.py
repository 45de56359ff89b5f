"""Tests for the HTTP gateway client used by the orchestrator."""

import httpx
import pytest

from retouch.errors import UpstreamError, UpstreamRejected
from retouch.jobs import JobStatus
from retouch.orchestrator import GatewayClient, JobOrchestrator, OrchestratorConfig


def _client(handler) -> tuple[GatewayClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request):
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(base_url="http://gateway.test", transport=httpx.MockTransport(record))
    return GatewayClient(client=http), seen


@pytest.mark.asyncio
async def test_submit_posts_multipart_form():
    client, seen = _client(lambda r: httpx.Response(201, json={"id": "pred-1", "status": "pending"}))

    handle = await client.submit_inpaint_job(b"IMG", b"MSK", "a boat", 3)

    assert handle.id == "pred-1"
    request = seen[0]
    assert request.url.path == "/api/inpaint"
    assert b'name="prompt"' in request.content and b"a boat" in request.content
    assert b'name="outputs"' in request.content
    assert b'name="image"' in request.content and b'name="mask"' in request.content


@pytest.mark.asyncio
async def test_poll_adds_cache_busting_parameter():
    client, seen = _client(
        lambda r: httpx.Response(200, json={"id": "pred-1", "status": "succeeded", "output": ["o.png"]})
    )

    snapshot = await client.poll_inpaint_job("pred-1")

    assert snapshot.output == ["o.png"]
    assert snapshot.status == JobStatus.SUCCEEDED
    assert seen[0].url.path == "/api/inpaint/pred-1"
    assert "bust" in seen[0].url.params


@pytest.mark.asyncio
async def test_server_error_maps_to_upstream_rejected():
    client, _ = _client(lambda r: httpx.Response(500, text="Failed to get prediction status"))

    with pytest.raises(UpstreamRejected) as exc_info:
        await client.poll_inpaint_job("pred-1")

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to get prediction status"


@pytest.mark.asyncio
async def test_empty_server_error_maps_to_job_error():
    client, _ = _client(lambda r: httpx.Response(500, text=""))

    with pytest.raises(UpstreamError) as exc_info:
        await client.poll_inpaint_job("pred-1")

    assert exc_info.value.job_id == "pred-1"


@pytest.mark.asyncio
async def test_cleanup_returns_binary(png_bytes):
    client, seen = _client(
        lambda r: httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})
    )

    artifact = await client.submit_cleanup_job(b"IMG", b"MSK")

    assert artifact.content == png_bytes
    assert artifact.media_type == "image/png"
    assert seen[0].url.path == "/api/clean"


@pytest.mark.asyncio
async def test_orchestrator_over_http_client():
    polls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(201, json={"id": "pred-7", "status": "pending"})
        polls["n"] += 1
        if polls["n"] < 2:
            return httpx.Response(200, json={"id": "pred-7", "status": "processing", "output": None})
        return httpx.Response(200, json={"id": "pred-7", "status": "succeeded", "output": ["r.png"]})

    client, _ = _client(handler)
    async with client:
        orchestrator = JobOrchestrator(client, OrchestratorConfig(poll_interval=0.01, max_attempts=5))
        results = await orchestrator.inpaint(b"IMG", b"MSK", "")

    assert results == ["r.png"]
    assert polls["n"] == 2
