import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from sportradar_proxy.core.config import Settings
from sportradar_proxy.main import create_app

from conftest import API_KEY, Upstream, ok, status


@pytest.fixture
def make_app(make_service):
    def _make(upstream, **kwargs):
        settings = Settings(sportradar_api_key=kwargs.get("api_key", API_KEY))
        return create_app(settings=settings, service=make_service(upstream, **kwargs))
    return _make


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_ping(make_app):
    async with _client(make_app(Upstream(ok({})))) as ac:
        r = await ac.get("/api/v1/ping")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_proxy_miss_then_hit(make_app):
    upstream = Upstream(ok({"sport_events": []}))
    body = {"endpoint": "/matches/live", "params": {}}
    async with _client(make_app(upstream)) as ac:
        first = await ac.post("/sportradar-proxy", json=body)
        second = await ac.post("/sportradar-proxy", json=body)

    assert first.status_code == second.status_code == 200
    assert first.headers["x-cache"] == "MISS"
    assert second.headers["x-cache"] == "HIT"
    assert first.content == second.content
    assert upstream.calls == 1


@pytest.mark.asyncio
async def test_missing_endpoint_is_400(make_app):
    upstream = Upstream(ok({}))
    async with _client(make_app(upstream)) as ac:
        r = await ac.post("/sportradar-proxy", json={"params": {"a": 1}})
    assert r.status_code == 400
    assert r.json() == {"error": "Endpoint is required"}
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_invalid_body_is_400(make_app):
    async with _client(make_app(Upstream(ok({})))) as ac:
        r = await ac.post("/sportradar-proxy", json={"endpoint": "/x.json", "params": {"nested": {"a": 1}}})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request body"


@pytest.mark.asyncio
async def test_upstream_status_is_mirrored(make_app):
    async with _client(make_app(Upstream(status(404, "Not Found")))) as ac:
        r = await ac.post("/sportradar-proxy", json={"endpoint": "/seasons/9/standings.json"})
    assert r.status_code == 404
    assert r.json() == {
        "error": "API Error: 404",
        "message": "Not Found",
        "endpoint": "/seasons/9/standings.json",
    }


@pytest.mark.asyncio
async def test_missing_credential_is_500(make_app):
    upstream = Upstream(ok({}))
    async with _client(make_app(upstream, api_key=None)) as ac:
        r = await ac.post("/sportradar-proxy", json={"endpoint": "/competitions.json"})
    assert r.status_code == 500
    assert r.json() == {"error": "Proxy error", "message": "SPORTRADAR_API_KEY not configured"}
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_cors_headers(make_app):
    async with _client(make_app(Upstream(ok({"a": 1})))) as ac:
        preflight = await ac.options(
            "/sportradar-proxy",
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )
        plain = await ac.options("/sportradar-proxy")
        r = await ac.post(
            "/sportradar-proxy",
            json={"endpoint": "/a.json"},
            headers={"Origin": "https://dashboard.example.com"},
        )

    assert preflight.status_code == 200
    assert preflight.headers["access-control-allow-origin"] == "*"
    assert plain.status_code == 200
    assert plain.content == b""
    assert r.headers["access-control-allow-origin"] == "*"
    assert "x-cache" in r.headers["access-control-expose-headers"].lower()


@pytest.mark.asyncio
async def test_cache_health_masks_key(make_app):
    async with _client(make_app(Upstream(ok({})))) as ac:
        await ac.post("/sportradar-proxy", json={"endpoint": "/a.json"})
        r = await ac.get("/health/cache")
    body = r.json()
    assert body["sportradar_api_key"] == "set"
    assert body["cache"]["entries"] == 1
    assert API_KEY not in r.text


@pytest.mark.asyncio
async def test_data_match_route_uses_numeric_id(make_app):
    upstream = Upstream(ok({"sport_event": {"id": "sr:sport_event:123"}}))
    async with _client(make_app(upstream)) as ac:
        r = await ac.get("/data/matches/sr:sport_event:123")
    assert r.status_code == 200
    assert r.headers["x-cache"] == "MISS"
    assert upstream.requests[0].url.path == "/soccer/trial/v4/en/sport_events/123/summary.json"


@pytest.mark.asyncio
async def test_data_schedule_rejects_bad_date(make_app):
    upstream = Upstream(ok({}))
    async with _client(make_app(upstream)) as ac:
        r = await ac.get("/data/schedules/tomorrow")
    assert r.status_code == 400
    assert upstream.calls == 0


@pytest.mark.asyncio
async def test_data_connection(make_app):
    async with _client(make_app(Upstream(status(401, "bad key")))) as ac:
        r = await ac.get("/data/connection")
    assert r.json() == {"connected": False}


@pytest.mark.asyncio
async def test_non_standard_json_is_a_structured_error_with_cors(make_app):
    upstream = Upstream(lambda request: httpx.Response(200, text='{"x": NaN}'))
    headers = {"Origin": "https://dashboard.example.com"}
    async with _client(make_app(upstream)) as ac:
        first = await ac.post("/sportradar-proxy", json={"endpoint": "/a.json"}, headers=headers)
        second = await ac.post("/sportradar-proxy", json={"endpoint": "/a.json"}, headers=headers)

    for r in (first, second):
        assert r.status_code == 500
        assert r.json()["error"] == "Proxy error"
        assert r.headers["access-control-allow-origin"] == "*"
    assert upstream.calls == 2


@pytest.mark.asyncio
async def test_unhandled_route_error_masks_credential(make_app):
    app = make_app(Upstream(ok({})))

    @app.get("/boom")
    def boom():
        raise RuntimeError(f"failed with api_key={API_KEY}")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/boom")

    assert r.status_code == 500
    assert r.json()["error"] == "Proxy error"
    assert API_KEY not in r.text
