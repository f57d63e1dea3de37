import httpx
import pytest

from sportradar_proxy.core.cache import ResponseCache
from sportradar_proxy.core.http import UpstreamClient
from sportradar_proxy.services.proxy import ProxyService

API_KEY = "sr-test-key-5f2c9a"
BASE_URL = "https://api.sportradar.com"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Upstream:
    """
    Scripted MockTransport handler. Each item is a callable taking the
    request (returning a Response or raising); the last item repeats.
    """
    def __init__(self, *script):
        self.script = list(script)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        return step(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


def ok(payload):
    return lambda request: httpx.Response(200, json=payload)


def status(code, text=""):
    return lambda request: httpx.Response(code, text=text)


def fail(exc_type=httpx.ConnectError, message="connection refused"):
    def _raise(request):
        raise exc_type(message)
    return _raise


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_service(clock, sleeps):
    created = []

    def _make(upstream, *, api_key=API_KEY, ttl=60.0, capacity=100, **kwargs):
        client = UpstreamClient(BASE_URL, sleep=sleeps.append, transport=httpx.MockTransport(upstream))
        service = ProxyService(ResponseCache(ttl, capacity, clock=clock), client, api_key, **kwargs)
        created.append(service)
        return service

    yield _make
    for s in created:
        s.close()
