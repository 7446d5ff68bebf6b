import json
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter

from psr_console.security.session import StaticSessionProvider
from psr_console.services.api_client import ApiClient
from psr_console.services.notifications import Notifier

BASE_URL = "http://testserver/api/v1"


class FakeAdapter(BaseAdapter):
    """Answers requests from a route table instead of the network."""

    def __init__(self):
        super().__init__()
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200, raw=None):
        self.routes[(method, path)] = (status, body, raw)

    def fail(self, method, path, exc):
        self.routes[(method, path)] = exc

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        path = parts.path[len(urlsplit(BASE_URL).path):]
        self.requests.append(request)
        route = self.routes.get((request.method, path))
        if route is None:
            route = (404, {"detail": "Not Found"}, None)
        if isinstance(route, Exception):
            raise route

        status, body, raw = route
        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.url = request.url
        response.request = request
        if raw is not None:
            response._content = raw
        elif body is not None:
            response._content = json.dumps(body).encode()
            response.headers["Content-Type"] = "application/json"
        else:
            response._content = b""
        return response

    def close(self):
        pass

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.body)

    def last_params(self):
        return parse_qs(urlsplit(self.last.url).query)


class FakeTimer:
    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fired = True
        self.fn()


class FakeTimers:
    """`threading.Timer` stand-in; tests fire timers by hand."""

    def __init__(self):
        self.created = []

    def __call__(self, interval, fn):
        timer = FakeTimer(interval, fn)
        self.created.append(timer)
        return timer

    @property
    def armed(self):
        return [t for t in self.created if t.started and not t.cancelled and not t.fired]

    def fire(self):
        armed = self.armed
        assert len(armed) == 1, f"expected one armed timer, found {len(armed)}"
        armed[0].fire()


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def session_provider():
    return StaticSessionProvider("test-token")


@pytest.fixture
def client(adapter, session_provider):
    http = requests.Session()
    http.mount("http://", adapter)
    return ApiClient(session_provider, base_url=BASE_URL, timeout=5, http=http)


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def notifier():
    return Notifier()
