import httpx
import pytest

from restmodel import api as api_module


API_URL = 'https://api.example.com'


class StubServer:
    """
    Canned responses by (method, path). Every request is recorded, so tests
    can assert on what was, or was not, sent.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method.upper(), path)] = (status, body)

    def get(self, path, body=None, status=200):
        self.add('GET', path, body, status)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        try:
            status, body = self.routes[(request.method, request.url.path)]
        except KeyError:
            return httpx.Response(404, json={'error': 'not found'})

        if callable(body):
            body = body(request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def server():
    return StubServer()


@pytest.fixture
def make_api(server):
    def make(**options):
        client = httpx.Client(transport=httpx.MockTransport(server.handler))
        return api_module.setup(API_URL, client=client, **options)

    yield make
    api_module.reset_default_api()


@pytest.fixture
def api(make_api):
    return make_api()
