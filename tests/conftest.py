"""
Pytest configuration and fixtures for gateway tests.
"""
import datetime
import json
import os
import sys
import threading
from collections import namedtuple

import jwt
import pytest
import requests

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from gateway.app import create_app
from gateway.config import TestingConfig
from gateway.downstream import RoomsService, UsersService
from gateway.identity import IdentityResolver
from gateway.service_client import ServiceClient
from gateway.session_orchestrator import SessionOrchestrator
from gateway.token_verifier import TokenVerifier


USERS = TestingConfig.USERS_SERVER_URL
ROOMS = TestingConfig.ROOMS_SERVER_URL
JWT_SECRET = TestingConfig.JWT_SECRET

Call = namedtuple('Call', ['method', 'url', 'json'])


def make_response(status: int, body, url: str) -> requests.Response:
    """Build a real requests.Response carrying a canned body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = 'utf-8'
    if body is None:
        response._content = b''
    elif isinstance(body, str):
        response._content = body.encode('utf-8')
        response.headers['Content-Type'] = 'text/plain; charset=utf-8'
    else:
        response._content = json.dumps(body).encode('utf-8')
        response.headers['Content-Type'] = 'application/json'
    return response


class FakeTransport:
    """
    Stands in for the shared SessionPerThread transport.

    Routes are keyed by (method, url). Unrouted calls answer 404 with an
    empty body, like a service that has no such endpoint. Every call is
    recorded, including those that raise.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def reply(self, method: str, url: str, status: int = 200, body=None):
        self.routes[(method, url)] = (status, body)

    def fail(self, method: str, url: str, error: Exception = None):
        self.routes[(method, url)] = error or requests.ConnectionError("connection refused")

    def request(self, method, url, json=None, timeout=None):
        with self._lock:
            self.calls.append(Call(method, url, json))

        route = self.routes.get((method, url))
        if route is None:
            return make_response(404, None, url)
        if isinstance(route, Exception):
            raise route
        status, body = route
        return make_response(status, body, url)

    def calls_to(self, method: str, url: str = None):
        return [c for c in self.calls if c.method == method and (url is None or c.url == url)]


def make_token(user_id='user-1', secret=JWT_SECRET, expires_in=3600, **claims) -> str:
    """Sign an access token the way the users service issues them."""
    payload = dict(claims)
    if user_id is not None:
        payload['id'] = user_id
    payload['exp'] = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=expires_in)
    return jwt.encode(payload, secret, algorithm='HS256')


@pytest.fixture
def transport():
    """Fresh fake transport per test."""
    return FakeTransport()


@pytest.fixture
def users_service(transport):
    return UsersService(ServiceClient(USERS, transport, timeout=1))


@pytest.fixture
def rooms_service(transport):
    return RoomsService(ServiceClient(ROOMS, transport, timeout=1))


@pytest.fixture
def verifier():
    return TokenVerifier(JWT_SECRET)


@pytest.fixture
def identity(users_service, verifier):
    return IdentityResolver(users_service, verifier)


@pytest.fixture
def orchestrator(users_service, rooms_service, identity):
    return SessionOrchestrator(users_service, rooms_service, identity, lookup_workers=4)


@pytest.fixture
def app(transport):
    """Create application for testing, wired to the fake transport."""
    return create_app('testing', transport=transport)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def token_factory():
    """Signs access tokens for tests."""
    return make_token
