import logging
import threading
from typing import Any, Optional

import requests

from .errors import GatewayError

logger = logging.getLogger(__name__)


class SessionPerThread:
    """
    Default transport: one requests.Session per calling thread.

    requests does not document Session as thread-safe, and player lookups
    run on a thread pool.
    """

    def __init__(self):
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        return self.session.request(method, url, **kwargs)


class ServiceClient:
    """
    HTTP plumbing for one downstream service.

    Every service client in the process shares the same transport (a
    `SessionPerThread` in production, a fake in tests). Failures leave this
    class only as `GatewayError`:
    - non-2xx replies keep the remote status and message
    - connection errors and timeouts become 500 "Internal Server Error"
    """

    def __init__(self, base_url: str, transport, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.transport = transport
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> Any:
        return self.request('GET', path)

    def post(self, path: str, payload: Optional[dict] = None) -> Any:
        return self.request('POST', path, payload)

    def put(self, path: str, payload: Optional[dict] = None) -> Any:
        return self.request('PUT', path, payload)

    def delete(self, path: str) -> Any:
        return self.request('DELETE', path)

    def request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        url = self.url(path)
        try:
            response = self.transport.request(method, url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise self._remote_error(e.response, method, url) from e
        except requests.RequestException as e:
            logger.error(f"Could not reach {method} {url}: {e}")
            raise GatewayError.unreachable() from e

        return self._decode(response)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _remote_error(self, response: requests.Response, method: str, url: str) -> GatewayError:
        if response is None:
            return GatewayError.unreachable()

        body = self._decode(response)
        message = body.get('message') if isinstance(body, dict) else None

        if response.status_code == 404 and not message:
            logger.warning(f"404 Error: Could not make '{method.lower()}' request to '{url}'")

        return GatewayError.remote(response.status_code, message, payload=body)
