"""HTTP client wrapper for collaborator services.

Every HTTP status is returned as data; adapters decide what a 404 or 409
means for their operation. Only transport failures raise.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from parking_allocation.utils.config import get_config
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# One client per collaborator service (singleton pattern)
_clients: dict[str, httpx.AsyncClient] = {}


@dataclass(frozen=True)
class HttpResponse:
    """Status code and decoded body of a collaborator response."""
    status_code: int
    body: Any = None

    @property
    def content(self) -> Any:
        """The `content` member most leasing endpoints wrap their payload in."""
        if isinstance(self.body, dict):
            return self.body.get("content")
        return None


def get_service_client(service: str) -> httpx.AsyncClient:
    """Get or create the shared client for a collaborator service."""
    client = _clients.get(service)
    if client is None or client.is_closed:
        config = get_config()
        client = httpx.AsyncClient(
            base_url=config.service_url(service),
            timeout=config.http_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        _clients[service] = client
        logger.info("Service client initialized", service=service, base_url=str(client.base_url))
    return client


async def close_service_clients() -> None:
    """Close all collaborator clients."""
    for service, client in list(_clients.items()):
        await client.aclose()
        logger.info("Service client closed", service=service)
    _clients.clear()


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


async def service_request(
    service: str,
    method: str,
    path: str,
    json: Optional[Any] = None,
    params: Optional[dict] = None,
) -> HttpResponse:
    """Send a request and return its status and body regardless of status code."""
    client = get_service_client(service)
    try:
        response = await client.request(method, path, json=json, params=params)
    except httpx.HTTPError as e:
        logger.error(
            "Service request failed",
            service=service,
            method=method,
            path=path,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise ServiceRequestError(service, f"{method} {path} failed: {e}") from e

    logger.debug(
        "Service request completed",
        service=service,
        method=method,
        path=path,
        status_code=response.status_code,
    )
    return HttpResponse(status_code=response.status_code, body=_decode_body(response))
