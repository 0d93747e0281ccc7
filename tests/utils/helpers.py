"""Test helper functions."""

from typing import Any, Dict, Optional

from parking_allocation.services.service_client import HttpResponse


def leasing_response(status_code: int = 200, content: Any = None) -> HttpResponse:
    """Leasing service response with the payload wrapped in `content`."""
    return HttpResponse(status_code=status_code, body={"content": content})


def create_vercel_request(
    method: str = "GET",
    path: str = "/api/offers/start_batches",
    query: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a Vercel cron request object for testing."""
    return {
        "method": method,
        "path": path,
        "headers": {"user-agent": "vercel-cron/1.0"},
        "body": "",
        "query": query or {},
    }
