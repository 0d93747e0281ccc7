"""Property management service operations."""

from typing import Literal

from pydantic import ValidationError

from parking_allocation.models.parking_space import PublishedParkingSpace
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


async def get_published_parking_space(
    rental_object_code: str,
) -> Result[PublishedParkingSpace, Literal["not-found", "unknown"]]:
    """Get the published ad for a parking space."""
    try:
        response = await service_request(
            "property-management", "GET", f"/publishedParkingSpaces/{rental_object_code}"
        )
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code != 200 or not response.body:
            return Err("unknown", response.status_code)
        payload = response.content if isinstance(response.body, dict) and "content" in response.body else response.body
        return Ok(PublishedParkingSpace.model_validate(payload), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to get published parking space",
            rental_object_code=rental_object_code,
            error=str(e),
        )
        return Err("unknown")
