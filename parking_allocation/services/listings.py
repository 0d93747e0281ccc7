"""Leasing service operations for listings."""

from typing import Literal

from pydantic import ValidationError

from parking_allocation.models.listing import Listing, ListingStatus
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import HttpResponse, service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

GetListingError = Literal["not-found", "unknown"]
CreateListingError = Literal["conflict", "unknown"]
UpdateListingStatusError = Literal["not-found", "bad-request", "unknown"]


def _listing_result(response: HttpResponse) -> Result[Listing, GetListingError]:
    if response.status_code == 404 or (response.status_code == 200 and not response.content):
        return Err("not-found", response.status_code)
    if response.status_code != 200:
        return Err("unknown", response.status_code)
    return Ok(Listing.model_validate(response.content), response.status_code)


async def get_listing_by_listing_id(listing_id: int) -> Result[Listing, GetListingError]:
    """Get a listing by id."""
    try:
        response = await service_request("leasing", "GET", f"/listings/by-id/{listing_id}")
        return _listing_result(response)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get listing by id", listing_id=listing_id, error=str(e))
        return Err("unknown")


async def get_listing_by_rental_object_code(rental_object_code: str) -> Result[Listing, GetListingError]:
    """Get the latest listing for a rental object regardless of status."""
    try:
        response = await service_request("leasing", "GET", f"/listings/by-code/{rental_object_code}")
        return _listing_result(response)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to get listing by rental object code",
            rental_object_code=rental_object_code,
            error=str(e),
        )
        return Err("unknown")


async def get_active_listing_by_rental_object_code(rental_object_code: str) -> Result[Listing, GetListingError]:
    """Get the active listing for a rental object."""
    try:
        response = await service_request("leasing", "GET", f"/listings/active/by-code/{rental_object_code}")
        return _listing_result(response)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to get active listing by rental object code",
            rental_object_code=rental_object_code,
            error=str(e),
        )
        return Err("unknown")


async def create_new_listing(listing: Listing) -> Result[Listing, CreateListingError]:
    """Create a listing. A 409 means one already exists for the rental object."""
    try:
        response = await service_request("leasing", "POST", "/listings", json=listing.to_payload())
        if response.status_code == 409:
            return Err("conflict", response.status_code)
        if response.status_code not in (200, 201):
            return Err("unknown", response.status_code)
        return Ok(Listing.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to create listing",
            rental_object_code=listing.rental_object_code,
            error=str(e),
        )
        return Err("unknown")


async def update_listing_status(listing_id: int, status: ListingStatus) -> Result[None, UpdateListingStatusError]:
    """Set the status of a listing."""
    try:
        response = await service_request(
            "leasing", "PUT", f"/listings/{listing_id}/status", json={"status": status.value}
        )
    except ServiceRequestError as e:
        logger.error("Failed to update listing status", listing_id=listing_id, status=status.value, error=str(e))
        return Err("unknown", 500)

    if response.status_code == 200:
        return Ok(None, response.status_code)
    if response.status_code == 404:
        return Err("not-found", 404)
    if response.status_code == 400:
        return Err("bad-request", 400)
    return Err("unknown", 500)


async def get_expired_listings_with_no_offers() -> Result[list[Listing], Literal["unknown"]]:
    """Listings past their publish window that have never been offered."""
    try:
        response = await service_request("leasing", "GET", "/listings/readyforoffers")
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok([Listing.model_validate(item) for item in response.content or []], response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get expired listings without offers", error=str(e))
        return Err("unknown")
