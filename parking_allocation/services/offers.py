"""Leasing service operations for offers."""

from typing import Literal

from pydantic import ValidationError

from parking_allocation.models.offer import CreateOfferParams, Offer
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

GetOfferError = Literal["not-found", "unknown"]
CloseOfferError = Literal["offer-not-found", "unknown"]


async def create_offer(params: CreateOfferParams) -> Result[Offer, Literal["unknown"]]:
    """Create an offer with its ranked applicant snapshot."""
    try:
        response = await service_request("leasing", "POST", "/offer", json=params.to_payload())
        if response.status_code not in (200, 201):
            logger.error(
                "Unexpected status creating offer",
                listing_id=params.listing_id,
                applicant_id=params.applicant_id,
                status_code=response.status_code,
            )
            return Err("unknown", response.status_code)
        return Ok(Offer.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to create offer",
            listing_id=params.listing_id,
            applicant_id=params.applicant_id,
            error=str(e),
        )
        return Err("unknown")


async def get_offer_by_offer_id(offer_id: int) -> Result[Offer, GetOfferError]:
    """Get an offer with its offered applicant."""
    try:
        response = await service_request("leasing", "GET", f"/offers/{offer_id}")
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code != 200 or not response.content:
            return Err("unknown", response.status_code)
        return Ok(Offer.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get offer", offer_id=offer_id, error=str(e))
        return Err("unknown")


async def get_active_offer_by_listing_id(listing_id: int) -> Result[Offer, GetOfferError]:
    """Get the active offer of a listing, if any."""
    try:
        response = await service_request("leasing", "GET", f"/offers/listing-id/{listing_id}/active")
        if response.status_code == 404 or (response.status_code == 200 and not response.content):
            return Err("not-found", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok(Offer.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get active offer for listing", listing_id=listing_id, error=str(e))
        return Err("unknown")


async def get_offers_for_contact(contact_code: str) -> Result[list[Offer], GetOfferError]:
    """Every offer made to a contact, any status."""
    try:
        response = await service_request("leasing", "GET", f"/contacts/{contact_code}/offers")
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok([Offer.model_validate(item) for item in response.content or []], response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get offers for contact", contact_code=contact_code, error=str(e))
        return Err("unknown")


async def _close_offer(offer_id: int, path: str) -> Result[None, CloseOfferError]:
    try:
        response = await service_request("leasing", "PUT", path)
    except ServiceRequestError as e:
        logger.error("Failed to close offer", offer_id=offer_id, path=path, error=str(e))
        return Err("unknown")

    if response.status_code == 200:
        return Ok(None, response.status_code)
    if response.status_code == 404:
        return Err("offer-not-found", response.status_code)
    return Err("unknown", response.status_code)


async def close_offer_by_accept(offer_id: int) -> Result[None, CloseOfferError]:
    """Close an offer as accepted."""
    return await _close_offer(offer_id, f"/offers/{offer_id}/close-by-accept")


async def close_offer_by_deny(offer_id: int) -> Result[None, CloseOfferError]:
    """Close an offer as declined."""
    return await _close_offer(offer_id, f"/offers/{offer_id}/deny")


async def handle_expired_offers() -> Result[list[int], Literal["unknown"]]:
    """Expire overdue offers upstream and return the ids of the affected listings."""
    try:
        response = await service_request("leasing", "PUT", "/offers/handleexpired")
    except ServiceRequestError as e:
        logger.error("Failed to handle expired offers", error=str(e))
        return Err("unknown")

    if response.status_code != 200:
        return Err("unknown", response.status_code)
    return Ok([int(listing_id) for listing_id in response.content or []], response.status_code)
