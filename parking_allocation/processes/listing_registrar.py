"""Make sure an internal listing exists for a published parking space."""

from typing import Literal

from parking_allocation.models.listing import Listing
from parking_allocation.models.parking_space import PublishedParkingSpace
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.listings import create_new_listing, get_active_listing_by_rental_object_code
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


async def ensure_listing(parking_space: PublishedParkingSpace) -> Result[Listing, Literal["unknown"]]:
    """Return the active listing for the parking space, creating it from the ad when missing."""
    rental_object_code = parking_space.rental_object_code

    existing = await get_active_listing_by_rental_object_code(rental_object_code)
    if existing.ok:
        return existing
    if existing.err != "not-found":
        return Err("unknown", existing.status_code)

    created = await create_new_listing(parking_space.to_listing())
    if created.ok:
        logger.info("Listing created", rental_object_code=rental_object_code, listing_id=created.data.id)
        return created

    if created.err != "conflict":
        return Err("unknown", created.status_code)

    # Lost a creation race; the winner's listing is the one to use
    refetched = await get_active_listing_by_rental_object_code(rental_object_code)
    if refetched.ok:
        return refetched

    logger.error(
        "Listing creation conflicted but no active listing found",
        rental_object_code=rental_object_code,
    )
    return Err("unknown", refetched.status_code)
