"""Scheduler entry points that drive offer issuance in batches."""

from typing import Any

from parking_allocation.processes.create_offer import create_offer_for_internal_parking_space
from parking_allocation.services import offers as offers_service
from parking_allocation.services.listings import get_expired_listings_with_no_offers
from parking_allocation.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)


async def _offer_listings(listing_ids: list[int]) -> dict[str, Any]:
    summary: dict[str, Any] = {"listings": len(listing_ids), "successful": [], "failed": []}
    for listing_id in listing_ids:
        result = await create_offer_for_internal_parking_space(listing_id)
        if result.successful:
            summary["successful"].append(listing_id)
        else:
            summary["failed"].append({"listingId": listing_id, "error": result.error})
    return summary


@timed("start_offer_batches")
async def start_offer_batches() -> dict[str, Any]:
    """Issue a first offer for every expired listing that has none."""
    listings = await get_expired_listings_with_no_offers()
    if not listings.ok:
        logger.error("Expired listings could not be retrieved", error_tag=listings.err)
        return {"listings": 0, "successful": [], "failed": [], "error": listings.err}

    summary = await _offer_listings([listing.id for listing in listings.data if listing.id is not None])
    logger.info(
        "Offer batches started",
        listings=summary["listings"],
        successful=len(summary["successful"]),
        failed=len(summary["failed"]),
    )
    return summary


@timed("handle_expired_offers")
async def handle_expired_offers() -> dict[str, Any]:
    """Expire overdue offers and offer each affected listing to the next applicant."""
    expired = await offers_service.handle_expired_offers()
    if not expired.ok:
        logger.error("Expired offers could not be handled", error_tag=expired.err)
        return {"listings": 0, "successful": [], "failed": [], "error": expired.err}

    summary = await _offer_listings(expired.data)
    logger.info(
        "Expired offers handled",
        listings=summary["listings"],
        successful=len(summary["successful"]),
        failed=len(summary["failed"]),
    )
    return summary
