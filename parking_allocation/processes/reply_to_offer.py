"""Offer reply coordination: accept, deny and expire.

Accepting an offer denies every other active offer held by the same contact.
The cascade runs after the accept and is eventually consistent; a sibling
that cannot be denied is logged and does not undo the accept.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

from parking_allocation.models.listing import Listing, ListingStatus
from parking_allocation.models.offer import Offer
from parking_allocation.models.process import ProcessResult, make_process_success
from parking_allocation.models.waiting_list import WaitingListType
from parking_allocation.processes.common import ProcessLog, end_failing_process
from parking_allocation.processes.create_offer import create_offer_for_internal_parking_space
from parking_allocation.services import offers as offers_service
from parking_allocation.services.contacts import get_contact
from parking_allocation.services.leases import create_lease
from parking_allocation.services.listings import (
    get_listing_by_listing_id,
    get_listing_by_rental_object_code,
    update_listing_status,
)
from parking_allocation.services.waiting_lists import reset_waiting_list
from parking_allocation.utils.config import get_config
from parking_allocation.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)


@dataclass
class SiblingDenialSummary:
    denied: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


async def _resolve_offer_and_listing(
    offer_id: int,
    process_log: ProcessLog,
    require_active: bool,
    by_listing_id: bool = False,
) -> Union[tuple[Offer, Listing], ProcessResult]:
    offer_result = await offers_service.get_offer_by_offer_id(offer_id)
    if not offer_result.ok:
        return await end_failing_process(
            process_log, logger, "no-offer", 404,
            f"Offer {offer_id} could not be found",
            offer_id=offer_id,
        )
    offer = offer_result.data

    if require_active and not offer.is_active:
        return await end_failing_process(
            process_log, logger, "no-active-offer", 404,
            f"Offer {offer_id} is not active (status {offer.status.value})",
            offer_id=offer_id,
        )

    if by_listing_id:
        listing_result = await get_listing_by_listing_id(offer.listing_id)
    elif offer.rental_object_code:
        listing_result = await get_listing_by_rental_object_code(offer.rental_object_code)
    else:
        listing_result = None

    if listing_result is None or not listing_result.ok or not listing_result.data.district_code:
        return await end_failing_process(
            process_log, logger, "no-listing", 404,
            f"Listing for offer {offer_id} could not be found",
            offer_id=offer_id,
            listing_id=offer.listing_id,
        )

    listing = listing_result.data
    if listing.id != offer.listing_id:
        # A newer listing for the same rental object; act on the one that was offered
        listing_result = await get_listing_by_listing_id(offer.listing_id)
        if not listing_result.ok:
            return await end_failing_process(
                process_log, logger, "no-listing", 404,
                f"Listing {offer.listing_id} for offer {offer_id} could not be found",
                offer_id=offer_id,
                listing_id=offer.listing_id,
            )
        listing = listing_result.data

    process_log.add(f"Listing: {listing.id} ({listing.rental_object_code})")
    return offer, listing


async def deny_sibling_offers(offer_ids: list[int], concurrency: Optional[int] = None) -> SiblingDenialSummary:
    """Deny offers concurrently with at most `concurrency` in flight."""
    if concurrency is None:
        concurrency = get_config().sibling_denial_concurrency
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")
    semaphore = asyncio.Semaphore(concurrency)

    async def deny_one(sibling_id: int) -> ProcessResult:
        async with semaphore:
            return await deny_offer(sibling_id)

    results = await asyncio.gather(*(deny_one(sibling_id) for sibling_id in offer_ids), return_exceptions=True)

    summary = SiblingDenialSummary()
    for sibling_id, result in zip(offer_ids, results):
        if isinstance(result, BaseException):
            logger.error("Sibling offer denial raised", offer_id=sibling_id, error=str(result))
            summary.failed.append(sibling_id)
        elif not result.successful:
            logger.error("Sibling offer denial failed", offer_id=sibling_id, error_tag=result.error)
            summary.failed.append(sibling_id)
        else:
            summary.denied.append(sibling_id)
    return summary


@timed("accept_offer")
async def accept_offer(offer_id: int) -> ProcessResult:
    """Accept an offer and deny the contact's other active offers."""
    process_log = ProcessLog("Accept offer for internal parking space", f"Offer: {offer_id}")

    try:
        resolved = await _resolve_offer_and_listing(offer_id, process_log, require_active=True)
        if isinstance(resolved, ProcessResult):
            return resolved
        offer, listing = resolved

        closed = await offers_service.close_offer_by_accept(offer.id)
        if not closed.ok:
            return await end_failing_process(
                process_log, logger, "close-offer", 500,
                f"Offer {offer_id} could not be closed",
                offer_id=offer_id,
            )
        process_log.add("Offer closed as accepted")

        contact_code = offer.offered_applicant.contact_code
        contact_result = await get_contact(contact_code)
        if not contact_result.ok:
            return await end_failing_process(
                process_log, logger, "no-contact", 404,
                f"Contact {contact_code} could not be found",
                offer_id=offer_id,
                contact_code=contact_code,
            )

        lease_result = await create_lease(
            listing.rental_object_code,
            contact_code,
            listing.vacant_from or datetime.now(timezone.utc),
        )
        if not lease_result.ok:
            return await end_failing_process(
                process_log, logger, "create-lease", 500,
                f"Lease for offer {offer_id} could not be created",
                offer_id=offer_id,
                rental_object_code=listing.rental_object_code,
            )
        lease = lease_result.data
        process_log.add(f"Lease created: {lease.lease_id}")
        process_log.add("Check whether VAT applies to the lease before it is sent for signing")

        contact = contact_result.data
        reset = await reset_waiting_list(
            contact.national_registration_number, contact_code, WaitingListType.PARKING_SPACE
        )
        if not reset.ok:
            logger.error(
                "Could not reset parking space queue points",
                contact_code=contact_code,
                error_tag=reset.err,
            )
            process_log.add(f"Parking space queue points could not be reset: {reset.err}")

        other_offers = await offers_service.get_offers_for_contact(contact_code)
        if not other_offers.ok and other_offers.err != "not-found":
            return await end_failing_process(
                process_log, logger, "get-other-offers", 500,
                f"Other offers for contact {contact_code} could not be retrieved",
                offer_id=offer_id,
                contact_code=contact_code,
            )
        sibling_ids = [
            other.id
            for other in (other_offers.data if other_offers.ok else [])
            if other.is_active and other.id != offer.id
        ]

        summary = await deny_sibling_offers(sibling_ids)
        if sibling_ids:
            process_log.add(f"Other offers denied: {summary.denied}, failed: {summary.failed}")

        assigned = await update_listing_status(listing.id, ListingStatus.ASSIGNED)
        if not assigned.ok:
            logger.warning("Could not mark listing as assigned", listing_id=listing.id, error_tag=assigned.err)
            process_log.add("Listing status could not be set to Assigned")

        await process_log.notify(
            "leasing",
            f"Parking space {listing.rental_object_code} accepted by {contact_code}",
        )
        logger.info(
            "Offer accepted",
            offer_id=offer_id,
            listing_id=listing.id,
            denied_offers=summary.denied,
            failed_denials=summary.failed,
        )
        return make_process_success(
            202,
            data={
                "offerId": offer.id,
                "leaseId": lease.lease_id,
                "deniedOffers": summary.denied,
                "failedDenials": summary.failed,
            },
        )
    except Exception as e:
        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Accepting offer failed due to an unexpected error",
            exception=e,
            offer_id=offer_id,
        )


@timed("deny_offer")
async def deny_offer(offer_id: int) -> ProcessResult:
    """Decline an offer and offer the listing to the next applicant."""
    process_log = ProcessLog("Deny offer for internal parking space", f"Offer: {offer_id}")

    try:
        resolved = await _resolve_offer_and_listing(offer_id, process_log, require_active=True)
        if isinstance(resolved, ProcessResult):
            return resolved
        offer, listing = resolved

        closed = await offers_service.close_offer_by_deny(offer.id)
        if not closed.ok:
            return await end_failing_process(
                process_log, logger, "close-offer", 500,
                f"Offer {offer_id} could not be closed",
                offer_id=offer_id,
            )
        process_log.add("Offer closed as declined")

        next_offer = await create_offer_for_internal_parking_space(listing.id)
        if not next_offer.successful:
            logger.warning(
                "Next offer could not be created after deny",
                offer_id=offer_id,
                listing_id=listing.id,
                error_tag=next_offer.error,
            )

        return make_process_success(202, data={"listingId": listing.id})
    except Exception as e:
        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Denying offer failed due to an unexpected error",
            exception=e,
            offer_id=offer_id,
        )


@timed("expire_offer")
async def expire_offer(offer_id: int) -> ProcessResult:
    """Resolve an expired offer and its listing."""
    process_log = ProcessLog("Expire offer for internal parking space", f"Offer: {offer_id}")

    try:
        resolved = await _resolve_offer_and_listing(offer_id, process_log, require_active=False, by_listing_id=True)
        if isinstance(resolved, ProcessResult):
            return resolved
        offer, listing = resolved

        logger.info("Offer expired", offer_id=offer.id, listing_id=listing.id)
        return make_process_success(200, data={"listingId": listing.id})
    except Exception as e:
        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Expiring offer failed due to an unexpected error",
            exception=e,
            offer_id=offer_id,
        )
