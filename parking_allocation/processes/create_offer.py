"""Offer ranking and issuance for expired internal parking space listings."""

from datetime import datetime, timezone
from typing import Literal, Optional

from parking_allocation.models.applicant import ApplicantStatus, ApplicationType, DetailedApplicant
from parking_allocation.models.listing import Listing, ListingStatus
from parking_allocation.models.offer import CreateOfferParams, OfferApplicant, OfferStatus
from parking_allocation.models.process import ProcessResult, make_process_success
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.models.rental_rules import RentalRuleTarget
from parking_allocation.processes.common import ProcessLog, end_failing_process
from parking_allocation.processes.eligibility import validate, validate_for_rental_object
from parking_allocation.services import communication, offers as offers_service
from parking_allocation.services.applicants import get_detailed_applicants_by_listing_id, update_applicant_status
from parking_allocation.services.contacts import get_contact
from parking_allocation.services.listings import get_listing_by_listing_id, update_listing_status
from parking_allocation.utils.config import get_config
from parking_allocation.utils.dates import add_business_days
from parking_allocation.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def _as_utc(moment: Optional[datetime]) -> datetime:
    if moment is None:
        return _FAR_FUTURE
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def rank_applicants(applicants: list[DetailedApplicant]) -> list[DetailedApplicant]:
    """Order by priority (lowest first, missing last), then queue time, then application date."""
    return sorted(
        applicants,
        key=lambda a: (
            a.priority is None,
            a.priority if a.priority is not None else 0,
            _as_utc(a.queue_time),
            _as_utc(a.application_date),
        ),
    )


async def _is_still_eligible(
    applicant: DetailedApplicant,
    listing: Listing,
) -> Result[bool, Literal["unknown"]]:
    application_type = applicant.application_type or ApplicationType.ADDITIONAL
    if listing.district_code:
        result = await validate_for_rental_object(
            applicant.contact_code, listing.rental_object_code, listing.district_code, application_type
        )
    else:
        result = await validate(
            applicant.contact_code, RentalRuleTarget.rental_object(listing.rental_object_code), application_type
        )

    if result.ok:
        return Ok(True)
    if result.err == "unknown":
        return Err("unknown", result.status_code)
    return Ok(False)


async def _has_active_offer_elsewhere(
    applicant: DetailedApplicant,
    listing_id: int,
) -> Result[bool, Literal["unknown"]]:
    result = await offers_service.get_offers_for_contact(applicant.contact_code)
    if not result.ok:
        if result.err == "not-found":
            return Ok(False)
        return Err("unknown", result.status_code)
    return Ok(any(offer.is_active and offer.listing_id != listing_id for offer in result.data))


@timed("create_offer_for_internal_parking_space")
async def create_offer_for_internal_parking_space(listing_id: int) -> ProcessResult:
    """Offer an expired listing to its best ranked eligible applicant."""
    process_log = ProcessLog("Offer for internal parking space", f"Listing: {listing_id}")

    try:
        listing_result = await get_listing_by_listing_id(listing_id)
        if not listing_result.ok:
            return await end_failing_process(
                process_log, logger, "no-listing", 500,
                f"Listing {listing_id} could not be found",
                listing_id=listing_id,
            )
        listing = listing_result.data
        process_log.add(f"Rental object: {listing.rental_object_code}")

        if listing.status != ListingStatus.EXPIRED:
            return await end_failing_process(
                process_log, logger, "listing-not-expired", 500,
                f"Listing {listing_id} has status {listing.status.value}, expected Expired",
                listing_id=listing_id,
            )

        active_offer = await offers_service.get_active_offer_by_listing_id(listing_id)
        if active_offer.ok:
            return await end_failing_process(
                process_log, logger, "offer-already-exists", 500,
                f"Listing {listing_id} already has active offer {active_offer.data.id}",
                listing_id=listing_id,
            )
        if active_offer.err != "not-found":
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Active offer for listing could not be checked",
                listing_id=listing_id,
            )

        applicants_result = await get_detailed_applicants_by_listing_id(listing_id)
        if not applicants_result.ok and applicants_result.err == "unknown":
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Applicants could not be retrieved",
                listing_id=listing_id,
            )
        applicants = applicants_result.data if applicants_result.ok else []
        if not applicants:
            return await _no_applicants(process_log, listing)

        eligible: list[DetailedApplicant] = []
        for applicant in applicants:
            if applicant.status != ApplicantStatus.ACTIVE:
                continue
            still_eligible = await _is_still_eligible(applicant, listing)
            if not still_eligible.ok:
                return await end_failing_process(
                    process_log, logger, "unknown", 500,
                    f"Rental rules could not be validated for applicant {applicant.id}",
                    listing_id=listing_id,
                    applicant_id=applicant.id,
                )
            if still_eligible.data:
                eligible.append(applicant)
                continue

            process_log.add(f"Applicant {applicant.contact_code} no longer eligible, disqualified")
            disqualified = await update_applicant_status(
                applicant.id, applicant.contact_code, ApplicantStatus.DISQUALIFIED
            )
            if not disqualified.ok:
                logger.warning(
                    "Could not mark applicant as disqualified",
                    listing_id=listing_id,
                    applicant_id=applicant.id,
                    error_tag=disqualified.err,
                )

        if not eligible:
            return await _no_applicants(process_log, listing)

        ranked = rank_applicants(eligible)
        winner: Optional[DetailedApplicant] = None
        for candidate in ranked:
            busy = await _has_active_offer_elsewhere(candidate, listing_id)
            if not busy.ok:
                return await end_failing_process(
                    process_log, logger, "get-other-offers", 500,
                    f"Offers for applicant {candidate.contact_code} could not be retrieved",
                    listing_id=listing_id,
                    contact_code=candidate.contact_code,
                )
            if busy.data:
                process_log.add(f"Applicant {candidate.contact_code} already has an active offer, skipped")
                continue
            winner = candidate
            break

        if winner is None:
            return await _no_applicants(process_log, listing)
        process_log.add(f"Selected applicant: {winner.contact_code}")

        contact_result = await get_contact(winner.contact_code)
        if not contact_result.ok:
            return await end_failing_process(
                process_log, logger, "get-contact", 500,
                f"Contact {winner.contact_code} could not be retrieved",
                listing_id=listing_id,
                contact_code=winner.contact_code,
            )
        contact = contact_result.data

        status_update = await update_applicant_status(winner.id, winner.contact_code, ApplicantStatus.OFFERED)
        if not status_update.ok:
            return await end_failing_process(
                process_log, logger, "update-applicant-status", 500,
                f"Status of applicant {winner.id} could not be updated",
                listing_id=listing_id,
                applicant_id=winner.id,
            )
        winner = winner.model_copy(update={"status": ApplicantStatus.OFFERED})

        now = datetime.now(timezone.utc)
        expires_at = add_business_days(now, get_config().offer_answer_business_days)

        email_sent = False
        if contact.email_address:
            email_sent = await communication.send_parking_space_offer_email(
                communication.ParkingSpaceOfferEmail(
                    to=contact.email_address,
                    address=listing.address or "",
                    first_name=contact.first_name or "",
                    available_from=listing.vacant_from or now,
                    deadline_date=expires_at,
                    rent=str(listing.monthly_rent) if listing.monthly_rent is not None else "",
                    type=listing.object_type_caption or "",
                    parking_space_id=listing.rental_object_code,
                    object_id=str(listing.id),
                    has_parking_space=winner.parking_space_contract_count > 0,
                )
            )
        if email_sent:
            process_log.add("Offer e-mail sent")
        else:
            process_log.add("Offer e-mail could not be sent")
            await process_log.notify(
                "leasing",
                f"Offer e-mail for parking space {listing.rental_object_code} could not be sent",
            )

        snapshot = [
            OfferApplicant.from_detailed_applicant(winner if applicant.id == winner.id else applicant)
            for applicant in ranked
        ]
        created = await offers_service.create_offer(
            CreateOfferParams(
                listing_id=listing_id,
                applicant_id=winner.id,
                status=OfferStatus.ACTIVE,
                expires_at=expires_at,
                sent_at=now if email_sent else None,
                selected_applicants=snapshot,
            )
        )
        if not created.ok:
            await process_log.notify(
                "leasing",
                f"Offer for parking space {listing.rental_object_code} could not be created",
            )
            return await end_failing_process(
                process_log, logger, "create-offer", 500,
                "Offer could not be created",
                listing_id=listing_id,
                applicant_id=winner.id,
            )

        logger.info(
            "Offer created",
            listing_id=listing_id,
            offer_id=created.data.id,
            applicant_id=winner.id,
        )
        return make_process_success(200, data={"offerId": created.data.id})
    except Exception as e:
        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Offer creation failed due to an unexpected error",
            exception=e,
            listing_id=listing_id,
        )


async def _no_applicants(process_log: ProcessLog, listing: Listing) -> ProcessResult:
    status_update = await update_listing_status(listing.id, ListingStatus.NO_APPLICANTS)
    if not status_update.ok:
        logger.warning(
            "Could not mark listing as having no applicants",
            listing_id=listing.id,
            error_tag=status_update.err,
        )
    return await end_failing_process(
        process_log, logger, "no-applicants", 500,
        f"Listing {listing.id} has no eligible applicants",
        listing_id=listing.id,
    )
