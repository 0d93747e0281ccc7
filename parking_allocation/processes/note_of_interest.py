"""Application intake: register a contact's interest in an internal parking space."""

from datetime import datetime, timezone

from parking_allocation.models.applicant import Applicant, ApplicantStatus, ApplicationType
from parking_allocation.models.parking_space import ParkingSpaceApplicationCategory
from parking_allocation.models.process import ProcessResult, make_process_error, make_process_success
from parking_allocation.processes.common import ProcessLog, end_failing_process
from parking_allocation.processes.eligibility import validate_for_rental_object
from parking_allocation.processes.listing_registrar import ensure_listing
from parking_allocation.processes.waiting_list_registrar import ensure_enrolled
from parking_allocation.services.applicants import apply_for_listing, get_applicant_by_contact_code_and_listing_id
from parking_allocation.services.contacts import get_contact, get_internal_credit_information, get_leases_for_pnr
from parking_allocation.services.property_management import get_published_parking_space
from parking_allocation.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)

ELIGIBILITY_HTTP_STATUS = {
    "not-found": 404,
    "not-allowed-to-rent-additional": 400,
    "no-contract-in-the-area": 400,
    "not-a-parking-space": 400,
    "unknown": 500,
}


def _already_applied(contact_code: str, parking_space_id: str) -> ProcessResult:
    return make_process_success(
        200, message=f"Applicant {contact_code} already has application for {parking_space_id}"
    )


def _applied(contact_code: str, parking_space_id: str, applicant: Applicant) -> ProcessResult:
    return make_process_success(
        200,
        data=applicant.to_payload(),
        message=f"Applicant {contact_code} successfully applied to parking space {parking_space_id}",
    )


@timed("create_note_of_interest")
async def create_note_of_interest(
    parking_space_id: str,
    contact_code: str,
    application_type: ApplicationType,
) -> ProcessResult:
    """Apply a contact for an internal parking space.

    Re-running for an already Active application is a no-op success. A
    withdrawn application may be replaced by a new one.
    """
    process_log = ProcessLog(
        "Note of interest for internal parking space",
        f"Parking space: {parking_space_id}",
        f"Contact: {contact_code}",
        f"Application type: {application_type.value}",
    )

    try:
        parking_space_result = await get_published_parking_space(parking_space_id)
        if not parking_space_result.ok:
            if parking_space_result.err == "not-found":
                return make_process_error("parkingspace-not-found", 404, {
                    "message": f"The parking space {parking_space_id} does not exist or is no longer available.",
                })
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Published parking space could not be retrieved",
                parking_space_id=parking_space_id,
            )
        parking_space = parking_space_result.data

        if parking_space.application_category != ParkingSpaceApplicationCategory.INTERNAL:
            return make_process_error("parkingspace-not-internal", 400, {
                "message": (
                    "This process currently only handles internal parking spaces. "
                    f"The parking space provided is not internal (it is {parking_space.waiting_list_type})."
                ),
            })

        contact_result = await get_contact(contact_code)
        if not contact_result.ok:
            return make_process_error("applicant-not-found", 404, {
                "message": f"Applicant {contact_code} could not be retrieved.",
            })
        contact = contact_result.data

        leases = await get_leases_for_pnr(contact.national_registration_number)
        if not leases:
            return make_process_error("applicant-not-tenant", 403, {"message": "Applicant is not a tenant"})
        process_log.add(f"Applicant has {len(leases)} lease(s)")

        if not parking_space.district_code:
            eligibility_error, eligibility_status = "not-found", 404
        else:
            eligibility = await validate_for_rental_object(
                contact_code, parking_space.rental_object_code, parking_space.district_code, application_type
            )
            eligibility_error = None if eligibility.ok else eligibility.err
            eligibility_status = ELIGIBILITY_HTTP_STATUS.get(eligibility_error, 500)

        if eligibility_error:
            if eligibility_error == "unknown":
                return await end_failing_process(
                    process_log, logger, "unknown", 500,
                    "Rental rules could not be validated",
                    contact_code=contact_code,
                    parking_space_id=parking_space_id,
                )
            return make_process_error(eligibility_error, eligibility_status, {
                "message": f"Applicant {contact_code} may not apply for parking space {parking_space_id}",
            })
        process_log.add("Rental rules validated")

        if not await get_internal_credit_information(contact_code):
            process_log.add("Internal credit check failed")
            logger.info("Application rejected by credit check", contact_code=contact_code)
            return make_process_error("application-rejected", 400, {
                "reason": "Internal check failed",
                "message": "The parking space lease application has been rejected",
            })
        process_log.add("Internal credit check passed")

        enrolled = await ensure_enrolled(contact_code, contact.national_registration_number)
        if not enrolled.ok:
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Applicant could not be added to the parking space waiting list",
                contact_code=contact_code,
            )
        if enrolled.data:
            process_log.add("Applicant added to parking space waiting list")

        listing_result = await ensure_listing(parking_space)
        if not listing_result.ok:
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Listing could not be found or created",
                parking_space_id=parking_space_id,
            )
        listing = listing_result.data
        process_log.add(f"Listing {listing.id} in place")

        existing = await get_applicant_by_contact_code_and_listing_id(contact_code, listing.id)
        if not existing.ok:
            return await end_failing_process(
                process_log, logger, "unknown", 500,
                "Existing application could not be checked",
                contact_code=contact_code,
                listing_id=listing.id,
            )
        if existing.data is not None and not existing.data.is_withdrawn:
            if existing.data.status == ApplicantStatus.ACTIVE:
                return _already_applied(contact_code, parking_space_id)
            return make_process_error("applicant-already-exists", 409, {
                "message": f"Applicant {contact_code} already has an application for {parking_space_id}",
            })

        applicant = Applicant(
            name=contact.full_name,
            contact_code=contact_code,
            national_registration_number=contact.national_registration_number,
            listing_id=listing.id,
            application_type=application_type,
            status=ApplicantStatus.ACTIVE,
            application_date=datetime.now(timezone.utc),
        )
        applied = await apply_for_listing(applicant)
        if applied.ok:
            logger.info("Applicant applied for listing", contact_code=contact_code, listing_id=listing.id)
            return _applied(contact_code, parking_space_id, applied.data)

        if applied.err == "conflict":
            # A concurrent request created the application first
            current = await get_applicant_by_contact_code_and_listing_id(contact_code, listing.id)
            if current.ok and current.data is not None and current.data.status == ApplicantStatus.ACTIVE:
                return _already_applied(contact_code, parking_space_id)
            return make_process_error("applicant-already-exists", 409, {
                "message": f"Applicant {contact_code} already has an application for {parking_space_id}",
            })

        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Application could not be created",
            contact_code=contact_code,
            listing_id=listing.id,
        )
    except Exception as e:
        return await end_failing_process(
            process_log, logger, "unknown", 500,
            "Note of interest failed due to an unexpected error",
            exception=e,
            contact_code=contact_code,
            parking_space_id=parking_space_id,
        )
