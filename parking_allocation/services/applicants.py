"""Leasing service operations for applicants."""

from typing import Literal, Optional

from pydantic import ValidationError

from parking_allocation.models.applicant import Applicant, ApplicantStatus, DetailedApplicant
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

ApplyForListingError = Literal["conflict", "bad-request", "unknown"]
UpdateApplicantStatusError = Literal["not-found", "unknown"]


async def apply_for_listing(applicant: Applicant) -> Result[Applicant, ApplyForListingError]:
    """Register an applicant against a listing. A 409 means the applicant already exists."""
    try:
        response = await service_request(
            "leasing", "POST", "/listings/apply", json=applicant.to_payload()
        )
        if response.status_code == 409:
            return Err("conflict", response.status_code)
        if response.status_code == 400:
            return Err("bad-request", response.status_code)
        if response.status_code not in (200, 201):
            logger.error(
                "Unexpected status applying for listing",
                listing_id=applicant.listing_id,
                contact_code=applicant.contact_code,
                status_code=response.status_code,
            )
            return Err("unknown", response.status_code)
        return Ok(Applicant.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to apply for listing",
            listing_id=applicant.listing_id,
            contact_code=applicant.contact_code,
            error=str(e),
        )
        return Err("unknown")


async def get_applicant_by_contact_code_and_listing_id(
    contact_code: str,
    listing_id: int,
) -> Result[Optional[Applicant], Literal["unknown"]]:
    """Get the applicant row for a contact on a listing, Ok(None) when there is none."""
    try:
        response = await service_request("leasing", "GET", f"/applicants/{contact_code}/{listing_id}")
        if response.status_code == 404:
            return Ok(None, response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        if not response.content:
            return Ok(None, response.status_code)
        return Ok(Applicant.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to get applicant by contact code and listing id",
            contact_code=contact_code,
            listing_id=listing_id,
            error=str(e),
        )
        return Err("unknown")


async def get_detailed_applicants_by_listing_id(
    listing_id: int,
) -> Result[list[DetailedApplicant], Literal["not-found", "unknown"]]:
    """Applicants of a listing with queue, priority and lease details."""
    try:
        response = await service_request("leasing", "GET", f"/listing/{listing_id}/applicants/details")
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        applicants = [DetailedApplicant.model_validate(item) for item in response.content or []]
        return Ok(applicants, response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get detailed applicants", listing_id=listing_id, error=str(e))
        return Err("unknown")


async def update_applicant_status(
    applicant_id: int,
    contact_code: Optional[str],
    status: ApplicantStatus,
) -> Result[None, UpdateApplicantStatusError]:
    """Set the status of an applicant."""
    body = {"status": status.value}
    if contact_code:
        body["contactCode"] = contact_code

    try:
        response = await service_request("leasing", "PATCH", f"/applicants/{applicant_id}/status", json=body)
    except ServiceRequestError as e:
        logger.error(
            "Failed to update applicant status",
            applicant_id=applicant_id,
            status=status.value,
            error=str(e),
        )
        return Err("unknown")

    if response.status_code == 200:
        return Ok(None, response.status_code)
    if response.status_code == 404:
        return Err("not-found", response.status_code)
    return Err("unknown", response.status_code)


async def withdraw_applicant_by_manager(applicant_id: int) -> Result[None, UpdateApplicantStatusError]:
    """Withdraw an application on behalf of the leasing team."""
    return await update_applicant_status(applicant_id, None, ApplicantStatus.WITHDRAWN_BY_MANAGER)


async def withdraw_applicant_by_user(applicant_id: int, contact_code: str) -> Result[None, UpdateApplicantStatusError]:
    """Withdraw an application on behalf of the applicant."""
    return await update_applicant_status(applicant_id, contact_code, ApplicantStatus.WITHDRAWN_BY_USER)
