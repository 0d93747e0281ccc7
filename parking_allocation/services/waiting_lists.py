"""Leasing service operations for waiting lists."""

from typing import Literal

from pydantic import ValidationError

from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.models.waiting_list import WaitingListEntry, WaitingListType
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger, mask_pnr

logger = get_structured_logger(__name__)

AddToWaitingListError = Literal["conflict", "unknown"]
ResetWaitingListError = Literal["not-in-waiting-list", "unknown"]


async def get_waiting_list(national_registration_number: str) -> Result[list[WaitingListEntry], Literal["unknown"]]:
    """Get every waiting list the contact is enrolled in."""
    try:
        response = await service_request(
            "leasing", "GET", f"/contact/waitingList/{national_registration_number}"
        )
        if response.status_code == 404:
            return Ok([], response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        entries = [WaitingListEntry.model_validate(entry) for entry in response.content or []]
        return Ok(entries, response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to get waiting list",
            pnr=mask_pnr(national_registration_number),
            error=str(e),
        )
        return Err("unknown")


async def add_applicant_to_waiting_list(
    national_registration_number: str,
    contact_code: str,
    waiting_list_type: WaitingListType,
) -> Result[None, AddToWaitingListError]:
    """Enroll a contact in a waiting list."""
    try:
        response = await service_request(
            "leasing",
            "POST",
            f"/contacts/{national_registration_number}/waitingLists",
            json={"contactCode": contact_code, "waitingListType": waiting_list_type.value},
        )
    except ServiceRequestError as e:
        logger.error(
            "Failed to add applicant to waiting list",
            contact_code=contact_code,
            waiting_list_type=waiting_list_type.value,
            error=str(e),
        )
        return Err("unknown")

    if response.status_code in (200, 201):
        return Ok(None, response.status_code)
    if response.status_code == 409:
        return Err("conflict", response.status_code)
    return Err("unknown", response.status_code)


async def reset_waiting_list(
    national_registration_number: str,
    contact_code: str,
    waiting_list_type: WaitingListType,
) -> Result[None, ResetWaitingListError]:
    """Reset the contact's queue points for a waiting list."""
    try:
        response = await service_request(
            "leasing",
            "POST",
            f"/contacts/{national_registration_number}/waitingLists/reset",
            json={"contactCode": contact_code, "waitingListType": waiting_list_type.value},
        )
    except ServiceRequestError as e:
        logger.error(
            "Failed to reset waiting list",
            contact_code=contact_code,
            waiting_list_type=waiting_list_type.value,
            error=str(e),
        )
        return Err("unknown")

    if response.status_code == 200:
        return Ok(None, response.status_code)
    if response.status_code == 404:
        return Err("not-in-waiting-list", response.status_code)
    return Err("unknown", response.status_code)
