"""Make sure an applicant stands in the parking space waiting list."""

from typing import Literal

from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.models.waiting_list import WaitingListType
from parking_allocation.services.waiting_lists import add_applicant_to_waiting_list, get_waiting_list
from parking_allocation.utils.logging import get_structured_logger, mask_pnr

logger = get_structured_logger(__name__)


async def ensure_enrolled(contact_code: str, national_registration_number: str) -> Result[bool, Literal["unknown"]]:
    """Enroll the contact unless already enrolled. Ok(True) when an entry was created."""
    waiting_list = await get_waiting_list(national_registration_number)
    if not waiting_list.ok:
        return Err("unknown", waiting_list.status_code)

    if any(entry.is_parking_space() for entry in waiting_list.data):
        return Ok(False)

    added = await add_applicant_to_waiting_list(
        national_registration_number, contact_code, WaitingListType.PARKING_SPACE
    )
    if added.ok:
        logger.info(
            "Applicant added to parking space waiting list",
            contact_code=contact_code,
            pnr=mask_pnr(national_registration_number),
        )
        return Ok(True, added.status_code)

    # Another request enrolled the contact in between
    if added.err == "conflict":
        return Ok(False, added.status_code)

    return Err("unknown", added.status_code)
