"""Communication service: e-mail notifications to contacts and staff roles.

Delivery is best-effort. Every function logs its own failures and returns
False instead of raising.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from parking_allocation.models.base import ServiceModel
from parking_allocation.models.contact import Contact
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.config import get_config
from parking_allocation.utils.errors import ParkingAllocationError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class ParkingSpaceOfferEmail(ServiceModel):
    """Template fields for the parking space offer e-mail."""
    to: str
    subject: str = "Erbjudande om intern bilplats"
    text: str = "Erbjudande om intern bilplats"
    address: str = ""
    first_name: str = ""
    available_from: datetime
    deadline_date: datetime
    rent: str = ""
    type: str = ""
    parking_space_id: str
    object_id: str
    has_parking_space: bool = False


async def _send(path: str, payload: dict[str, Any], **context: Any) -> bool:
    try:
        response = await service_request("communication", "POST", path, json=payload)
    except ParkingAllocationError as e:
        logger.error("Notification could not be sent", path=path, error=str(e), **context)
        return False

    if response.status_code not in (200, 201, 202, 204):
        logger.error(
            "Notification rejected by communication service",
            path=path,
            status_code=response.status_code,
            **context
        )
        return False
    return True


async def send_notification_to_contact(contact: Contact, subject: str, message: str) -> bool:
    """E-mail a contact."""
    if not contact.email_address:
        logger.warning("Contact has no e-mail address", contact_code=contact.contact_code)
        return False
    return await _send(
        "/sendMessage",
        {"to": contact.email_address, "subject": subject, "text": message},
        contact_code=contact.contact_code,
    )


async def send_notification_to_role(role: str, subject: str, message: str) -> bool:
    """E-mail a staff role (e.g. `leasing`, `dev`)."""
    try:
        recipient = get_config().notification_role_address_template.format(role=role)
    except ParkingAllocationError as e:
        logger.error("Role notification not configured", role=role, error=str(e))
        return False
    return await _send(
        "/sendMessage",
        {"to": recipient, "subject": subject, "text": message},
        role=role,
    )


async def send_parking_space_offer_email(email: ParkingSpaceOfferEmail) -> bool:
    """Send the offer e-mail for an internal parking space."""
    return await _send(
        "/sendParkingSpaceOffer",
        email.to_payload(),
        parking_space_id=email.parking_space_id,
    )
