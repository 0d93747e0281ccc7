"""Leasing service operations for contacts, leases and credit checks."""

from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from pydantic import ValidationError

from parking_allocation.models.contact import ConsumerReport, Contact, Invoice, InvoiceTransactionType, Lease
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import LeasingServiceError, ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger, mask_pnr

logger = get_structured_logger(__name__)

# Reminders and debt collection older than this no longer block an application
DEBT_COLLECTION_LOOKBACK = timedelta(days=182)

GetContactError = Literal["not-found", "unknown"]


async def get_contact(contact_code: str) -> Result[Contact, GetContactError]:
    """Get a contact by contact code."""
    try:
        response = await service_request("leasing", "GET", f"/contact/contactCode/{contact_code}")
        if response.status_code == 404 or (response.status_code == 200 and not response.content):
            return Err("not-found", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok(Contact.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error("Failed to get contact", contact_code=contact_code, error=str(e))
        return Err("unknown")


async def get_leases_for_pnr(national_registration_number: str, include_contacts: bool = False) -> list[Lease]:
    """Get leases for a registration number. Raises LeasingServiceError on failure."""
    params = {"includeContacts": "true"} if include_contacts else None
    try:
        response = await service_request(
            "leasing",
            "GET",
            f"/leases/for/nationalRegistrationNumber/{national_registration_number}",
            params=params,
        )
    except ServiceRequestError as e:
        raise LeasingServiceError(f"Failed to get leases: {e}") from e

    if response.status_code == 404:
        return []
    if response.status_code != 200:
        logger.error(
            "Unexpected status fetching leases",
            pnr=mask_pnr(national_registration_number),
            status_code=response.status_code,
        )
        raise LeasingServiceError(f"Failed to get leases: status {response.status_code}")

    try:
        return [Lease.model_validate(lease) for lease in response.content or []]
    except ValidationError as e:
        raise LeasingServiceError(f"Failed to parse leases: {e}") from e


def has_recent_debt_collection(invoices: list[Invoice], now: Optional[datetime] = None) -> bool:
    """True when a reminder or debt collection invoice expired within the lookback window."""
    now = now or datetime.now(timezone.utc)
    for invoice in invoices:
        if invoice.transaction_type not in (InvoiceTransactionType.REMINDER, InvoiceTransactionType.DEBT_COLLECTION):
            continue
        if invoice.expiration_date is None:
            continue
        expiration = invoice.expiration_date
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        if now - expiration < DEBT_COLLECTION_LOOKBACK:
            return True
    return False


async def get_internal_credit_information(contact_code: str) -> bool:
    """Internal credit check: False when the contact has recent rent invoices in debt collection.

    Raises LeasingServiceError when the invoices cannot be read.
    """
    try:
        response = await service_request("leasing", "GET", f"/contact/invoices/contactCode/{contact_code}")
    except ServiceRequestError as e:
        raise LeasingServiceError(f"Failed to get invoices: {e}") from e

    if response.status_code == 404:
        return True
    if response.status_code != 200:
        raise LeasingServiceError(f"Failed to get invoices: status {response.status_code}")

    try:
        invoices = [Invoice.model_validate(invoice) for invoice in response.content or []]
    except ValidationError as e:
        raise LeasingServiceError(f"Failed to parse invoices: {e}") from e

    return not has_recent_debt_collection(invoices)


async def get_credit_information(national_registration_number: str) -> ConsumerReport:
    """External consumer credit report. Raises LeasingServiceError on failure."""
    try:
        response = await service_request(
            "leasing", "GET", f"/cas/getConsumerReport/{national_registration_number}"
        )
    except ServiceRequestError as e:
        raise LeasingServiceError(f"Failed to get consumer report: {e}") from e

    if response.status_code != 200 or not response.content:
        raise LeasingServiceError(f"Failed to get consumer report: status {response.status_code}")

    try:
        return ConsumerReport.model_validate(response.content)
    except ValidationError as e:
        raise LeasingServiceError(f"Failed to parse consumer report: {e}") from e
