"""Contact, lease and invoice models from the leasing service."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, Field

from parking_allocation.models.base import ServiceModel


class Contact(ServiceModel):
    """Person known to the leasing service."""
    contact_code: str
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    national_registration_number: str
    email_address: Optional[str] = None
    phone_number: Optional[str] = None


class Lease(ServiceModel):
    """Lease held by a contact; only presence matters to this core."""
    lease_id: str = Field(validation_alias=AliasChoices("leaseId", "LeaseId", "lease_id"))
    type: Optional[str] = None
    status: Optional[str] = None
    lease_start_date: Optional[datetime] = None
    last_debit_date: Optional[datetime] = None


class InvoiceTransactionType(str, Enum):
    RENT = "Rent"
    REMINDER = "Reminder"
    DEBT_COLLECTION = "DebtCollection"
    OTHER = "Other"


class Invoice(ServiceModel):
    """Invoice row used by the internal credit check."""
    invoice_id: str
    transaction_type: InvoiceTransactionType = Field(default=InvoiceTransactionType.OTHER)
    expiration_date: Optional[datetime] = None
    amount: Optional[float] = None


class ConsumerReport(ServiceModel):
    """External credit report for a registration number."""
    pnr: Optional[str] = None
    template: Optional[str] = None
    status: Optional[str] = None
    status_text: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
