"""Applicant models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from parking_allocation.models.base import ServiceModel


class ApplicationType(str, Enum):
    """Whether the applicant replaces a current parking space or rents one more."""
    REPLACE = "Replace"
    ADDITIONAL = "Additional"


class ApplicantStatus(str, Enum):
    """Applicant lifecycle states."""
    ACTIVE = "Active"
    OFFERED = "Offered"
    OFFER_ACCEPTED = "OfferAccepted"
    OFFER_DECLINED = "OfferDeclined"
    OFFER_EXPIRED = "OfferExpired"
    DISQUALIFIED = "Disqualified"
    WITHDRAWN_BY_USER = "WithdrawnByUser"
    WITHDRAWN_BY_MANAGER = "WithdrawnByManager"


WITHDRAWN_STATUSES = frozenset({ApplicantStatus.WITHDRAWN_BY_USER, ApplicantStatus.WITHDRAWN_BY_MANAGER})


class Applicant(ServiceModel):
    """One contact's interest in one listing."""
    id: Optional[int] = Field(None, description="Applicant ID, assigned by the leasing service")
    name: Optional[str] = None
    contact_code: str
    national_registration_number: Optional[str] = None
    listing_id: int
    application_type: Optional[ApplicationType] = None
    status: ApplicantStatus = Field(default=ApplicantStatus.ACTIVE)
    application_date: datetime
    priority: Optional[int] = Field(None, description="Ranking priority, lower is better")

    @property
    def is_withdrawn(self) -> bool:
        return self.status in WITHDRAWN_STATUSES


class DetailedApplicant(Applicant):
    """Applicant enriched with queue and lease details, input to ranking."""
    queue_points: Optional[int] = None
    queue_time: Optional[datetime] = None
    address: Optional[str] = None
    parking_space_contract_count: int = 0
    housing_lease_status: Optional[str] = None
    district_code: Optional[str] = None
