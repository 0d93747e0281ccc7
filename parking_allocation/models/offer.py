"""Offer models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from parking_allocation.models.applicant import ApplicantStatus, ApplicationType, DetailedApplicant
from parking_allocation.models.base import ServiceModel


class OfferStatus(str, Enum):
    """Offer lifecycle states."""
    ACTIVE = "Active"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"
    EXPIRED = "Expired"


class OfferApplicant(ServiceModel):
    """One row of the ranked applicant snapshot stored with an offer."""
    listing_id: int
    applicant_id: int
    priority: Optional[int] = None
    status: ApplicantStatus
    application_type: ApplicationType = ApplicationType.ADDITIONAL
    queue_points: Optional[int] = None
    address: str = ""
    has_parking_space: bool = False
    housing_lease_status: Optional[str] = None

    @classmethod
    def from_detailed_applicant(cls, applicant: DetailedApplicant) -> "OfferApplicant":
        return cls(
            listing_id=applicant.listing_id,
            applicant_id=applicant.id,
            priority=applicant.priority,
            status=applicant.status,
            application_type=applicant.application_type or ApplicationType.ADDITIONAL,
            queue_points=applicant.queue_points,
            address=applicant.address or "",
            has_parking_space=applicant.parking_space_contract_count > 0,
            housing_lease_status=applicant.housing_lease_status,
        )


class CreateOfferParams(ServiceModel):
    """Request body for creating an offer."""
    listing_id: int
    applicant_id: int
    status: OfferStatus = OfferStatus.ACTIVE
    expires_at: datetime
    sent_at: Optional[datetime] = None
    selected_applicants: list[OfferApplicant] = Field(default_factory=list)


class Offer(ServiceModel):
    """Offer of a listing to one applicant."""
    id: int
    listing_id: int
    status: OfferStatus
    offered_applicant: DetailedApplicant
    rental_object_code: Optional[str] = None
    selected_applicants: list[OfferApplicant] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    expires_at: datetime
    answered_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == OfferStatus.ACTIVE
