"""Listing models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from parking_allocation.models.base import ServiceModel


class ListingStatus(str, Enum):
    """Listing lifecycle states."""
    ACTIVE = "Active"
    EXPIRED = "Expired"
    ASSIGNED = "Assigned"
    DELETED = "Deleted"
    NO_APPLICANTS = "NoApplicants"


class RentalRule(str, Enum):
    """Rental rule category of a listing."""
    SCORED = "Scored"
    NON_SCORED = "NonScored"


class Listing(ServiceModel):
    """Internal listing tracked by the leasing service."""
    id: Optional[int] = Field(None, description="Listing ID, assigned by the leasing service")
    rental_object_code: str = Field(..., description="Rental object code, e.g. 705-808-00-0006")
    status: ListingStatus = Field(default=ListingStatus.ACTIVE)
    published_from: Optional[datetime] = None
    published_to: Optional[datetime] = None
    rental_rule: RentalRule = Field(default=RentalRule.SCORED)
    listing_category: str = Field(default="PARKING_SPACE")
    waiting_list_type: Optional[str] = Field(None, description="Waiting list type caption")
    address: Optional[str] = None
    monthly_rent: Optional[float] = None
    district_caption: Optional[str] = None
    district_code: Optional[str] = None
    block_caption: Optional[str] = None
    block_code: Optional[str] = None
    property_code: Optional[str] = None
    object_type_caption: Optional[str] = None
    object_type_code: Optional[str] = None
    vacant_from: Optional[datetime] = None
