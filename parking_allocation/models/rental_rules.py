"""Rental rule validation models."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from parking_allocation.models.applicant import ApplicationType
from parking_allocation.models.base import ServiceModel


class RentalRuleTargetKind(str, Enum):
    DISTRICT = "district"
    RENTAL_OBJECT = "rental-object"


class RentalRuleTarget(BaseModel):
    """What a rental rule check is run against: a district or a specific rental object."""
    kind: RentalRuleTargetKind
    code: str = Field(..., min_length=1)

    @classmethod
    def district(cls, district_code: str) -> "RentalRuleTarget":
        return cls(kind=RentalRuleTargetKind.DISTRICT, code=district_code)

    @classmethod
    def rental_object(cls, rental_object_code: str) -> "RentalRuleTarget":
        return cls(kind=RentalRuleTargetKind.RENTAL_OBJECT, code=rental_object_code)


class RentalRuleEntitlement(ServiceModel):
    """Upstream rule check outcome: the maximum application type the contact may use."""
    reason: str = ""
    application_type: ApplicationType


class EligibilityDecision(BaseModel):
    """Allowed application with the reason reported by the rule check."""
    reason: str
    resolved_application_type: ApplicationType


PropertyRuleError = Literal["not-found", "not-a-parking-space", "not-tenant-in-the-property", "unknown"]
ResidentialAreaRuleError = Literal["not-found", "no-housing-contract-in-the-area", "unknown"]
EligibilityError = Literal[
    "not-found",
    "not-a-parking-space",
    "no-contract-in-the-area",
    "not-allowed-to-rent-additional",
    "unknown",
]
