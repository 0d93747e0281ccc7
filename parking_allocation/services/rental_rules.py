"""Leasing service rental rule checks."""

from pydantic import ValidationError

from parking_allocation.models.rental_rules import (
    PropertyRuleError,
    RentalRuleEntitlement,
    ResidentialAreaRuleError,
)
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def _entitlement(body) -> RentalRuleEntitlement:
    # Older deployments wrap the payload in `content`
    if isinstance(body, dict) and "content" in body:
        body = body["content"]
    return RentalRuleEntitlement.model_validate(body)


async def validate_residential_area_rental_rules(
    contact_code: str,
    district_code: str,
) -> Result[RentalRuleEntitlement, ResidentialAreaRuleError]:
    """Check what the contact may rent in a residential area (district)."""
    try:
        response = await service_request(
            "leasing",
            "GET",
            f"/applicants/validateResidentialAreaRentalRules/{contact_code}/{district_code}",
        )
        if response.status_code == 403:
            return Err("no-housing-contract-in-the-area", response.status_code)
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok(_entitlement(response.body), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Residential area rental rule check failed",
            contact_code=contact_code,
            district_code=district_code,
            error=str(e),
        )
        return Err("unknown")


async def validate_property_rental_rules(
    contact_code: str,
    rental_object_code: str,
) -> Result[RentalRuleEntitlement, PropertyRuleError]:
    """Check what the contact may rent in the property of a rental object."""
    try:
        response = await service_request(
            "leasing",
            "GET",
            f"/applicants/validatePropertyRentalRules/{contact_code}/{rental_object_code}",
        )
        if response.status_code == 404:
            return Err("not-found", response.status_code)
        if response.status_code == 400:
            return Err("not-a-parking-space", response.status_code)
        if response.status_code == 403:
            return Err("not-tenant-in-the-property", response.status_code)
        if response.status_code != 200:
            return Err("unknown", response.status_code)
        return Ok(_entitlement(response.body), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Property rental rule check failed",
            contact_code=contact_code,
            rental_object_code=rental_object_code,
            error=str(e),
        )
        return Err("unknown")
