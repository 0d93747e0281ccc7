"""Eligibility validation against rental rules.

The upstream rule check answers with the broadest application type a contact
is entitled to for a district or rental object. `Additional` rights cover a
`Replace` request; `Replace` rights cover nothing else.
"""

from parking_allocation.models.applicant import ApplicationType
from parking_allocation.models.rental_rules import (
    EligibilityDecision,
    EligibilityError,
    RentalRuleEntitlement,
    RentalRuleTarget,
    RentalRuleTargetKind,
)
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.rental_rules import (
    validate_property_rental_rules,
    validate_residential_area_rental_rules,
)
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# Upstream rule check tags mapped onto eligibility tags
_ERROR_TAGS: dict[str, EligibilityError] = {
    "not-found": "not-found",
    "not-a-parking-space": "not-a-parking-space",
    "not-tenant-in-the-property": "no-contract-in-the-area",
    "no-housing-contract-in-the-area": "no-contract-in-the-area",
    "unknown": "unknown",
}


def is_application_allowed(entitlement: ApplicationType, requested: ApplicationType) -> bool:
    if entitlement == ApplicationType.ADDITIONAL:
        return True
    return requested == ApplicationType.REPLACE


async def validate(
    contact_code: str,
    target: RentalRuleTarget,
    application_type: ApplicationType,
) -> Result[EligibilityDecision, EligibilityError]:
    """Decide whether a contact may apply with the requested type for a district or rental object."""
    if target.kind == RentalRuleTargetKind.DISTRICT:
        rule_result = await validate_residential_area_rental_rules(contact_code, target.code)
    else:
        rule_result = await validate_property_rental_rules(contact_code, target.code)

    if not rule_result.ok:
        tag = _ERROR_TAGS.get(rule_result.err, "unknown")
        logger.info(
            "Rental rule check failed",
            contact_code=contact_code,
            target_kind=target.kind.value,
            target_code=target.code,
            error_tag=tag,
        )
        return Err(tag, rule_result.status_code)

    entitlement: RentalRuleEntitlement = rule_result.data
    if not is_application_allowed(entitlement.application_type, application_type):
        logger.info(
            "Application type not allowed",
            contact_code=contact_code,
            target_code=target.code,
            entitled=entitlement.application_type.value,
            requested=application_type.value,
        )
        return Err("not-allowed-to-rent-additional", rule_result.status_code)

    return Ok(
        EligibilityDecision(reason=entitlement.reason, resolved_application_type=application_type),
        rule_result.status_code,
    )


async def validate_for_rental_object(
    contact_code: str,
    rental_object_code: str,
    district_code: str,
    application_type: ApplicationType,
) -> Result[EligibilityDecision, EligibilityError]:
    """Check the rental object first, then its district. The first failure wins."""
    property_result = await validate(
        contact_code, RentalRuleTarget.rental_object(rental_object_code), application_type
    )
    if not property_result.ok:
        return property_result

    return await validate(contact_code, RentalRuleTarget.district(district_code), application_type)
