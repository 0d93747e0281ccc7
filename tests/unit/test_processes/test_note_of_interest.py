"""Tests for application intake."""

import pytest
from contextlib import ExitStack
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from parking_allocation.models.applicant import Applicant, ApplicationType
from parking_allocation.models.contact import Contact, Lease
from parking_allocation.models.listing import Listing
from parking_allocation.models.parking_space import PublishedParkingSpace
from parking_allocation.models.rental_rules import EligibilityDecision
from parking_allocation.models.result import Err, Ok
from parking_allocation.processes.note_of_interest import create_note_of_interest
from parking_allocation.utils.errors import LeasingServiceError
from tests.utils.assertions import assert_process_failed, assert_process_succeeded
from tests.utils.factories import (
    create_applicant_data,
    create_contact_data,
    create_listing_data,
    create_parking_space_data,
)

MODULE = "parking_allocation.processes.note_of_interest"
CONTACT_CODE = "P12345"
PNR = "1212121212"
PARKING_SPACE_ID = "705-808-00-0006"
LISTING_ID = 42


@pytest.fixture
def intake():
    """Patch every collaborator of the intake process with a happy-path default."""
    parking_space = PublishedParkingSpace(**create_parking_space_data(rental_object_code=PARKING_SPACE_ID))
    contact = Contact(**create_contact_data(contact_code=CONTACT_CODE, national_registration_number=PNR))
    listing = Listing(**create_listing_data(listing_id=LISTING_ID, rental_object_code=PARKING_SPACE_ID))
    created = Applicant(**create_applicant_data(listing_id=LISTING_ID, contact_code=CONTACT_CODE, id=7))

    mocks = SimpleNamespace(
        get_published_parking_space=AsyncMock(return_value=Ok(parking_space, 200)),
        get_contact=AsyncMock(return_value=Ok(contact, 200)),
        get_leases_for_pnr=AsyncMock(return_value=[Lease(lease_id="123-456-78-9000/1")]),
        validate_for_rental_object=AsyncMock(return_value=Ok(
            EligibilityDecision(reason="ok", resolved_application_type=ApplicationType.ADDITIONAL), 200
        )),
        get_internal_credit_information=AsyncMock(return_value=True),
        ensure_enrolled=AsyncMock(return_value=Ok(True)),
        ensure_listing=AsyncMock(return_value=Ok(listing, 200)),
        get_applicant_by_contact_code_and_listing_id=AsyncMock(return_value=Ok(None, 404)),
        apply_for_listing=AsyncMock(return_value=Ok(created, 201)),
    )
    with ExitStack() as stack:
        for name, mock in vars(mocks).items():
            stack.enter_context(patch(f"{MODULE}.{name}", mock))
        yield mocks


async def apply(application_type: ApplicationType = ApplicationType.ADDITIONAL):
    return await create_note_of_interest(PARKING_SPACE_ID, CONTACT_CODE, application_type)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_new_application_succeeds(intake):
    """Test a first application creates an Active applicant."""
    result = await apply()

    assert_process_succeeded(result, 200)
    assert result.message == f"Applicant {CONTACT_CODE} successfully applied to parking space {PARKING_SPACE_ID}"
    intake.get_leases_for_pnr.assert_awaited_once_with(PNR)
    intake.validate_for_rental_object.assert_awaited_once_with(
        CONTACT_CODE, PARKING_SPACE_ID, "CEN", ApplicationType.ADDITIONAL
    )
    intake.ensure_enrolled.assert_awaited_once_with(CONTACT_CODE, PNR)

    applicant = intake.apply_for_listing.await_args.args[0]
    assert applicant.contact_code == CONTACT_CODE
    assert applicant.listing_id == LISTING_ID
    assert applicant.status.value == "Active"
    assert applicant.application_type == ApplicationType.ADDITIONAL


@pytest.mark.unit
@pytest.mark.asyncio
async def test_existing_active_application_is_idempotent(intake):
    """Test re-applying with an Active application changes nothing."""
    existing = Applicant(**create_applicant_data(listing_id=LISTING_ID, contact_code=CONTACT_CODE, status="Active"))
    intake.get_applicant_by_contact_code_and_listing_id.return_value = Ok(existing, 200)

    result = await apply()

    assert_process_succeeded(result, 200)
    assert result.message == f"Applicant {CONTACT_CODE} already has application for {PARKING_SPACE_ID}"
    intake.apply_for_listing.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["WithdrawnByUser", "WithdrawnByManager"])
async def test_withdrawn_application_may_reapply(intake, status):
    """Test a withdrawn applicant can apply again."""
    existing = Applicant(**create_applicant_data(listing_id=LISTING_ID, contact_code=CONTACT_CODE, status=status))
    intake.get_applicant_by_contact_code_and_listing_id.return_value = Ok(existing, 200)

    result = await apply()

    assert_process_succeeded(result, 200)
    intake.apply_for_listing.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_existing_offered_application_conflicts(intake):
    """Test an applicant in another state cannot apply again."""
    existing = Applicant(**create_applicant_data(listing_id=LISTING_ID, contact_code=CONTACT_CODE, status="Offered"))
    intake.get_applicant_by_contact_code_and_listing_id.return_value = Ok(existing, 200)

    result = await apply()

    assert_process_failed(result, "applicant-already-exists", 409)
    intake.apply_for_listing.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_conflict_with_concurrent_active_application(intake):
    """Test a 409 from a concurrent request is reported as already applied."""
    concurrent = Applicant(**create_applicant_data(listing_id=LISTING_ID, contact_code=CONTACT_CODE, status="Active"))
    intake.get_applicant_by_contact_code_and_listing_id.side_effect = [Ok(None, 404), Ok(concurrent, 200)]
    intake.apply_for_listing.return_value = Err("conflict", 409)

    result = await apply()

    assert_process_succeeded(result, 200)
    assert "already has application" in result.message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_conflict_with_other_state(intake):
    """Test a 409 with a non-active applicant is a conflict."""
    intake.get_applicant_by_contact_code_and_listing_id.side_effect = [Ok(None, 404), Ok(None, 404)]
    intake.apply_for_listing.return_value = Err("conflict", 409)

    result = await apply()

    assert_process_failed(result, "applicant-already-exists", 409)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parking_space_not_found(intake):
    """Test unknown parking space."""
    intake.get_published_parking_space.return_value = Err("not-found", 404)

    result = await apply()

    assert_process_failed(result, "parkingspace-not-found", 404)
    intake.get_contact.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parking_space_not_internal(intake):
    """Test external parking spaces are refused."""
    external = PublishedParkingSpace(**create_parking_space_data(waiting_list_type="Bilplats (extern)"))
    intake.get_published_parking_space.return_value = Ok(external, 200)

    result = await apply()

    assert_process_failed(result, "parkingspace-not-internal", 400)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_applicant_not_found(intake):
    """Test unknown contact."""
    intake.get_contact.return_value = Err("not-found", 404)

    result = await apply()

    assert_process_failed(result, "applicant-not-found", 404)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_applicant_not_tenant(intake):
    """Test contacts without leases are refused."""
    intake.get_leases_for_pnr.return_value = []

    result = await apply()

    assert_process_failed(result, "applicant-not-tenant", 403)
    intake.validate_for_rental_object.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("error,http_status", [
    ("not-allowed-to-rent-additional", 400),
    ("no-contract-in-the-area", 400),
    ("not-a-parking-space", 400),
    ("not-found", 404),
    ("unknown", 500),
])
async def test_eligibility_errors(intake, error, http_status):
    """Test eligibility failures map to HTTP statuses and stop the process."""
    intake.validate_for_rental_object.return_value = Err(error, 403)

    result = await apply()

    assert_process_failed(result, error, http_status)
    intake.get_internal_credit_information.assert_not_awaited()
    intake.ensure_enrolled.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_replace_only_tenant_cannot_apply_additional(intake):
    """Test the not-allowed-to-rent-additional path end to end through the eligibility module."""
    from parking_allocation.models.rental_rules import RentalRuleEntitlement
    from parking_allocation.processes import eligibility

    replace_only = Ok(RentalRuleEntitlement(reason="Has one", application_type=ApplicationType.REPLACE), 200)
    with patch(f"{MODULE}.validate_for_rental_object", eligibility.validate_for_rental_object), \
            patch("parking_allocation.processes.eligibility.validate_property_rental_rules", AsyncMock(return_value=replace_only)), \
            patch("parking_allocation.processes.eligibility.validate_residential_area_rental_rules", AsyncMock(return_value=replace_only)):
        result = await apply(ApplicationType.ADDITIONAL)

    assert_process_failed(result, "not-allowed-to-rent-additional", 400)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_district_is_not_found(intake):
    """Test a parking space without district cannot be validated."""
    no_district = PublishedParkingSpace(**create_parking_space_data(rental_object_code=PARKING_SPACE_ID, district_code=None))
    intake.get_published_parking_space.return_value = Ok(no_district, 200)

    result = await apply()

    assert_process_failed(result, "not-found", 404)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_credit_check_rejects(intake):
    """Test delinquent applicants are rejected before enrollment."""
    intake.get_internal_credit_information.return_value = False

    result = await apply()

    assert_process_failed(result, "application-rejected", 400)
    intake.ensure_enrolled.assert_not_awaited()
    intake.ensure_listing.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_registrar_failures_are_unknown(intake, mock_notifications):
    """Test waiting list and listing failures end as unknown and notify developers."""
    intake.ensure_enrolled.return_value = Err("unknown", 500)

    result = await apply()

    assert_process_failed(result, "unknown", 500)
    intake.ensure_listing.assert_not_awaited()
    assert mock_notifications.to_role.await_args.args[0] == "dev"

    intake.ensure_enrolled.return_value = Ok(False)
    intake.ensure_listing.return_value = Err("unknown", 500)

    result = await apply()

    assert_process_failed(result, "unknown", 500)
    intake.apply_for_listing.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_exception_is_unknown(intake):
    """Test raising lookups are caught at the top of the process."""
    intake.get_leases_for_pnr.side_effect = LeasingServiceError("Failed to get leases: status 500")

    result = await apply()

    assert_process_failed(result, "unknown", 500)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_failure_is_unknown(intake):
    """Test other apply errors."""
    intake.apply_for_listing.return_value = Err("bad-request", 400)

    result = await apply()

    assert_process_failed(result, "unknown", 500)
