"""Tests for applicant, offer and process result models."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from parking_allocation.models.applicant import Applicant, ApplicantStatus, ApplicationType, DetailedApplicant
from parking_allocation.models.offer import CreateOfferParams, Offer, OfferApplicant, OfferStatus
from parking_allocation.models.process import (
    ProcessResult,
    ProcessStatus,
    make_process_error,
    make_process_success,
)
from tests.utils.factories import create_applicant_data, create_detailed_applicant_data, create_offer_data


@pytest.mark.unit
def test_applicant_withdrawn_statuses():
    """Test only the two withdrawal statuses count as withdrawn."""
    for status in ApplicantStatus:
        applicant = Applicant(**create_applicant_data(status=status.value))
        expected = status in (ApplicantStatus.WITHDRAWN_BY_USER, ApplicantStatus.WITHDRAWN_BY_MANAGER)
        assert applicant.is_withdrawn is expected


@pytest.mark.unit
def test_applicant_requires_application_date():
    """Test applicant without application date is rejected."""
    data = create_applicant_data()
    del data["application_date"]

    with pytest.raises(ValidationError):
        Applicant(**data)


@pytest.mark.unit
def test_offer_applicant_from_detailed_applicant():
    """Test the snapshot row built from a detailed applicant."""
    applicant = DetailedApplicant(**create_detailed_applicant_data(
        listing_id=3,
        id=11,
        priority=1,
        application_type="Replace",
        queue_points=120,
        address="Testgatan 1",
        parking_space_contract_count=1,
        housing_lease_status="Current",
    ))

    row = OfferApplicant.from_detailed_applicant(applicant)

    assert row.listing_id == 3
    assert row.applicant_id == 11
    assert row.priority == 1
    assert row.status == ApplicantStatus.ACTIVE
    assert row.application_type == ApplicationType.REPLACE
    assert row.queue_points == 120
    assert row.address == "Testgatan 1"
    assert row.has_parking_space is True
    assert row.housing_lease_status == "Current"


@pytest.mark.unit
def test_offer_applicant_defaults_application_type():
    """Test missing application type falls back to Additional."""
    applicant = DetailedApplicant(**create_detailed_applicant_data(application_type=None, address=None))

    row = OfferApplicant.from_detailed_applicant(applicant)

    assert row.application_type == ApplicationType.ADDITIONAL
    assert row.address == ""
    assert row.has_parking_space is False


@pytest.mark.unit
def test_offer_is_active():
    """Test active offer detection."""
    assert Offer(**create_offer_data(status="Active")).is_active
    assert not Offer(**create_offer_data(status="Accepted")).is_active
    assert not Offer(**create_offer_data(status="Expired")).is_active


@pytest.mark.unit
def test_create_offer_params_payload():
    """Test offer creation payload omits a missing sent_at."""
    params = CreateOfferParams(
        listing_id=1,
        applicant_id=2,
        expires_at=datetime(2024, 12, 11, 12, 0, tzinfo=timezone.utc),
    )
    payload = params.to_payload()

    assert payload["listingId"] == 1
    assert payload["applicantId"] == 2
    assert payload["status"] == OfferStatus.ACTIVE.value
    assert payload["selectedApplicants"] == []
    assert "sentAt" not in payload


@pytest.mark.unit
def test_process_error_envelope():
    """Test failed envelope."""
    result = make_process_error("no-offer", 404, {"message": "Offer 999 could not be found"})

    assert result.process_status == ProcessStatus.FAILED
    assert result.successful is False
    assert result.error == "no-offer"
    assert result.http_status == 404
    assert result.message == "Offer 999 could not be found"


@pytest.mark.unit
def test_process_success_envelope():
    """Test successful envelope."""
    result = make_process_success(202, data={"listingId": 5}, message="done")

    assert result.successful is True
    assert result.error is None
    assert result.data == {"listingId": 5}
    assert result.message == "done"
    assert make_process_success().message is None


@pytest.mark.unit
def test_process_result_http_status_bounds():
    """Test http status must be a valid HTTP status code."""
    with pytest.raises(ValidationError):
        ProcessResult(process_status=ProcessStatus.SUCCESSFUL, http_status=99)
    with pytest.raises(ValidationError):
        ProcessResult(process_status=ProcessStatus.SUCCESSFUL, http_status=600)
