"""Tests for waiting list and listing registrars."""

import pytest
from unittest.mock import AsyncMock, patch

from parking_allocation.models.listing import Listing
from parking_allocation.models.parking_space import PublishedParkingSpace
from parking_allocation.models.result import Err, Ok
from parking_allocation.models.waiting_list import WaitingListEntry, WaitingListType
from parking_allocation.processes.listing_registrar import ensure_listing
from parking_allocation.processes.waiting_list_registrar import ensure_enrolled
from tests.utils.factories import create_listing_data, create_parking_space_data

WAITING_LISTS = "parking_allocation.processes.waiting_list_registrar"
LISTINGS = "parking_allocation.processes.listing_registrar"


# Waiting list registrar

@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_enrolled_already_enrolled():
    """Test no enrollment when the contact is already queued."""
    entries = [WaitingListEntry(waiting_list_type=WaitingListType.PARKING_SPACE)]
    add = AsyncMock()

    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Ok(entries))), \
            patch(f"{WAITING_LISTS}.add_applicant_to_waiting_list", add):
        result = await ensure_enrolled("P12345", "1212121212")

    assert result.ok
    assert result.data is False
    add.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_enrolled_legacy_caption_counts():
    """Test legacy internal/external captions count as enrolled."""
    entries = [WaitingListEntry(waiting_list_type_caption="Bilplats (extern)")]
    add = AsyncMock()

    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Ok(entries))), \
            patch(f"{WAITING_LISTS}.add_applicant_to_waiting_list", add):
        result = await ensure_enrolled("P12345", "1212121212")

    assert result.ok
    add.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_enrolled_adds_missing_contact():
    """Test enrollment of a contact only in other waiting lists."""
    entries = [WaitingListEntry(waiting_list_type=WaitingListType.HOUSING)]
    add = AsyncMock(return_value=Ok(None, 201))

    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Ok(entries))), \
            patch(f"{WAITING_LISTS}.add_applicant_to_waiting_list", add):
        result = await ensure_enrolled("P12345", "1212121212")

    assert result.ok
    assert result.data is True
    add.assert_awaited_once_with("1212121212", "P12345", WaitingListType.PARKING_SPACE)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_enrolled_conflict_is_success():
    """Test a concurrent enrollment is not an error."""
    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Ok([]))), \
            patch(f"{WAITING_LISTS}.add_applicant_to_waiting_list", AsyncMock(return_value=Err("conflict", 409))):
        result = await ensure_enrolled("P12345", "1212121212")

    assert result.ok
    assert result.data is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_enrolled_failures():
    """Test read and write failures are reported."""
    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Err("unknown", 500))):
        assert (await ensure_enrolled("P12345", "1212121212")).err == "unknown"

    with patch(f"{WAITING_LISTS}.get_waiting_list", AsyncMock(return_value=Ok([]))), \
            patch(f"{WAITING_LISTS}.add_applicant_to_waiting_list", AsyncMock(return_value=Err("unknown", 500))):
        assert (await ensure_enrolled("P12345", "1212121212")).err == "unknown"


# Listing registrar

@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_listing_existing():
    """Test an existing active listing is returned without creating one."""
    parking_space = PublishedParkingSpace(**create_parking_space_data(rental_object_code="705-808-00-0006"))
    listing = Listing(**create_listing_data(listing_id=1, rental_object_code="705-808-00-0006"))
    create = AsyncMock()

    with patch(f"{LISTINGS}.get_active_listing_by_rental_object_code", AsyncMock(return_value=Ok(listing, 200))), \
            patch(f"{LISTINGS}.create_new_listing", create):
        result = await ensure_listing(parking_space)

    assert result.ok
    assert result.data.id == 1
    create.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_listing_creates_from_ad():
    """Test a missing listing is created from the ad metadata."""
    parking_space = PublishedParkingSpace(**create_parking_space_data(rental_object_code="705-808-00-0006"))
    created = Listing(**create_listing_data(listing_id=2, rental_object_code="705-808-00-0006"))
    create = AsyncMock(return_value=Ok(created, 201))

    with patch(f"{LISTINGS}.get_active_listing_by_rental_object_code", AsyncMock(return_value=Err("not-found", 404))), \
            patch(f"{LISTINGS}.create_new_listing", create):
        result = await ensure_listing(parking_space)

    assert result.ok
    assert result.data.id == 2
    new_listing = create.await_args.args[0]
    assert new_listing.rental_object_code == "705-808-00-0006"
    assert new_listing.address == parking_space.address
    assert new_listing.district_code == parking_space.district_code


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_listing_conflict_refetches():
    """Test losing a creation race returns the winner's listing."""
    parking_space = PublishedParkingSpace(**create_parking_space_data(rental_object_code="705-808-00-0006"))
    winner = Listing(**create_listing_data(listing_id=3, rental_object_code="705-808-00-0006"))
    lookup = AsyncMock(side_effect=[Err("not-found", 404), Ok(winner, 200)])

    with patch(f"{LISTINGS}.get_active_listing_by_rental_object_code", lookup), \
            patch(f"{LISTINGS}.create_new_listing", AsyncMock(return_value=Err("conflict", 409))):
        result = await ensure_listing(parking_space)

    assert result.ok
    assert result.data.id == 3
    assert lookup.await_count == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_listing_conflict_without_listing_fails():
    """Test a conflict followed by a missing listing is unknown."""
    parking_space = PublishedParkingSpace(**create_parking_space_data())
    lookup = AsyncMock(side_effect=[Err("not-found", 404), Err("not-found", 404)])

    with patch(f"{LISTINGS}.get_active_listing_by_rental_object_code", lookup), \
            patch(f"{LISTINGS}.create_new_listing", AsyncMock(return_value=Err("conflict", 409))):
        result = await ensure_listing(parking_space)

    assert not result.ok
    assert result.err == "unknown"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_listing_lookup_failure():
    """Test lookup failures do not create listings."""
    create = AsyncMock()

    with patch(f"{LISTINGS}.get_active_listing_by_rental_object_code", AsyncMock(return_value=Err("unknown", 500))), \
            patch(f"{LISTINGS}.create_new_listing", create):
        result = await ensure_listing(PublishedParkingSpace(**create_parking_space_data()))

    assert result.err == "unknown"
    create.assert_not_awaited()
