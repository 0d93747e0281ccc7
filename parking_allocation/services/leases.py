"""Leasing service operations for creating leases."""

from datetime import datetime
from typing import Literal

from pydantic import ValidationError

from parking_allocation.models.contact import Lease
from parking_allocation.models.result import Err, Ok, Result
from parking_allocation.services.service_client import service_request
from parking_allocation.utils.errors import ServiceRequestError
from parking_allocation.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

DEFAULT_COMPANY_CODE = "001"


async def create_lease(
    rental_object_code: str,
    contact_code: str,
    from_date: datetime,
    company_code: str = DEFAULT_COMPANY_CODE,
) -> Result[Lease, Literal["unknown"]]:
    """Create a parking space lease for a contact starting at `from_date`."""
    try:
        response = await service_request(
            "leasing",
            "POST",
            "/leases",
            json={
                "parkingSpaceId": rental_object_code,
                "contactCode": contact_code,
                "fromDate": from_date.isoformat(),
                "companyCode": company_code,
            },
        )
        if response.status_code not in (200, 201) or not response.content:
            logger.error(
                "Unexpected status creating lease",
                rental_object_code=rental_object_code,
                contact_code=contact_code,
                status_code=response.status_code,
            )
            return Err("unknown", response.status_code)
        return Ok(Lease.model_validate(response.content), response.status_code)
    except (ServiceRequestError, ValidationError) as e:
        logger.error(
            "Failed to create lease",
            rental_object_code=rental_object_code,
            contact_code=contact_code,
            error=str(e),
        )
        return Err("unknown")
