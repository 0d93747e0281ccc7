"""Published parking space as advertised by property management."""

from datetime import datetime
from enum import Enum
from typing import Optional

from parking_allocation.models.base import ServiceModel
from parking_allocation.models.listing import Listing, ListingStatus, RentalRule


class ParkingSpaceApplicationCategory(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


# Waiting list captions used by the property system
APPLICATION_CATEGORY_BY_CAPTION = {
    "Bilplats (intern)": ParkingSpaceApplicationCategory.INTERNAL,
    "Bilplats (extern)": ParkingSpaceApplicationCategory.EXTERNAL,
}


class PublishedParkingSpace(ServiceModel):
    """Parking space ad."""
    rental_object_code: str
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
    published_from: Optional[datetime] = None
    published_to: Optional[datetime] = None
    waiting_list_type: Optional[str] = None

    @property
    def application_category(self) -> Optional[ParkingSpaceApplicationCategory]:
        if not self.waiting_list_type:
            return None
        return APPLICATION_CATEGORY_BY_CAPTION.get(self.waiting_list_type)

    def to_listing(self) -> Listing:
        """Copy the ad metadata into a new internal listing."""
        return Listing(
            rental_object_code=self.rental_object_code,
            status=ListingStatus.ACTIVE,
            published_from=self.published_from,
            published_to=self.published_to,
            rental_rule=RentalRule.SCORED,
            waiting_list_type=self.waiting_list_type,
            address=self.address,
            monthly_rent=self.monthly_rent,
            district_caption=self.district_caption,
            district_code=self.district_code,
            block_caption=self.block_caption,
            block_code=self.block_code,
            property_code=self.property_code,
            object_type_caption=self.object_type_caption,
            object_type_code=self.object_type_code,
            vacant_from=self.vacant_from,
        )
