"""Waiting list models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from parking_allocation.models.base import ServiceModel


class WaitingListType(str, Enum):
    """Waiting list categories accepted by the leasing service."""
    PARKING_SPACE = "ParkingSpace"
    HOUSING = "Housing"
    STORAGE = "Storage"


# Legacy captions that count as parking space enrollment
LEGACY_PARKING_SPACE_CAPTIONS = frozenset({"Bilplats (intern)", "Bilplats (extern)"})


class WaitingListEntry(ServiceModel):
    """One contact's place in one waiting list."""
    contact_code: Optional[str] = None
    waiting_list_type: Optional[WaitingListType] = None
    waiting_list_type_caption: Optional[str] = None
    queue_time: Optional[datetime] = None
    queue_points: Optional[int] = None

    def is_parking_space(self) -> bool:
        if self.waiting_list_type == WaitingListType.PARKING_SPACE:
            return True
        return self.waiting_list_type_caption in LEGACY_PARKING_SPACE_CAPTIONS
