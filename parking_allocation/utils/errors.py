"""Error handling utilities."""


class ParkingAllocationError(Exception):
    """Base exception for the parking allocation core."""
    pass


class ConfigurationError(ParkingAllocationError):
    """Required configuration is missing or invalid."""
    pass


class ServiceRequestError(ParkingAllocationError):
    """Transport level failure talking to a collaborator service."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


class LeasingServiceError(ParkingAllocationError):
    """Leasing service lookup failed (legacy paths that raise)."""
    pass
