"""Service configuration loaded from environment variables."""

import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from parking_allocation.utils.errors import ConfigurationError


class ServiceConfig(BaseModel):
    """Collaborator endpoints and workflow tunables."""
    leasing_service_url: str = Field(..., description="Base URL of the leasing service")
    property_management_service_url: str = Field(..., description="Base URL of the property management service")
    communication_service_url: str = Field(..., description="Base URL of the communication service")
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    sibling_denial_concurrency: int = Field(default=5, ge=1)
    offer_answer_business_days: int = Field(default=2, ge=1)
    notification_role_address_template: str = Field(default="parking+{role}@example.org")

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build config from the environment, failing on missing service URLs."""
        urls = {
            "leasing_service_url": os.environ.get("LEASING_SERVICE_URL"),
            "property_management_service_url": os.environ.get("PROPERTY_MANAGEMENT_SERVICE_URL"),
            "communication_service_url": os.environ.get("COMMUNICATION_SERVICE_URL"),
        }
        missing = [key.upper() for key, value in urls.items() if not value]
        if missing:
            raise ConfigurationError(f"{', '.join(missing)} must be set")

        try:
            return cls(
                **{key: value.rstrip("/") for key, value in urls.items()},
                http_timeout_seconds=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "30")),
                sibling_denial_concurrency=int(os.environ.get("SIBLING_DENIAL_CONCURRENCY", "5")),
                offer_answer_business_days=int(os.environ.get("OFFER_ANSWER_BUSINESS_DAYS", "2")),
                notification_role_address_template=os.environ.get(
                    "NOTIFICATION_ROLE_ADDRESS_TEMPLATE", "parking+{role}@example.org"
                ),
            )
        except (ValueError, ValidationError) as e:
            raise ConfigurationError(f"Invalid service configuration: {e}") from e

    def service_url(self, service: str) -> str:
        """Base URL for a named collaborator service."""
        urls = {
            "leasing": self.leasing_service_url,
            "property-management": self.property_management_service_url,
            "communication": self.communication_service_url,
        }
        if service not in urls:
            raise ConfigurationError(f"Unknown service: {service}")
        return urls[service]


# Global config instance (singleton pattern)
_config: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    """Get or create the config singleton."""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next call re-reads the environment."""
    global _config
    _config = None
