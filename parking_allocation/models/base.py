"""Shared model configuration for leasing-service payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ServiceModel(BaseModel):
    """Base for models exchanged with collaborator services (camelCase on the wire)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        """Serialize for a request body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
