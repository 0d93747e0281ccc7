"""Uniform envelope returned by every workflow entry point."""

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from parking_allocation.models.base import ServiceModel


class ProcessStatus(str, Enum):
    """Outcome of a workflow invocation."""
    SUCCESSFUL = "successful"
    FAILED = "failed"
    IN_PROGRESS = "inProgress"


class ProcessResult(ServiceModel):
    """Result envelope serialized by the HTTP layer."""
    process_status: ProcessStatus
    http_status: int = Field(..., ge=100, le=599)
    error: Optional[str] = Field(None, description="Error tag when the process failed")
    data: Optional[Any] = None
    response: Optional[dict[str, Any]] = Field(None, description="Human readable payload, usually a message")

    @property
    def successful(self) -> bool:
        return self.process_status == ProcessStatus.SUCCESSFUL

    @property
    def message(self) -> Optional[str]:
        return (self.response or {}).get("message")


def make_process_error(error: str, http_status: int, response: Optional[dict] = None) -> ProcessResult:
    """Build a failed envelope."""
    return ProcessResult(
        process_status=ProcessStatus.FAILED,
        error=error,
        http_status=http_status,
        response=response,
    )


def make_process_success(http_status: int = 200, data: Any = None, message: Optional[str] = None) -> ProcessResult:
    """Build a successful envelope."""
    return ProcessResult(
        process_status=ProcessStatus.SUCCESSFUL,
        http_status=http_status,
        data=data,
        response={"message": message} if message else None,
    )
