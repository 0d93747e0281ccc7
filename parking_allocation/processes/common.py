"""Shared helpers for workflow processes."""

from datetime import datetime, timezone
from typing import Any, Optional

from parking_allocation.models.process import ProcessResult, make_process_error
from parking_allocation.services import communication
from parking_allocation.utils.dates import format_log_timestamp
from parking_allocation.utils.logging import StructuredLogger, mask_sensitive_data


class ProcessLog:
    """Human readable trail of one process run, mailed to staff on failure or completion."""

    def __init__(self, title: str, *lines: str):
        self.title = title
        self.lines: list[str] = [title, f"Time: {format_log_timestamp(datetime.now(timezone.utc))}"]
        self.lines.extend(lines)

    def add(self, line: str) -> None:
        self.lines.append(line)

    def text(self) -> str:
        return "\n".join(self.lines)

    async def notify(self, role: str, subject: str) -> bool:
        return await communication.send_notification_to_role(role, subject, self.text())


async def end_failing_process(
    process_log: ProcessLog,
    logger: StructuredLogger,
    error: str,
    http_status: int,
    details: str,
    exception: Optional[BaseException] = None,
    **context: Any,
) -> ProcessResult:
    """Log the failure, mail the process log to the dev role and build the failed envelope."""
    process_log.add(details)
    if exception is not None:
        process_log.add(str(exception))

    logger.debug("Process log", process_log=mask_sensitive_data(process_log.text()), **context)
    logger.error(
        details,
        error_tag=error,
        http_status=http_status,
        exc_info=exception is not None,
        **context
    )

    await process_log.notify("dev", f"{process_log.title} - {error}")

    return make_process_error(error, http_status, {"message": details})
