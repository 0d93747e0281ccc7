"""Expired offer endpoint (called via Vercel cron)."""

import asyncio
import json

from parking_allocation.processes.scheduled import handle_expired_offers
from parking_allocation.services.service_client import close_service_clients
from parking_allocation.utils.logging import get_structured_logger, setup_logging

setup_logging()
logger = get_structured_logger(__name__)


async def _run() -> dict:
    try:
        return await handle_expired_offers()
    finally:
        await close_service_clients()


def handler(request):
    """Expire overdue offers and restart the offer round for their listings."""
    try:
        summary = asyncio.run(_run())
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"ok": "error" not in summary, **summary}),
        }

    except Exception as e:
        logger.error("Error handling expired offers", exc_info=True, error=str(e))
        return {
            "statusCode": 500,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"error": str(e)}),
        }
