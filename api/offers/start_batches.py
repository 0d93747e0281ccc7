"""Offer batch endpoint (called via Vercel cron)."""

import asyncio
import json

from parking_allocation.processes.scheduled import start_offer_batches
from parking_allocation.services.service_client import close_service_clients
from parking_allocation.utils.logging import get_structured_logger, setup_logging

setup_logging()
logger = get_structured_logger(__name__)


async def _run() -> dict:
    try:
        return await start_offer_batches()
    finally:
        await close_service_clients()


def handler(request):
    """
    Start offer batches for expired listings.

    Can be called manually or via Vercel cron job.
    """
    try:
        summary = asyncio.run(_run())
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"ok": "error" not in summary, **summary}),
        }

    except Exception as e:
        logger.error("Error starting offer batches", exc_info=True, error=str(e))
        return {
            "statusCode": 500,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"error": str(e)}),
        }
