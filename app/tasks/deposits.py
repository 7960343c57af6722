"""
Deposit reconciliation tasks
"""

import asyncio
import logging
from typing import Dict, Optional

from app.celery_app import celery
from app.db.session import async_session
from app.services.deposits import reconcile_pending_deposits as reconcile
from app.services.mpesa import DarajaGateway, get_payment_gateway

logger = logging.getLogger(__name__)


@celery.task(bind=True, acks_late=True)
def reconcile_pending_deposits(self, older_than_seconds: Optional[int] = None):
    """
    Settle STK push deposits whose callback never arrived.

    Args:
        older_than_seconds: Only look at deposits pending at least this long
    """
    try:
        result = asyncio.run(reconcile_pending_deposits_async(older_than_seconds=older_than_seconds))
        logger.info(f"Deposit reconciliation finished: {result}")
        return result
    except Exception as e:
        logger.error(f"Error reconciling pending deposits: {e}")
        raise


async def reconcile_pending_deposits_async(
    session_factory=None,
    gateway: Optional[DarajaGateway] = None,
    older_than_seconds: Optional[int] = None
) -> Dict[str, int]:
    """
    Async helper for deposit reconciliation.

    Args:
        session_factory: Session factory (defaults to the application's)
        gateway: Payment gateway (defaults to the configured one)
        older_than_seconds: Minimum age of a pending deposit

    Returns:
        Counts of completed, failed and still pending deposits
    """
    gateway = gateway or get_payment_gateway()
    if gateway is None:
        logger.info("M-Pesa not configured - nothing to reconcile")
        return {"completed": 0, "failed": 0, "pending": 0}

    session_factory = session_factory or async_session
    async with session_factory() as session:
        return await reconcile(session, gateway, older_than_seconds=older_than_seconds)
