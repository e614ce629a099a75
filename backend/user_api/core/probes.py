"""
Health probe functions for dependency checks.

Each probe function:
- Returns bool (True = healthy, False = unhealthy)
- Never raises
- Includes a timeout so readiness checks cannot hang
"""

import asyncio
import logging

from user_api.services.interfaces.document_store import IDocumentStore

logger = logging.getLogger(__name__)


async def check_database(
    store: IDocumentStore,
    timeout_seconds: float = 2.0
) -> bool:
    """
    Check document store connectivity.

    Args:
        store: Store to ping
        timeout_seconds: Maximum time to wait for response (default: 2.0)

    Returns:
        True if the store answered within the timeout, False otherwise
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            return await store.ping()

    except asyncio.TimeoutError:
        logger.warning(f"Database probe timed out after {timeout_seconds}s")
        return False
    except Exception as exc:
        # Probes report, they do not fail the readiness endpoint
        logger.warning(f"Database probe failed: {exc}")
        return False
