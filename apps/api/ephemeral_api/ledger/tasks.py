"""Background loops for block production and black box retention."""

import asyncio
import logging

from ephemeral_api.ledger.service import EphemeralLedger

logger = logging.getLogger(__name__)


async def run_block_producer(ledger: EphemeralLedger, poll_interval: float) -> None:
    """Process due transactions until cancelled."""
    logger.info("Block producer started")
    while True:
        try:
            ledger.produce_due_blocks()
        except Exception as e:
            logger.error(f"Block production failed: {e}", exc_info=True)
        await asyncio.sleep(poll_interval)


async def run_retention_sweeper(ledger: EphemeralLedger, interval: float) -> None:
    """Purge expired black box entries on a fixed interval until cancelled."""
    logger.info("Retention sweeper started")
    while True:
        await asyncio.sleep(interval)
        ledger.sweeper.sweep_expired()


async def stop_tasks(tasks: list[asyncio.Task]) -> None:
    """Cancel background loops and wait for them to exit."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
