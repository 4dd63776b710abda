import asyncio
import time
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dispute_resolution.config import settings
from dispute_resolution.ingestion.gmail_client import GmailMailbox, Mailbox
from dispute_resolution.ingestion.processor import ProcessingOutcome, process_message
from dispute_resolution.llm.client import TextGenerator
from dispute_resolution.services.case_store import CaseStore
from dispute_resolution.services.knowledge_service import KnowledgeSearch
from dispute_resolution.utils.logging import configure_logging, logger


async def poll_once(
    max_results: Optional[int] = None,
    *,
    mailbox: Optional[Mailbox] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    case_store: Optional[CaseStore] = None,
    generator: Optional[TextGenerator] = None,
    search: Optional[KnowledgeSearch] = None,
) -> dict[str, Optional[ProcessingOutcome]]:
    """
    One poll cycle: list unread messages and process them sequentially.

    A failing message is logged and left unread; the rest of the batch is
    still attempted. Returns {message_id: outcome}, None marking a failure.
    """
    if session_factory is None:
        from dispute_resolution.database import AsyncSessionLocal

        session_factory = AsyncSessionLocal

    max_results = max_results or settings.GMAIL_MAX_MESSAGES
    mailbox = mailbox or GmailMailbox()
    case_store = case_store or CaseStore()

    try:
        message_ids = mailbox.list_unread(max_results)
    except Exception:
        logger.exception("Gmail polling error while listing unread messages")
        return {}

    if not message_ids:
        logger.info("No unread Gmail messages to process")
        return {}

    logger.info(f"Found {len(message_ids)} unread Gmail messages")

    outcomes: dict[str, Optional[ProcessingOutcome]] = {}

    async with session_factory() as db:
        for message_id in message_ids:
            try:
                outcomes[message_id] = await process_message(
                    db,
                    mailbox,
                    message_id,
                    case_store=case_store,
                    generator=generator,
                    search=search,
                )
            except Exception:
                logger.exception(f"Failed to process Gmail message {message_id}; leaving unread")
                await db.rollback()
                outcomes[message_id] = None

    return outcomes


async def _poll_and_dispose(max_results: Optional[int], **kwargs) -> dict[str, Optional[ProcessingOutcome]]:
    from dispute_resolution.database import engine

    try:
        return await poll_once(max_results, **kwargs)
    finally:
        # pooled connections are bound to this cycle's event loop
        await engine.dispose()


def poll(max_results: Optional[int] = None, **kwargs) -> dict[str, Optional[ProcessingOutcome]]:
    """
    Run one poll cycle in its own event loop.
    """
    return asyncio.run(_poll_and_dispose(max_results, **kwargs))


def run_forever(
    cycle: Callable[[], object],
    interval_seconds: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: Optional[int] = None,
) -> int:
    """
    Fixed-rate scheduler. Ticks fall on start + k * interval; a tick whose
    slot passed while a cycle was still running is skipped, so cycles never
    overlap. Returns the number of cycles run.
    """
    next_tick = clock()
    cycles = 0

    while True:
        try:
            cycle()
        except Exception:
            logger.exception("Poll cycle failed")
        cycles += 1

        next_tick += interval_seconds
        now = clock()
        if now > next_tick:
            skipped = int((now - next_tick) // interval_seconds) + 1
            logger.warning(f"Poll cycle overran its interval, skipping {skipped} tick(s)")
            next_tick += skipped * interval_seconds

        if max_cycles is not None and cycles >= max_cycles:
            break
        sleep(next_tick - now)

    return cycles


def main():
    """
    Minimal CLI entrypoint:
    python -m dispute_resolution.ingestion.poller --max-results 5
    """
    import argparse

    from dispute_resolution.database import init_db

    parser = argparse.ArgumentParser(description="Poll Gmail and turn vendor disputes into resolution cases.")
    parser.add_argument(
        "--max-results",
        type=int,
        default=settings.GMAIL_MAX_MESSAGES,
        help=f"How many unread messages to fetch per cycle (default: {settings.GMAIL_MAX_MESSAGES})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.GMAIL_POLL_INTERVAL_SECONDS,
        help=f"Seconds between poll cycles (default: {settings.GMAIL_POLL_INTERVAL_SECONDS:g})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single poll cycle and exit",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(init_db())

    if args.once:
        poll(max_results=args.max_results)
        return

    mailbox = GmailMailbox()
    case_store = CaseStore()

    logger.info(
        f"Starting Gmail poller | Interval={args.interval:g}s | MaxMessages={args.max_results}"
    )
    run_forever(
        lambda: poll(max_results=args.max_results, mailbox=mailbox, case_store=case_store),
        args.interval,
    )


if __name__ == "__main__":
    main()
