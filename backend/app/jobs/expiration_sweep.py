"""Periodic expiration sweep.

Marks every pending/accepted document past its expiration date as expired. Safe to run
on any schedule and concurrently with lazy sweeps: each record's transition depends only
on its own expiration date and ``today``.

Run once:  python -m app.jobs.expiration_sweep
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app.document_lifecycle.lifecycle import changed_records, sweep_expired
from app.repositories.documents import DocumentRepository

logger = logging.getLogger("onboarding.sweep")


@dataclass
class SweepResult:
    run_date: date
    examined: int
    expired: int
    document_ids: list[int]


async def run_expiration_sweep(db: AsyncSession, today: date | None = None) -> SweepResult:
    today = today or date.today()
    documents = DocumentRepository(db)

    candidates = await documents.list_sweep_candidates(today)
    changed = changed_records(candidates, sweep_expired(candidates, today))
    if changed:
        await documents.save_statuses(changed)
        await db.commit()

    logger.info("Expiration sweep %s: %d examined, %d expired", today.isoformat(), len(candidates), len(changed))
    return SweepResult(
        run_date=today,
        examined=len(candidates),
        expired=len(changed),
        document_ids=[r.id for r in changed],
    )


async def main() -> None:
    from app.database import async_session_factory, engine

    async with async_session_factory() as session:
        await run_expiration_sweep(session)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-8s %(name)s - %(message)s")
    asyncio.run(main())
