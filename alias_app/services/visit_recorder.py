"""
Visit counting for resolved aliases.

Increments run on their own database sessions, never on the request's,
so a background increment cannot outlive or interfere with the request
that triggered it. Failures are logged and never reach the redirect.
"""

import asyncio
import logging
from typing import Set

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from alias_app.database.connection import SessionLocal
from alias_app.repositories.alias_repository import AliasRepository

logger = logging.getLogger(__name__)


class VisitRecorder:
    """
    Records alias visits either inline or as detached asyncio tasks.

    Pending tasks are held in a set: the event loop only keeps weak
    references to tasks.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory
        self._pending: Set[asyncio.Task] = set()

    def record(self, alias: str) -> bool:
        """
        Increment the visit counter now.

        Returns:
            True if a row was updated, False on a missing alias or a store error
        """
        db = self.session_factory()
        try:
            updated = AliasRepository(db).increment_visits(alias)
            if not updated:
                logger.warning(f"Visit for unknown alias '{alias}' not counted")
            return bool(updated)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to increment visits for '{alias}': {e}")
            return False
        finally:
            db.close()

    def dispatch(self, alias: str) -> asyncio.Task:
        """Schedule an increment without waiting for it (fire-and-forget)."""
        task = asyncio.get_running_loop().create_task(self._record_async(alias))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def _record_async(self, alias: str) -> bool:
        # Blocking database round-trip, kept off the event loop
        return await run_in_threadpool(self.record, alias)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Background visit increment failed", exc_info=error)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every dispatched increment (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
