"""Periodic deletion of finished rooms past their retention window."""
from datetime import timedelta
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import crud
from app.config import settings
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def cleanup_old_rooms(session_factory: async_sessionmaker[AsyncSession], retention_hours: int) -> int:
    """Delete finished rooms created more than retention_hours ago. Returns rooms removed."""
    cutoff = utcnow() - timedelta(hours=retention_hours)
    async with session_factory() as db:
        try:
            removed = await crud.delete_finished_rooms(db, cutoff)
        except Exception as e:
            logger.error(f"Room cleanup failed: {e}")
            await db.rollback()
            return 0
    logger.info(f"Cleaned up {removed} finished room(s) older than {retention_hours}h")
    return removed


class CleanupScheduler:
    """Owns the AsyncIOScheduler that runs the room cleanup job."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_hours: Optional[int] = None,
        retention_hours: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.interval_hours = interval_hours or settings.ROOM_CLEANUP_INTERVAL_HOURS
        self.retention_hours = retention_hours or settings.ROOM_RETENTION_HOURS
        self.scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    async def run_once(self) -> int:
        return await cleanup_old_rooms(self.session_factory, self.retention_hours)

    def start(self):
        if self.running:
            return
        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(hours=self.interval_hours),
            id="cleanup_old_rooms",
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(
            f"Room cleanup scheduled every {self.interval_hours}h (retention {self.retention_hours}h)"
        )

    def stop(self):
        if self.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Room cleanup scheduler stopped")
        self.scheduler = None
