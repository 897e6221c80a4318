"""
Lead store - the only code that touches the leads table.

Inserts are single-transaction appends, reads return the whole table newest first,
deletes remove at most one row by id. SQLite's single-writer lock serializes
concurrent inserts, so no locking happens here.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leaddesk.database import Base
from leaddesk.errors import StorageError
from leaddesk.models.lead import Lead
from leaddesk.schemas.leads import LeadSubmission

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "unknown"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision: 2026-01-31T09:15:02.123Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class LeadStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def init_schema(self) -> None:
        """Create the leads table if it does not exist. Safe to run on every start."""
        try:
            async with self._session_factory() as session:
                conn = await session.connection()
                await conn.run_sync(Base.metadata.create_all)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Table create failed: %s", str(e))
            raise StorageError("Database unavailable") from e
        logger.info("Table ready: leads")

    async def insert(self, submission: LeadSubmission) -> int:
        """Append one lead and return its new id."""
        lead = await self.create(submission)
        return lead.id

    async def create(self, submission: LeadSubmission) -> Lead:
        """Append one lead and return the stored row (id and createdAt filled in)."""
        lead = Lead(
            created_at=utc_timestamp(),
            name=submission.name,
            email=submission.email,
            phone=submission.phone or "",
            service=submission.service,
            message=submission.message,
            source=submission.source or DEFAULT_SOURCE,
        )
        async with self._session_factory() as session:
            try:
                session.add(lead)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Insert error: %s", str(e), extra={"source": lead.source})
                raise StorageError("Insert failed") from e

        logger.info("Lead stored", extra={"lead_id": lead.id, "source": lead.source})
        return lead

    async def list_all(self) -> list[Lead]:
        """Every lead, most recent first. Equal timestamps fall back to id order."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("DB read error: %s", str(e))
            raise StorageError("DB read failed") from e

    async def delete_by_id(self, lead_id: int) -> int:
        """Delete one lead. Returns 1 if it existed, 0 otherwise."""
        async with self._session_factory() as session:
            try:
                result = await session.execute(delete(Lead).where(Lead.id == lead_id))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("DB delete error: %s", str(e), extra={"lead_id": lead_id})
                raise StorageError("DB delete failed") from e

        deleted = result.rowcount or 0
        if deleted:
            logger.info("Lead deleted", extra={"lead_id": lead_id})
        return deleted

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database ping failed: %s", str(e))
            return False
