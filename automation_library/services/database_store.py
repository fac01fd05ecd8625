"""
Relational automation store (SQLAlchemy async).

Rows live in ``automations``; links and reactions are child tables that are
batch-loaded with ``selectinload`` and re-assembled into ``Automation``
objects. Every write runs in a single transaction.
"""

import logging
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from automation_library.models.automation import (
    AutomationLink,
    AutomationReaction,
    AutomationRecord,
)
from automation_library.schemas import Automation, Link, NewAutomationInput, Reaction
from automation_library.services.errors import AutomationStoreError, BackendUnavailable
from automation_library.services.store import AutomationStore, validate_emoji, validate_input

logger = logging.getLogger(__name__)


@asynccontextmanager
async def backend_errors(operation: str) -> AsyncGenerator[None, None]:
    """Re-raise connectivity failures as BackendUnavailable."""
    try:
        yield
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error(f"Automation store {operation} failed: {e}")
        raise BackendUnavailable(f"Database unavailable during {operation}") from e


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def record_to_automation(record: AutomationRecord) -> Automation:
    """Assemble an Automation from a row with links and reactions loaded."""
    return Automation(
        id=record.id,
        title=record.title,
        description=record.description,
        student_name=record.student_name,
        submission_date=_as_utc(record.submission_date),
        tags=list(record.tags or []),
        images=list(record.images or []),
        links=[Link(title=link.title, url=link.url) for link in record.links],
        setup_instructions=record.setup_instructions,
        installation_code=record.installation_code,
        reactions=[
            Reaction(emoji=reaction.emoji, count=reaction.count)
            for reaction in record.reactions
        ],
    )


def _with_children():
    return select(AutomationRecord).options(
        selectinload(AutomationRecord.links),
        selectinload(AutomationRecord.reactions),
    )


class DatabaseAutomationStore(AutomationStore):
    """Automation store backed by the relational database."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self.session_maker = session_maker
        self.engine = engine

    async def list_all(self) -> list[Automation]:
        async with backend_errors("list_all"), self.session_maker() as session:
            result = await session.execute(
                _with_children().order_by(
                    AutomationRecord.submission_date.desc(),
                    AutomationRecord.id.desc(),
                )
            )
            return [record_to_automation(r) for r in result.scalars()]

    async def get_by_id(self, automation_id: str) -> Automation | None:
        async with backend_errors("get_by_id"), self.session_maker() as session:
            result = await session.execute(
                _with_children().where(AutomationRecord.id == automation_id)
            )
            record = result.scalar_one_or_none()
            return record_to_automation(record) if record else None

    async def create(self, data: NewAutomationInput) -> Automation:
        validate_input(data)
        automation_id = str(uuid.uuid4())

        record = AutomationRecord(
            id=automation_id,
            title=data.title,
            description=data.description,
            student_name=data.student_name,
            submission_date=datetime.now(timezone.utc),
            tags=list(data.tags),
            images=list(data.images),
            setup_instructions=data.setup_instructions,
            installation_code=data.installation_code,
            links=[AutomationLink(title=link.title, url=link.url) for link in data.links],
        )

        async with backend_errors("create"), self.session_maker() as session:
            async with session.begin():
                session.add(record)

        logger.info(f"Created automation {automation_id}")
        created = await self.get_by_id(automation_id)
        if created is None:
            raise AutomationStoreError(f"Automation {automation_id} missing after insert")
        return created

    async def update(self, automation_id: str, data: NewAutomationInput) -> Automation | None:
        validate_input(data)

        async with backend_errors("update"), self.session_maker() as session:
            async with session.begin():
                record = await session.get(AutomationRecord, automation_id)
                if record is None:
                    return None

                record.title = data.title
                record.description = data.description
                record.student_name = data.student_name
                record.tags = list(data.tags)
                record.images = list(data.images)
                record.setup_instructions = data.setup_instructions
                record.installation_code = data.installation_code

                # Link set is replaced wholesale; same transaction as the row update
                await session.execute(
                    delete(AutomationLink).where(AutomationLink.automation_id == automation_id)
                )
                session.add_all([
                    AutomationLink(automation_id=automation_id, title=link.title, url=link.url)
                    for link in data.links
                ])

        logger.info(f"Updated automation {automation_id}")
        return await self.get_by_id(automation_id)

    async def add_reaction(self, automation_id: str, emoji: str) -> Automation | None:
        validate_emoji(emoji)

        async with backend_errors("add_reaction"), self.session_maker() as session:
            async with session.begin():
                exists = await session.scalar(
                    select(AutomationRecord.id).where(AutomationRecord.id == automation_id)
                )
                if exists is None:
                    return None
                await session.execute(
                    _increment_reaction(session.bind.dialect.name, automation_id, emoji)
                )

        return await self.get_by_id(automation_id)

    async def all_tags(self) -> list[str]:
        async with backend_errors("all_tags"), self.session_maker() as session:
            result = await session.execute(select(AutomationRecord.tags))
            tags: set[str] = set()
            for row_tags in result.scalars():
                tags.update(row_tags or [])
            return sorted(tags)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def _increment_reaction(dialect: str, automation_id: str, emoji: str):
    """Single-statement upsert: insert at 1 or bump the existing counter."""
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise AutomationStoreError(f"Reaction upsert not supported on {dialect}")

    stmt = insert(AutomationReaction).values(automation_id=automation_id, emoji=emoji, count=1)
    return stmt.on_conflict_do_update(
        index_elements=[AutomationReaction.automation_id, AutomationReaction.emoji],
        set_={"count": AutomationReaction.count + 1},
    )
