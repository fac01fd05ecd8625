"""Seed script to populate the database with the demo automations."""

import asyncio
import logging

from sqlalchemy import select

from automation_library.db import close_db, create_engine, create_session_maker, init_db
from automation_library.models import AutomationLink, AutomationReaction, AutomationRecord
from automation_library.services.demo_data import demo_automations
from automation_library.settings import settings

logger = logging.getLogger("seed")


async def seed_database():
    """Seed the database with sample data."""
    if not settings.database_configured:
        raise SystemExit("DATABASE_URL is not set. Nothing to seed.")

    engine = create_engine(settings.database_url, settings)
    await init_db(engine)
    session_maker = create_session_maker(engine)

    try:
        async with session_maker() as session, session.begin():
            # Check if already seeded
            existing = await session.execute(select(AutomationRecord.id).limit(1))
            if existing.scalar_one_or_none():
                logger.info("Database already seeded. Skipping.")
                return

            logger.info("Seeding database...")
            for automation in demo_automations():
                session.add(AutomationRecord(
                    id=automation.id,
                    title=automation.title,
                    description=automation.description,
                    student_name=automation.student_name,
                    submission_date=automation.submission_date,
                    tags=automation.tags,
                    images=automation.images,
                    setup_instructions=automation.setup_instructions,
                    installation_code=automation.installation_code,
                    links=[AutomationLink(title=l.title, url=l.url) for l in automation.links],
                    reactions=[
                        AutomationReaction(emoji=r.emoji, count=r.count)
                        for r in automation.reactions
                    ],
                ))
                logger.info(f"Created automation: {automation.title}")

        logger.info("Seeding complete!")
    finally:
        await close_db(engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    asyncio.run(seed_database())
