"""
Automation models: the submitted write-up plus its links and emoji reactions.

Column names follow the hosted Postgres layout the library was first deployed on
(``student_name``, ``submission_date``, ``automation_links``, ``reactions``).
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from automation_library.db import Base

# Native text[] on Postgres, JSON everywhere else (SQLite in tests)
StringList = JSON().with_variant(ARRAY(String), "postgresql")


class AutomationRecord(Base):
    """A student's automation write-up."""

    __tablename__ = "automations"
    __table_args__ = (
        Index("ix_automations_submission_date", "submission_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    student_name: Mapped[str] = mapped_column(Text, nullable=False)
    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    tags: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)
    images: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)

    # Markdown, rendered by the view layer
    setup_instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    installation_code: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships (ordered by insertion)
    links = relationship(
        "AutomationLink",
        back_populates="automation",
        cascade="all, delete-orphan",
        order_by="AutomationLink.id",
    )
    reactions = relationship(
        "AutomationReaction",
        back_populates="automation",
        cascade="all, delete-orphan",
        order_by="AutomationReaction.id",
    )

    def __repr__(self) -> str:
        return f"<AutomationRecord(id={self.id}, title='{self.title[:30]}')>"


class AutomationLink(Base):
    """A titled URL attached to an automation."""

    __tablename__ = "automation_links"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    automation_id: Mapped[str] = mapped_column(
        ForeignKey("automations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    automation = relationship("AutomationRecord", back_populates="links")

    def __repr__(self) -> str:
        return f"<AutomationLink {self.title} on automation {self.automation_id}>"


class AutomationReaction(Base):
    """Emoji reaction counter on an automation."""

    __tablename__ = "reactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    automation_id: Mapped[str] = mapped_column(
        ForeignKey("automations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Emoji - stored as unicode character(s)
    emoji: Mapped[str] = mapped_column(Text, nullable=False)
    count: Mapped[int] = mapped_column(nullable=False, default=1)

    automation = relationship("AutomationRecord", back_populates="reactions")

    # One counter per emoji per automation; the upsert in add_reaction targets this
    __table_args__ = (
        UniqueConstraint("automation_id", "emoji", name="uq_reaction_automation_emoji"),
    )

    def __repr__(self) -> str:
        return f"<AutomationReaction {self.emoji} x{self.count} on automation {self.automation_id}>"
