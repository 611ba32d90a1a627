"""
QuickNotes Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from the DeclarativeBase in quicknotes.database; Alembic reads
       this for migrations.
Who:   Used by NoteService for CRUD operations.

Table Design:
    - Integer autoincrement primary key, assigned by the store on insert
    - title: VARCHAR(255), required
    - content: TEXT, nullable (a note may be just a title)
    - favorite: BOOLEAN NOT NULL DEFAULT false
    - created_at: set once at insert, drives the list ordering

    Index on created_at:
        The list procedure always orders by created_at ascending.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from quicknotes.database import Base

TITLE_MAX_LENGTH = 255


class Note(Base):
    """
    A short text note.

    Lifecycle:
        1. Inserted by the create procedure (favorite = false)
        2. Patched by the update procedure (title / content / favorite only)
        3. Removed by the delete procedure (no soft-delete)

    id and created_at are never written after insert.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    content: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # Python-side default keeps sub-second ordering on databases whose
    # CURRENT_TIMESTAMP only has second resolution
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"favorite={self.favorite}, created_at='{self.created_at}')>"
        )
