"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """Current snapshot of one game session (no move history is kept)"""

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board_rows: Mapped[list[str]] = mapped_column(JSON)
    active_player: Mapped[str]
    forced_continuation_from: Mapped[Optional[str]]
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    computer_player: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
