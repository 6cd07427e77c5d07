"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBSession(Base):
    __tablename__ = "sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board: Mapped[str]
    turn: Mapped[str]
    seats: Mapped[dict[str, str]] = mapped_column(JSON)
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    reason: Mapped[Optional[str]]
    pending: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    last_move: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    spectators: Mapped[list[str]] = mapped_column(JSON, default=list)
    away: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    bots: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
