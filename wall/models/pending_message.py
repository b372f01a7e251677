"""Pending Message ORM — submitted but unpaid messages, keyed by single-use token.

Invariants:
    - token is the primary key (random, never reused)
    - body/author are already sanitized when inserted
    - created_at only drives expiry; it is never shown

Design Decisions:
    - server_default=func.now(): the backend clock stamps the row, not the caller
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from wall.db.base import Base


class PendingMessageRow(Base):
    __tablename__ = "pending_messages"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
