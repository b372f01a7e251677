"""Message ORM — append-only ledger of paid, publicly visible messages.

Invariants:
    - id is an autoincrement integer (monotonic, used for ordering ties and deletion)
    - payer comes from the verified payment envelope, never from the form
    - Rows are never updated; deleted only by administrative action

Design Decisions:
    - timestamp index: the read path always orders by it
    - sqlite_autoincrement: ids of deleted rows are never handed out again
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from wall.db.base import Base


class MessageRow(Base):
    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    payer: Mapped[str | None] = mapped_column(String(128), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        server_default=func.now(), index=True,
    )
