"""Storage Adapter — one async SQLAlchemy core, two interchangeable backends.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to StorageError (core/errors.py)
    - Unknown, consumed, or expired pending tokens resolve to None, never raise
    - promote_pending claims the pending row (DELETE ... RETURNING) and inserts the
      message in ONE transaction: either both happen or neither does
    - Timestamps leave this module as canonical UTC text only

Design Decisions:
    - SqlStorage holds all queries; SqliteStorage / PostgresStorage only choose
      engine options and how datetimes are bound (ADR: single interface, no
      runtime backend branching in business logic)
    - Backend chosen once by create_storage() from the URL scheme
    - Claim-then-insert instead of read-then-delete: a concurrent confirmation for
      the same token either blocks on the row/database lock or sees zero rows
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from sqlalchemy import delete, event, insert, select, text, true
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from wall.core.domain_types import (
    Message, MessageId, PendingMessage, PendingToken,
)
from wall.core.errors import StorageError
from wall.core.timestamps import to_canonical, utc_now
from wall.db.base import Base
from wall.models.message import MessageRow
from wall.models.pending_message import PendingMessageRow

logger = logging.getLogger(__name__)

# Bulk DML only; no ORM identity map to keep in sync
_NO_SYNC = {"synchronize_session": False}


class SqlStorage:
    """Shared query layer. Subclasses provide _create_engine and _bind_time."""

    backend_name = "sql"

    def __init__(self, database_url: str, pending_ttl_seconds: int = 0, **engine_kwargs):
        self.database_url = database_url
        self.pending_ttl_seconds = pending_ttl_seconds
        self.engine: AsyncEngine = self._create_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    def _create_engine(self, database_url: str, **engine_kwargs) -> AsyncEngine:
        raise NotImplementedError

    def _bind_time(self, value: datetime) -> datetime:
        """Convert an aware UTC datetime into what the backend column expects."""
        return value

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"backend": self.backend_name})
            raise StorageError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}", extra={"backend": self.backend_name})
            raise StorageError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}", extra={"backend": self.backend_name})
            raise StorageError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra={"backend": self.backend_name})
            raise StorageError("Database operation failed", "unknown")
        finally:
            await session.close()

    # ─── Lifecycle ──────────────────────────────────────────────

    async def create_schema(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Schema creation failed: {e}", extra={"backend": self.backend_name})
            raise StorageError("Schema creation failed", "create_schema")
        logger.info("Schema created or already exists", extra={"backend": self.backend_name})

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()

    # ─── Pending messages ───────────────────────────────────────

    def _fresh_pending(self):
        """WHERE clause excluding expired pending rows (always true when TTL is off)."""
        if self.pending_ttl_seconds <= 0:
            return true()
        cutoff = utc_now() - timedelta(seconds=self.pending_ttl_seconds)
        return PendingMessageRow.created_at >= self._bind_time(cutoff)

    async def insert_pending(
        self, token: PendingToken, body: str, author: str,
    ) -> None:
        async with self.session() as db:
            await db.execute(
                insert(PendingMessageRow).values(
                    token=token, body=body, author=author,
                ),
            )
            await db.commit()

    async def get_pending(self, token: PendingToken) -> PendingMessage | None:
        async with self.session() as db:
            result = await db.execute(
                select(PendingMessageRow.body, PendingMessageRow.author)
                .where(PendingMessageRow.token == token)
                .where(self._fresh_pending()),
            )
            row = result.one_or_none()
        if row is None:
            return None
        return PendingMessage(token=token, body=row.body, author=row.author)

    async def delete_pending(self, token: PendingToken) -> bool:
        async with self.session() as db:
            result = await db.execute(
                delete(PendingMessageRow).where(PendingMessageRow.token == token),
                execution_options=_NO_SYNC,
            )
            await db.commit()
        return result.rowcount > 0

    async def purge_expired_pending(self, older_than: datetime) -> int:
        async with self.session() as db:
            result = await db.execute(
                delete(PendingMessageRow)
                .where(PendingMessageRow.created_at < self._bind_time(older_than)),
                execution_options=_NO_SYNC,
            )
            await db.commit()
        return result.rowcount

    # ─── Committed messages ─────────────────────────────────────

    async def insert_message(
        self, body: str, author: str, payer: str | None,
    ) -> MessageId:
        async with self.session() as db:
            result = await db.execute(
                insert(MessageRow)
                .values(body=body, author=author, payer=payer)
                .returning(MessageRow.id),
            )
            message_id = result.scalar_one()
            await db.commit()
        return MessageId(message_id)

    async def list_messages(self) -> list[Message]:
        async with self.session() as db:
            result = await db.execute(
                select(MessageRow).order_by(
                    MessageRow.timestamp.desc(), MessageRow.id.desc(),
                ),
            )
            rows = result.scalars().all()
        return [self._to_message(r) for r in rows]

    async def delete_message(self, message_id: MessageId) -> bool:
        async with self.session() as db:
            result = await db.execute(
                delete(MessageRow).where(MessageRow.id == message_id),
                execution_options=_NO_SYNC,
            )
            await db.commit()
        return result.rowcount > 0

    async def promote_pending(
        self, token: PendingToken, payer: str,
    ) -> Message | None:
        async with self.session() as db:
            claimed = (await db.execute(
                delete(PendingMessageRow)
                .where(PendingMessageRow.token == token)
                .where(self._fresh_pending())
                .returning(PendingMessageRow.body, PendingMessageRow.author),
                execution_options=_NO_SYNC,
            )).one_or_none()
            if claimed is None:
                await db.rollback()
                return None
            inserted = (await db.execute(
                insert(MessageRow)
                .values(body=claimed.body, author=claimed.author, payer=payer)
                .returning(MessageRow.id, MessageRow.timestamp),
            )).one()
            await db.commit()
        return Message(
            id=MessageId(inserted.id),
            body=claimed.body,
            author=claimed.author,
            payer=payer,
            timestamp=to_canonical(inserted.timestamp),
        )

    @staticmethod
    def _to_message(row: MessageRow) -> Message:
        return Message(
            id=MessageId(row.id),
            body=row.body,
            author=row.author,
            payer=row.payer,
            timestamp=to_canonical(row.timestamp),
        )


class SqliteStorage(SqlStorage):
    """Embedded single-file backend (aiosqlite)."""

    backend_name = "sqlite"

    def _create_engine(self, database_url: str, busy_timeout: float = 30.0, **_) -> AsyncEngine:
        engine = create_async_engine(
            database_url, connect_args={"timeout": busy_timeout},
        )
        in_memory = make_url(database_url).database in (None, "", ":memory:")

        @event.listens_for(engine.sync_engine, "connect")
        def _set_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout * 1000)}")
            cursor.close()

        return engine

    def _bind_time(self, value: datetime) -> datetime:
        # SQLite stores CURRENT_TIMESTAMP as naive UTC text
        return value.astimezone(timezone.utc).replace(tzinfo=None)


class PostgresStorage(SqlStorage):
    """Networked relational backend (asyncpg)."""

    backend_name = "postgresql"

    def _create_engine(
        self, database_url: str, pool_size: int = 10, max_overflow: int = 5, **_,
    ) -> AsyncEngine:
        return create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )


def create_storage(database_url: str, **kwargs) -> SqlStorage:
    """Pick the backend from the URL scheme. Called once at startup."""
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        storage: SqlStorage = SqliteStorage(database_url, **kwargs)
    elif backend == "postgresql":
        storage = PostgresStorage(database_url, **kwargs)
    else:
        raise ValueError(f"Unsupported storage backend: {backend}")
    logger.info(f"Storage backend selected: {storage.backend_name}", extra={"backend": storage.backend_name})
    return storage
