"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PendingToken and MessageId are never interchangeable with plain str/int in signatures
    - PendingMessage and Message are frozen: nothing mutates a record after it is read
    - Message.timestamp is always canonical UTC text (see core/timestamps.py)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Frozen dataclasses over ORM objects: callers above the storage adapter never
      see SQLAlchemy state (ADR: adapter owns on-disk representation)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PendingToken = NewType("PendingToken", str)
MessageId = NewType("MessageId", int)


# ─── Limits ──────────────────────────────────────────────────────

MAX_BODY_LENGTH: int = 1024
MAX_AUTHOR_LENGTH: int = 100
DEFAULT_AUTHOR: str = "anon"
TOKEN_BYTES: int = 32   # 256 bits
MAX_TOKEN_LENGTH: int = 64   # pending_messages.token column width

_TOKEN_SHAPE = re.compile(r"[A-Za-z0-9_-]{1,%d}" % MAX_TOKEN_LENGTH)


def is_well_formed_token(token: object) -> bool:
    """True when token could have been issued by token_urlsafe (url-safe base64)."""
    return isinstance(token, str) and _TOKEN_SHAPE.fullmatch(token) is not None


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class PendingMessage:
    """Submitted but unpaid message, addressed by a single-use token."""
    token: PendingToken
    body: str
    author: str


@dataclass(frozen=True)
class Message:
    """Committed, publicly visible message."""
    id: MessageId
    body: str
    author: str
    payer: str | None
    timestamp: str


# ─── Enums ───────────────────────────────────────────────────────

class RemovalOutcome(str, Enum):
    """Result of an administrative delete."""
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
