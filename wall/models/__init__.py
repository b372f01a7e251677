"""ORM Models — SQLAlchemy declarative models for pending and committed messages.

Invariants:
    - All models inherit from Base (db/base.py)
    - No foreign key between the two tables: the pending token is the only bridge

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
"""

from wall.models.pending_message import PendingMessageRow  # noqa: F401
from wall.models.message import MessageRow  # noqa: F401
