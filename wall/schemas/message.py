"""Message Schemas — public-facing representation of committed messages.

Invariants:
    - body/author are returned exactly as stored (already escaped at submission)
    - timestamp is canonical UTC text, never a backend-native type
"""

from pydantic import BaseModel

from wall.core.domain_types import Message


class MessageResponse(BaseModel):
    id: int
    body: str
    author: str
    payer: str | None
    timestamp: str

    @classmethod
    def from_domain(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            body=message.body,
            author=message.author,
            payer=message.payer,
            timestamp=message.timestamp,
        )


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]
    count: int
