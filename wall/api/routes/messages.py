"""Message Routes — JSON read path and administrative removal.

Invariants:
    - DELETE checks X-Admin-Token before revealing anything about the id
    - 204 removed, 401 bad credential, 404 unknown id
"""

from fastapi import APIRouter, Depends, Header, Response, status

from wall.api.dependencies import get_repository
from wall.core.domain_types import MessageId, RemovalOutcome
from wall.core.errors import AuthorizationError, MessageNotFoundError
from wall.schemas.message import MessageListResponse, MessageResponse
from wall.services.message_repository import MessageRepository

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("", response_model=MessageListResponse)
async def list_messages(
    repository: MessageRepository = Depends(get_repository),
):
    """List committed messages, newest first."""
    messages = await repository.list()
    return MessageListResponse(
        messages=[MessageResponse.from_domain(m) for m in messages],
        count=len(messages),
    )


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_message(
    message_id: int,
    x_admin_token: str | None = Header(None),
    repository: MessageRepository = Depends(get_repository),
):
    outcome = await repository.remove(MessageId(message_id), x_admin_token)
    if outcome is RemovalOutcome.UNAUTHORIZED:
        raise AuthorizationError()
    if outcome is RemovalOutcome.NOT_FOUND:
        raise MessageNotFoundError(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
