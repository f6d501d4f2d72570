from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.api.dependencies import get_current_user
from campushub.core.dependencies import get_messaging_service
from campushub.schemas.messages import Message, MessageEdit, ReactionRequest
from campushub.schemas.users import UserPublic
from campushub.services.messaging import GroupMessagingService

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.patch("/{message_id}", response_model=Message)
async def edit_message(
    message_id: str,
    payload: MessageEdit,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.edit_message(message_id, user, payload.content)


@router.delete("/{message_id}")
async def delete_message(
    message_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> dict[str, str]:
    await messaging.delete_message(message_id, user)
    return {"message": "Message deleted successfully"}


@router.post("/{message_id}/like", response_model=Message)
async def like_message(
    message_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.like_message(message_id, user)


@router.post("/{message_id}/react", response_model=Message)
async def react_to_message(
    message_id: str,
    payload: ReactionRequest,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.react_message(message_id, user, payload.emoji)


@router.post("/{message_id}/pin", response_model=Message)
async def pin_message(
    message_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.pin_message(message_id, user)


@router.delete("/{message_id}/pin", response_model=Message)
async def unpin_message(
    message_id: str,
    user: UserPublic = Depends(get_current_user),
    messaging: GroupMessagingService = Depends(get_messaging_service),
) -> Message:
    return await messaging.unpin_message(message_id, user)
