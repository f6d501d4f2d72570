from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from campushub.api.dependencies import get_current_user, require_admin
from campushub.core.dependencies import get_event_service
from campushub.schemas.events import Event, EventCreate
from campushub.schemas.users import UserPublic
from campushub.services.events import EventService

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[Event])
async def list_events(
    _user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> list[Event]:
    return await events.list_events()


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    admin: UserPublic = Depends(require_admin),
    events: EventService = Depends(get_event_service),
) -> Event:
    return await events.create_event(admin, payload)


@router.get("/saved", response_model=list[Event])
async def list_saved_events(
    user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> list[Event]:
    return await events.list_saved(user)


@router.get("/category/{category}", response_model=list[Event])
async def list_events_by_category(
    category: str,
    _user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> list[Event]:
    return await events.list_by_category(category)


@router.get("/upcoming/{days}", response_model=list[Event])
async def list_upcoming_events(
    days: int = Path(ge=0, le=365),
    _user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> list[Event]:
    return await events.list_upcoming(days)


@router.get("/{event_id}", response_model=Event)
async def get_event(
    event_id: str,
    _user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> Event:
    return await events.get_event(event_id)


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    _admin: UserPublic = Depends(require_admin),
    events: EventService = Depends(get_event_service),
) -> dict[str, str]:
    await events.delete_event(event_id)
    return {"message": "Event deleted"}


@router.post("/{event_id}/register", response_model=Event)
async def register_for_event(
    event_id: str,
    user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> Event:
    return await events.register(event_id, user)


@router.post("/{event_id}/unregister", response_model=Event)
async def unregister_from_event(
    event_id: str,
    user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> Event:
    return await events.unregister(event_id, user)


@router.post("/{event_id}/save")
async def save_event(
    event_id: str,
    user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> dict[str, str]:
    await events.save_event(event_id, user)
    return {"message": "Event saved"}


@router.post("/{event_id}/unsave")
async def unsave_event(
    event_id: str,
    user: UserPublic = Depends(get_current_user),
    events: EventService = Depends(get_event_service),
) -> dict[str, str]:
    await events.unsave_event(event_id, user)
    return {"message": "Event unsaved"}
