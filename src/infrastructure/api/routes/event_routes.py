from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.application.dtos.event_dto import (
    CreateEventRequest,
    EventResponse,
    ListEventsResponse,
    UpdateEventRequest,
)
from src.application.use_cases.create_entity import CreateEntityUseCase
from src.application.use_cases.read_entity import ReadEntityUseCase
from src.application.use_cases.update_entity import UpdateEntityUseCase
from src.domain.entities.entity_kind import EntityKind
from src.infrastructure.api.dependencies import (
    get_create_use_case,
    get_principal,
    get_read_use_case,
    get_update_use_case,
)

router = APIRouter(
    prefix="/events",
    tags=["Events"],
    responses={
        403: {"description": "Forbidden - Operation not permitted for this principal"},
        404: {"description": "Not Found - Event does not exist"},
        422: {"description": "Constraint Violation - Invalid field value"},
    },
)


@router.get(
    "",
    response_model=ListEventsResponse,
    summary="List Events",
    description="""
    Marketplace listing of sponsorship opportunities, newest first.

    **Access control**: any authenticated principal
    """,
)
def list_events(
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
    type: str | None = Query(None, description="Filter by event type"),
    city: str | None = Query(None, description="Filter by city"),
    organizer_id: str | None = Query(None, description="Filter by organizer"),
):
    filters = {"type": type, "city": city, "organizer_id": organizer_id}
    events = reads.list(principal, EntityKind.EVENT, filters)
    return ListEventsResponse(events=[EventResponse.from_entity(e) for e in events])


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    description="""
    Publish an event. The caller must be an organizer and `organizer_id` must be
    the caller's own principal id.
    """,
)
def create_event(
    body: CreateEventRequest,
    principal: str | None = Depends(get_principal),
    creates: CreateEntityUseCase = Depends(get_create_use_case),
):
    fields = body.to_fields()
    return EventResponse.from_entity(creates.execute(principal, EntityKind.EVENT, fields))


@router.get("/{event_id}", response_model=EventResponse, summary="Get Event")
def get_event(
    event_id: str,
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
):
    return EventResponse.from_entity(reads.get(principal, EntityKind.EVENT, event_id))


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update Event",
    description="""
    Partial update. **Access control**: the owning organizer only;
    `organizer_id` cannot change.
    """,
)
def update_event(
    event_id: str,
    body: UpdateEventRequest,
    principal: str | None = Depends(get_principal),
    updates: UpdateEntityUseCase = Depends(get_update_use_case),
):
    patch = body.to_fields()
    return EventResponse.from_entity(updates.execute(principal, EntityKind.EVENT, event_id, patch))
