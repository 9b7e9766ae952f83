from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.application.dtos.sponsor_offer_dto import (
    CreateSponsorEventTypeRequest,
    ListSponsorEventTypesResponse,
    SponsorEventTypeResponse,
)
from src.application.use_cases.create_entity import CreateEntityUseCase
from src.application.use_cases.read_entity import ReadEntityUseCase
from src.domain.entities.entity_kind import EntityKind
from src.infrastructure.api.dependencies import get_create_use_case, get_principal, get_read_use_case

# Append-only: no update or delete routes.
router = APIRouter(
    prefix="/sponsor-event-types",
    tags=["Sponsor Event Types"],
    responses={
        403: {"description": "Forbidden - Operation not permitted for this principal"},
        404: {"description": "Not Found - Sponsor event type does not exist"},
    },
)


@router.get("", response_model=ListSponsorEventTypesResponse, summary="List Sponsor Event Types")
def list_sponsor_event_types(
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
    sponsor_offer_id: str | None = Query(None, description="Filter by sponsor offer"),
    event_type: str | None = Query(None, description="Filter by event type"),
):
    filters = {"sponsor_offer_id": sponsor_offer_id, "event_type": event_type}
    tags = reads.list(principal, EntityKind.SPONSOR_EVENT_TYPE, filters)
    return ListSponsorEventTypesResponse(
        sponsor_event_types=[SponsorEventTypeResponse.from_entity(t) for t in tags]
    )


@router.post(
    "",
    response_model=SponsorEventTypeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Tag Sponsor Offer With Event Type",
    description="""
    Declare an event type a sponsor offer applies to. The referenced offer
    must belong to the caller.
    """,
)
def create_sponsor_event_type(
    body: CreateSponsorEventTypeRequest,
    principal: str | None = Depends(get_principal),
    creates: CreateEntityUseCase = Depends(get_create_use_case),
):
    fields = body.to_fields()
    return SponsorEventTypeResponse.from_entity(
        creates.execute(principal, EntityKind.SPONSOR_EVENT_TYPE, fields)
    )


@router.get("/{tag_id}", response_model=SponsorEventTypeResponse, summary="Get Sponsor Event Type")
def get_sponsor_event_type(
    tag_id: str,
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
):
    return SponsorEventTypeResponse.from_entity(reads.get(principal, EntityKind.SPONSOR_EVENT_TYPE, tag_id))
