from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.application.dtos.sponsor_offer_dto import (
    CreateSponsorOfferRequest,
    ListSponsorOffersResponse,
    SponsorOfferResponse,
    UpdateSponsorOfferRequest,
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
    prefix="/sponsor-offers",
    tags=["Sponsor Offers"],
    responses={
        403: {"description": "Forbidden - Operation not permitted for this principal"},
        404: {"description": "Not Found - Sponsor offer does not exist"},
        422: {"description": "Constraint Violation - Invalid field value"},
    },
)


@router.get("", response_model=ListSponsorOffersResponse, summary="List Sponsor Offers")
def list_sponsor_offers(
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
    profile_id: str | None = Query(None, description="Filter by sponsor profile"),
):
    offers = reads.list(principal, EntityKind.SPONSOR_OFFER, {"profile_id": profile_id})
    return ListSponsorOffersResponse(sponsor_offers=[SponsorOfferResponse.from_entity(o) for o in offers])


@router.post(
    "",
    response_model=SponsorOfferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Sponsor Offer",
    description="""
    Declare sponsorship capacity. The caller must be a sponsor and `profile_id`
    must be the caller's own principal id.
    """,
)
def create_sponsor_offer(
    body: CreateSponsorOfferRequest,
    principal: str | None = Depends(get_principal),
    creates: CreateEntityUseCase = Depends(get_create_use_case),
):
    fields = body.to_fields()
    return SponsorOfferResponse.from_entity(creates.execute(principal, EntityKind.SPONSOR_OFFER, fields))


@router.get("/{offer_id}", response_model=SponsorOfferResponse, summary="Get Sponsor Offer")
def get_sponsor_offer(
    offer_id: str,
    principal: str | None = Depends(get_principal),
    reads: ReadEntityUseCase = Depends(get_read_use_case),
):
    return SponsorOfferResponse.from_entity(reads.get(principal, EntityKind.SPONSOR_OFFER, offer_id))


@router.patch("/{offer_id}", response_model=SponsorOfferResponse, summary="Update Sponsor Offer")
def update_sponsor_offer(
    offer_id: str,
    body: UpdateSponsorOfferRequest,
    principal: str | None = Depends(get_principal),
    updates: UpdateEntityUseCase = Depends(get_update_use_case),
):
    """Owning sponsor only; `profile_id` cannot change."""
    patch = body.to_fields()
    return SponsorOfferResponse.from_entity(
        updates.execute(principal, EntityKind.SPONSOR_OFFER, offer_id, patch)
    )
