"""Ponder REST endpoints.

GET  /ponders                     — active ponders, optional search + filter
GET  /ponders/{ponder_id}         — one ponder with derived analytics
POST /ponders                     — create (validate -> submit -> confirm)
POST /ponders/{ponder_id}/votes   — free (no amount) or staked vote
POST /ponders/{ponder_id}/withdraw — withdraw winnings from a resolved ponder
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.bootstrap import Container
from src.fp_api.dependencies import get_container, respond
from src.fp_common.datetime_utils import unix_now
from src.fp_common.enums import PonderFilter
from src.fp_common.response import ApiResponse
from src.fp_market.application.schemas import (
    CreatePonderOut,
    CreatePonderRequest,
    PlaceVoteRequest,
    PonderOut,
    VoteReceiptOut,
    WithdrawReceiptOut,
)

router = APIRouter(prefix="/ponders", tags=["ponders"])


@router.get("")
async def list_ponders(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    q: str | None = Query(None, description="Case-insensitive match on question or category"),
    filter: PonderFilter = Query(PonderFilter.ALL),
) -> ApiResponse:
    ponders = await container.reads.list_ponders(query=q, mode=filter)
    now = unix_now()
    items = [
        PonderOut.from_domain(p, now, container.orchestrator.pending(p.id)).model_dump()
        for p in ponders
    ]
    return respond(request, {"items": items})


@router.get("/{ponder_id}")
async def get_ponder(
    ponder_id: int,
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    ponder = await container.reads.get_ponder(ponder_id)
    pending = container.orchestrator.pending(ponder_id)
    return respond(request, PonderOut.from_domain(ponder, unix_now(), pending).model_dump())


@router.post("")
async def create_ponder(
    body: CreatePonderRequest,
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    receipt = await container.orchestrator.create_ponder(
        question=body.question,
        description=body.description,
        options=body.options,
        duration_hours=body.duration_hours,
        min_bet=body.min_bet,
        max_bet=body.max_bet,
        category=body.category,
    )
    return respond(request, CreatePonderOut.from_receipt(receipt).model_dump())


@router.post("/{ponder_id}/votes")
async def place_vote(
    ponder_id: int,
    body: PlaceVoteRequest,
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    receipt = await container.orchestrator.place_vote(ponder_id, body.option_index, body.amount)
    return respond(request, VoteReceiptOut.from_receipt(receipt, unix_now()).model_dump())


@router.post("/{ponder_id}/withdraw")
async def withdraw_winnings(
    ponder_id: int,
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    receipt = await container.orchestrator.withdraw_winnings(ponder_id)
    return respond(request, WithdrawReceiptOut.from_receipt(receipt).model_dump())
