"""User stats, vote history and leaderboard endpoints.

GET /users/{address}/stats   — ledger UserStats snapshot (null if none)
GET /users/{address}/votes   — vote history, optional ?ponder_id=
GET /leaderboard             — ranked by ?metric=accuracy|totalWinnings|totalVotes
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.bootstrap import Container
from src.fp_api.dependencies import account_address, get_container, respond
from src.fp_common.enums import LeaderboardMetric
from src.fp_common.response import ApiResponse
from src.fp_market.application.schemas import LeaderboardEntryOut, UserStatsOut, VoteOut

router = APIRouter(tags=["community"])


@router.get("/users/{address}/stats")
async def get_user_stats(
    address: Annotated[str, Depends(account_address)],
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    stats = await container.reads.get_user_stats(address)
    return respond(request, UserStatsOut.from_domain(stats).model_dump() if stats else None)


@router.get("/users/{address}/votes")
async def get_user_votes(
    address: Annotated[str, Depends(account_address)],
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    ponder_id: int | None = Query(None, ge=0),
) -> ApiResponse:
    votes = await container.reads.get_user_votes(address, ponder_id)
    return respond(request, {"items": [VoteOut.from_domain(v).model_dump() for v in votes]})


@router.get("/leaderboard")
async def get_leaderboard(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    metric: LeaderboardMetric = Query(LeaderboardMetric.ACCURACY),
) -> ApiResponse:
    ranked = await container.reads.load_leaderboard(metric)
    items = [e.model_dump() for e in LeaderboardEntryOut.from_ranked(ranked)]
    return respond(request, {"metric": metric.value, "items": items})
