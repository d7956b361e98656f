"""Session REST endpoints.

GET  /session                  — current session snapshot
POST /session/sign-in          — run the wallet approval flow
POST /session/sign-out         — forget credentials (never fails)
POST /session/balance/refresh  — re-read the balance from the ledger
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.bootstrap import Container
from src.fp_api.dependencies import get_container, respond
from src.fp_auth.schemas import SessionOut
from src.fp_common.response import ApiResponse

router = APIRouter(prefix="/session", tags=["session"])


@router.get("")
async def get_session(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    return respond(request, SessionOut.from_session(container.auth.session).model_dump())


@router.post("/sign-in")
async def sign_in(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    session = await container.auth.sign_in()
    return respond(request, SessionOut.from_session(session).model_dump())


@router.post("/sign-out")
async def sign_out(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    session = await container.auth.sign_out()
    return respond(request, SessionOut.from_session(session).model_dump())


@router.post("/balance/refresh")
async def refresh_balance(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> ApiResponse:
    await container.auth.refresh_balance()
    return respond(request, SessionOut.from_session(container.auth.session).model_dump())
