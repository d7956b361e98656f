from fastapi import Request

from src.bootstrap import Container
from src.fp_common.errors import ValidationError
from src.fp_common.response import ApiResponse, success_response
from src.fp_ledger.cadence import normalize_address


def get_container(request: Request) -> Container:
    return request.app.state.container


def account_address(address: str) -> str:
    """`{address}` path parameter as a normalized ledger address."""
    try:
        return normalize_address(address)
    except ValueError as exc:
        raise ValidationError("address", str(exc)) from exc


def respond(request: Request, data: object = None) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
