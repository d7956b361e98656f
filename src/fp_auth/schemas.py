"""Pydantic response schema for the session endpoints.

Wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel

from src.fp_analytics.formatting import format_address
from src.fp_auth.session import Session
from src.fp_common.ufix import format_amount


class SessionOut(BaseModel):
    address: str | None
    address_display: str
    state: str
    authenticated: bool
    balance: str
    balance_display: str

    @classmethod
    def from_session(cls, s: Session) -> "SessionOut":
        return cls(
            address=s.address,
            address_display=format_address(s.address),
            state=s.state.value,
            authenticated=s.authenticated,
            balance=str(s.balance),
            balance_display=format_amount(s.balance),
        )
