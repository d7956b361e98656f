"""InFlightGuard — one pending mutation per (user, ponder).

A second attempt on the same key is rejected immediately with
ConcurrentOperationError; nothing is queued. Creating a ponder has no ponder
id yet, so it uses its own per-user key.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from src.fp_common.datetime_utils import utc_now
from src.fp_common.enums import OperationKind
from src.fp_common.errors import ConcurrentOperationError
from src.fp_market.domain.models import PendingOperation

_CREATE_KEY = "create"


def _key(address: str, ponder_id: int | None) -> tuple[str, str]:
    return address, _CREATE_KEY if ponder_id is None else str(ponder_id)


class InFlightGuard:
    def __init__(self) -> None:
        self._pending: dict[tuple[str, str], PendingOperation] = {}

    @contextmanager
    def hold(
        self, kind: OperationKind, address: str, ponder_id: int | None
    ) -> Iterator[PendingOperation]:
        key = _key(address, ponder_id)
        current = self._pending.get(key)
        if current is not None:
            target = "ponder creation" if ponder_id is None else f"operation on ponder {ponder_id}"
            raise ConcurrentOperationError(target)
        op = PendingOperation(kind=kind, address=address, ponder_id=ponder_id, started_at=utc_now())
        self._pending[key] = op
        try:
            yield op
        finally:
            self._pending.pop(key, None)

    def get(self, address: str, ponder_id: int | None) -> PendingOperation | None:
        return self._pending.get(_key(address, ponder_id))

    def for_address(self, address: str) -> list[PendingOperation]:
        return [op for (owner, _), op in self._pending.items() if owner == address]
