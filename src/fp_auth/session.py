"""Session Store — injectable holder of the current identity and balance.

Only AuthService writes to it (via `_replace`); everyone else reads
`current` or subscribes. Listeners are called synchronously, in
subscription order, after every transition.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from decimal import Decimal

from src.fp_common.enums import SessionState

logger = logging.getLogger(__name__)

SessionListener = Callable[["Session"], None]


@dataclass(frozen=True)
class Session:
    address: str | None = None
    state: SessionState = SessionState.SIGNED_OUT
    balance: Decimal = Decimal("0")

    @property
    def authenticated(self) -> bool:
        return self.state == SessionState.SIGNED_IN and self.address is not None


class SessionStore:
    def __init__(self) -> None:
        self._session = Session()
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, **changes: object) -> Session:
        self._session = replace(self._session, **changes)
        self._publish()
        return self._session

    def _reset(self) -> Session:
        self._session = Session()
        self._publish()
        return self._session

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._session)
            except Exception:
                # listener errors are logged, never propagated to the writer
                logger.exception("Session listener %r failed", listener)
