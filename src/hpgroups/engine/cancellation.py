"""
Cooperative cancellation for long queries.

The engine checks the token between pipeline stages and aborts with
QueryCancelledError instead of returning a partial result.
"""

from __future__ import annotations

import threading
import time

from hpgroups.exceptions import QueryCancelledError


class CancellationToken:
    """Cancellation flag with an optional monotonic deadline.

    Examples:
        >>> token = CancellationToken.with_timeout(5.0)
        >>> engine.list_session_groups(snapshot, request, token=token)
    """

    def __init__(self, deadline: float | None = None) -> None:
        """Initialize the token.

        Args:
            deadline: time.monotonic() value after which the token counts as cancelled
        """
        self.deadline = deadline
        self._event = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self, stage: str) -> None:
        """Raise QueryCancelledError if the token is cancelled.

        Args:
            stage: Name of the stage about to run
        """
        if self.cancelled:
            raise QueryCancelledError(stage)
