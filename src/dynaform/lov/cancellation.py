"""
Cancellation tokens for LOV queries.

Every new query trigger cancels the previous token and creates a fresh
one; a result arriving for a cancelled token is discarded.
"""

from dynaform.errors import OperationCancelledError


class CancellationToken:
    """A one-way cancelled flag shared between a query and its issuer."""

    def __init__(self):
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelledError("LOV query was superseded")

    @classmethod
    def none(cls) -> "CancellationToken":
        """A token that is never cancelled."""
        return cls()
