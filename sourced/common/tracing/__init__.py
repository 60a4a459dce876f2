"""Correlation IDs for container slot initialization.

Each slot provider runs inside a ``TracingContext`` named after the slot. Log
lines emitted while opening a connection or creating a directory then carry
the slot name and an ID such as ``database-3f2a9c01b7de``, so one
initialization can be told apart from the next. Nested initializations (a
store opening the database) get their own ID and the outer one is restored
on exit.
"""

import uuid
from contextvars import ContextVar, Token
from types import TracebackType

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_slot_var: ContextVar[str | None] = ContextVar("initializing_slot", default=None)


def generate_correlation_id(slot: str | None = None) -> str:
    """Generate a new correlation ID, prefixed with ``slot`` when given."""
    if slot is None:
        return str(uuid.uuid4())
    return f"{slot}-{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> str | None:
    """Get the correlation ID for the current context, or None."""
    return _correlation_id_var.get()


def get_current_slot() -> str | None:
    """Name of the slot being initialized in the current context, or None."""
    return _slot_var.get()


class TracingContext:
    """Scope a correlation ID, and optionally a slot name, to a block.

    Example:
        >>> with TracingContext("database") as corr_id:
        ...     logger.info("opening database")  # carries corr_id and slot
    """

    def __init__(self, slot: str | None = None, correlation_id: str | None = None) -> None:
        self.slot = slot
        self.correlation_id = correlation_id or generate_correlation_id(slot)
        self._tokens: tuple[Token[str | None], Token[str | None]] | None = None

    def __enter__(self) -> str:
        self._tokens = (
            _correlation_id_var.set(self.correlation_id),
            _slot_var.set(self.slot),
        )
        return self.correlation_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._tokens is None:
            return
        corr_token, slot_token = self._tokens
        _slot_var.reset(slot_token)
        _correlation_id_var.reset(corr_token)
        self._tokens = None


__all__ = [
    "TracingContext",
    "generate_correlation_id",
    "get_correlation_id",
    "get_current_slot",
]
