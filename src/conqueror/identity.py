"""Identity providers resolving the caller of an action."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from conqueror.domain.errors import InvalidPlayer


class StaticIdentity:
    """Always answers with the same identity; handy for scripts and tests."""

    def __init__(self, identity: str) -> None:
        self.identity = identity

    def current_caller(self) -> str:
        return self.identity


class RequestIdentity:
    """Identity bound to the current task through a context variable.

    The HTTP layer binds the ``X-Player`` header with :meth:`acting_as` for
    the duration of a request.
    """

    def __init__(self) -> None:
        self._caller: ContextVar[str | None] = ContextVar("conqueror_caller", default=None)

    def current_caller(self) -> str:
        caller = self._caller.get()
        if caller is None:
            raise InvalidPlayer("no caller identity bound to this request")
        return caller

    @contextmanager
    def acting_as(self, identity: str) -> Iterator[None]:
        token = self._caller.set(identity)
        try:
            yield
        finally:
            self._caller.reset(token)
