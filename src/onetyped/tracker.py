"""Recursion and identity tracking for a single conversion.

A tracker is scoped to one top-level call and used as a context manager;
unrelated conversions never observe each other's in-progress markers.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from itertools import count
from typing import Generic, Self, TypeVar

from onetyped.errors import RecursionIntegrityError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass
class _Visit:
    """In-progress marker for one key."""

    name: str | None
    referenced: bool = False


@dataclass
class RecursionTracker(Generic[K]):
    """Track keys being converted and the back-references issued to them.

    Import side keys are checker-assigned type identities. Names come from
    the caller (an alias name) or are generated from ``prefix``.
    """

    prefix: str = "Ref"
    _active: dict[K, _Visit] = field(default_factory=dict, init=False, repr=False)
    _referenced: set[str] = field(default_factory=set, init=False, repr=False)
    _completed: set[str] = field(default_factory=set, init=False, repr=False)
    _counter: count[int] = field(
        default_factory=lambda: count(1),
        init=False,
        repr=False,
    )

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        try:
            if exc_type is None:
                self.verify()
        finally:
            self._active.clear()
            self._referenced.clear()
            self._completed.clear()

    def is_active(self, key: K) -> bool:
        """Check whether ``key`` is being converted by an enclosing frame."""
        return key in self._active

    def enter(self, key: K, name: str | None = None) -> None:
        """Mark ``key`` as in progress."""
        self._active[key] = _Visit(name)

    def back_reference(self, key: K) -> str:
        """Issue a back-reference to the in-progress ``key`` and return its name."""
        visit = self._active[key]
        if visit.name is None:
            visit.name = f"{self.prefix}{next(self._counter)}"
        visit.referenced = True
        self._referenced.add(visit.name)
        logger.debug("Back-reference to %r issued as %s", key, visit.name)
        return visit.name

    def leave(self, key: K) -> str | None:
        """Mark ``key`` completed.

        Returns:
            The name the completed node must carry as its identity, or None
            when nothing referenced it.

        """
        visit = self._active.pop(key)
        if not visit.referenced or visit.name is None:
            return None
        self._completed.add(visit.name)
        return visit.name

    def verify(self) -> None:
        """Check that every issued back-reference names a completed node.

        Raises:
            RecursionIntegrityError: If a referenced name never completed

        """
        dangling = self._referenced - self._completed
        if dangling:
            raise RecursionIntegrityError(tuple(sorted(dangling)))


@dataclass
class IdentityScope:
    """Names established by enclosing nodes while exporting.

    A reference may only name an identity that an ancestor established.
    """

    _established: list[str] = field(default_factory=list, init=False, repr=False)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self._established.clear()

    def push(self, name: str) -> None:
        """Establish ``name`` for the subtree being exported."""
        self._established.append(name)

    def pop(self) -> None:
        """Drop the innermost established name."""
        self._established.pop()

    def resolve(self, name: str) -> str:
        """Return ``name`` if an enclosing node established it.

        Raises:
            RecursionIntegrityError: If no enclosing node carries ``name``

        """
        if name not in self._established:
            raise RecursionIntegrityError((name,))
        return name
