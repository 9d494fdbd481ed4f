"""Error types raised by schema construction and type conversion.

Every failure surfaces to the caller of the top-level entry point; there is
no partial-result mode and nothing is retried internally.
"""

from __future__ import annotations


class OnetypedError(Exception):
    """Base class for all onetyped errors."""


class ConstructionError(OnetypedError, ValueError):
    """A schema node was built from a structurally invalid combination.

    Raised at construction time, e.g. for a union with fewer than two
    members, never later during export.
    """


class UnsupportedTypeError(OnetypedError, TypeError):
    """The importer met a type shape that has no mapping rule."""

    def __init__(self, type_text: str, reason: str | None = None) -> None:
        self.type_text = type_text
        self.reason = reason
        msg = f"Unsupported type: {type_text}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class RecursionIntegrityError(OnetypedError, RuntimeError):
    """A back-reference could not be resolved to a completed node."""

    def __init__(self, names: tuple[str, ...]) -> None:
        self.names = names
        joined = ", ".join(repr(name) for name in names)
        msg = f"Unresolved back-reference(s): {joined}"
        super().__init__(msg)


class DeclarationSyntaxError(OnetypedError, ValueError):
    """Declaration source text could not be parsed."""


class TypeResolutionError(OnetypedError, LookupError):
    """A type name in a declaration could not be resolved."""
