"""Error types for encoding, decoding and reference compaction.

Two families are kept apart:

- ``SpecGraphError`` and its subclasses report bad data. They are raised
  for malformed input or values that cannot be encoded, and carry the
  JSON path of the failing node.
- ``ContractViolation`` reports a defect in the calling code or in a
  struct declaration (a ``None`` root, an unsupported field kind). It
  derives from ``TypeError`` and is never a ``SpecGraphError``, so a
  handler for bad data does not hide programming errors.
"""

from __future__ import annotations


def format_path(path: tuple[str, ...] | list[str]) -> str:
    """Format a path stack as a JSON pointer (``#/components/schemas``)."""
    if not path:
        return "#"
    return "/".join(path)


class SpecGraphError(Exception):
    """Base class for recoverable data errors."""


class EncodeError(SpecGraphError):
    """A value could not be encoded."""

    def __init__(self, message: str, path: tuple[str, ...] = ()) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{format_path(path)}: {message}")


class DecodeError(SpecGraphError, ValueError):
    """Source data does not match the declared shape."""

    def __init__(self, message: str, path: tuple[str, ...] = ()) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{format_path(path)}: {message}")


class PromotionCollisionError(SpecGraphError):
    """Two schemas from different origins were given the same pointer path."""

    def __init__(self, path: str, first: str, second: str) -> None:
        self.path = path
        self.first = first
        self.second = second
        super().__init__(
            f"Pointer path '{path}' claimed by both '{first}' and '{second}'",
        )


class ContractViolation(TypeError):
    """The caller broke a precondition. Indicates a bug, not bad data."""


class UnsupportedFieldError(ContractViolation):
    """A serialized field is declared with a kind that cannot be encoded."""

    def __init__(self, owner: str, json_name: str, kind: str) -> None:
        self.owner = owner
        self.json_name = json_name
        self.kind = kind
        super().__init__(
            f"Field '{json_name}' of {owner} has unsupported type {kind}",
        )
