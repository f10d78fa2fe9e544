"""Ref-or-value duality: a ``$ref`` pointer or an inline value."""

from __future__ import annotations

from collections.abc import Callable
from functools import cache
from typing import Any, Protocol, Self, get_args, get_origin, runtime_checkable

from specgraph.codecs import from_builtins, to_builtins
from specgraph.context import EncodeContext
from specgraph.errors import ContractViolation
from specgraph.nodes import Struct
from specgraph.typeinfo import extract_type
from specgraph.types import OptionalType, TypeDef

REF_KEY = "$ref"

# Path depth of a registry entry: # / components / <kind>.
# Values at or above it are written inline, deeper occurrences as pointers.
ROOT_OBJECT_DEPTH = 3


@runtime_checkable
class RefOrValueLike(Protocol):
    """Capability shared by every ref-or-value wrapper."""

    def get_ref(self) -> str: ...

    def is_ref(self) -> bool: ...

    def resolved(self) -> bool: ...

    def clear_ref(self) -> None: ...


def marshal_ref(ref: str, value: Any, ctx: EncodeContext) -> Any:
    """Encode a pointer or a value.

    An explicit pointer always wins. Otherwise, if ``value`` itself was
    promoted to a registry and we are below the registry depth, write the
    registry pointer instead of the value.
    """
    if ref:
        return {REF_KEY: ref}

    if (path := ctx.ref_path(value)) is not None and ctx.depth > ROOT_OBJECT_DEPTH:
        return {REF_KEY: path}

    return to_builtins(value, ctx)


def unmarshal_ref[T](data: Any, decode: Callable[[Any], T]) -> tuple[str, T | None]:
    """Decode a pointer or a value.

    A non-empty string under ``$ref`` makes the whole object a pointer and
    any sibling keys are ignored. Anything else is decoded as a value.

    Returns:
        ``(ref, None)`` for a pointer, ``("", value)`` otherwise

    """
    if isinstance(data, dict):
        ref = data.get(REF_KEY)
        if isinstance(ref, str) and ref:
            return ref, None
    return "", decode(data)


@cache
def _value_type(cls: type[RefOrValue[Any]]) -> TypeDef:
    """Payload kind of a ref-or-value class, from its generic base."""
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            if get_origin(base) is RefOrValue and (args := get_args(base)):
                return OptionalType(inner=extract_type(args[0]))
    msg = f"{cls.__name__} must subclass RefOrValue[T] with a concrete T"
    raise ContractViolation(msg)


class RefOrValue[T](Struct):
    """A pointer into a registry, an inline value, or both once resolved.

    Subclass with a concrete payload type to get decoding support:

        class SchemaRef(RefOrValue[Schema]):
            pass

    A loader that resolves a pointer keeps ``ref`` and fills ``value``.
    """

    ref: str = ""
    value: T | None = None

    def to_builtins(self, ctx: EncodeContext | None = None) -> Any:
        """Encode as ``{"$ref": ...}`` or as the inline value."""
        return marshal_ref(self.ref, self.value, ctx if ctx is not None else EncodeContext())

    @classmethod
    def from_builtins(cls, data: Any, path: tuple[str, ...] = ("#",)) -> Self:
        """Decode a pointer object or an inline value."""
        value_type = _value_type(cls)
        ref, value = unmarshal_ref(data, lambda d: from_builtins(d, value_type, path))
        return cls(ref=ref, value=value)

    def get_ref(self) -> str:
        """The pointer, or '' for a plain value."""
        return self.ref

    def is_ref(self) -> bool:
        """Whether this holds a pointer."""
        return bool(self.ref)

    def resolved(self) -> bool:
        """Whether a value is loaded, e.g. by resolving the pointer."""
        return self.value is not None

    def clear_ref(self) -> None:
        """Drop the loaded value, keeping only the pointer."""
        self.value = None


def is_external_ref(rov: RefOrValueLike) -> bool:
    """Whether the pointer names another document.

    ``#/components/schemas/Pet`` is local; ``other.yaml#/Pet`` and
    ``https://example.com/api.yaml`` are external.
    """
    ref = rov.get_ref()
    return bool(ref) and not ref.startswith("#")


def clear_resolved_external_ref(rov: RefOrValueLike) -> bool:
    """Revert a resolved external pointer to pointer-only form.

    Returns:
        True if the value was dropped

    """
    if rov.is_ref() and is_external_ref(rov) and rov.resolved():
        rov.clear_ref()
        return True
    return False
