"""Runtime field kind representation used by the encoder and decoder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, dataclass_transform


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class TypeDef:
    """Base for field kinds."""

    tag: ClassVar[str]

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Make subclass a frozen dataclass and derive its tag."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower().removesuffix("type")


class BoolType(TypeDef, tag="bool"):
    """Boolean kind. Empty when False."""


class IntType(TypeDef, tag="int"):
    """Integer kind. Empty when 0."""


class FloatType(TypeDef, tag="float"):
    """Floating point kind. Empty when 0.0."""


class StrType(TypeDef, tag="str"):
    """String kind. Empty when ''."""


class NoneType(TypeDef, tag="none"):
    """None/null kind."""


class AnyType(TypeDef, tag="any"):
    """Polymorphic value, encoded with the ordinary value codec."""


class ListType(TypeDef, tag="list"):
    """Ordered sequence: list[int] → ListType(element=IntType())."""

    element: TypeDef


class DictType(TypeDef, tag="dict"):
    """Keyed mapping: dict[str, int] → DictType(value=IntType()).

    Keys are always strings in the wire format.
    """

    value: TypeDef


class StructType(TypeDef, tag="struct"):
    """Nested struct with its own marshal/unmarshal methods."""

    cls: type[Any]


class CodecType(TypeDef, tag="codec"):
    """Scalar type with a registered codec (datetime, bytes, ...)."""

    cls: type[Any]


class OptionalType(TypeDef, tag="optional"):
    """Nullable kind: X | None → OptionalType(inner=X)."""

    inner: TypeDef


class UnsupportedType(TypeDef, tag="unsupported"):
    """Annotation with no encoding. Fails when a value of it is encoded."""

    name: str
