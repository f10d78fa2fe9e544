"""Field descriptors and annotation reflection for struct classes."""

from __future__ import annotations

import types
from collections.abc import Mapping, Sequence
from dataclasses import MISSING, dataclass, field, fields
from functools import cache
from typing import (
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from specgraph.codecs import Marshaler, TypeCodecs
from specgraph.types import (
    AnyType,
    BoolType,
    CodecType,
    DictType,
    FloatType,
    IntType,
    ListType,
    NoneType,
    OptionalType,
    StrType,
    StructType,
    TypeDef,
    UnsupportedType,
)

# dataclasses.field metadata keys
_JSON_NAME = "json"
_OMIT_EMPTY = "omitempty"


def json_field(
    name: str,
    *,
    omit_empty: bool = False,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    """Declare a dataclass field that is serialized under ``name``.

    Fields declared without ``json_field`` are kept out of the encoded
    object. With ``omit_empty`` the field is left out when its value is
    ``None`` or empty for its kind.

    Example:
        class Info(Struct):
            title: str = json_field("title")
            description: str = json_field("description", omit_empty=True, default="")

    """
    metadata = {_JSON_NAME: name, _OMIT_EMPTY: omit_empty}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


@dataclass(frozen=True)
class FieldInfo:
    """Serialization descriptor for one struct field."""

    name: str
    json_name: str
    has_json_tag: bool
    omit_empty: bool
    type: TypeDef


@dataclass(frozen=True)
class TypeInfo:
    """Ordered field descriptors of a struct class."""

    cls: type[Any]
    fields: tuple[FieldInfo, ...]

    def by_json_name(self) -> dict[str, FieldInfo]:
        """Tagged fields keyed by their external name."""
        return {f.json_name: f for f in self.fields if f.has_json_tag}


def extract_type(py_type: Any) -> TypeDef:
    """Convert a Python type annotation to a field kind.

    Annotations with no encoding produce ``UnsupportedType`` rather than an
    error; the failure surfaces when a value of that field is encoded.
    """
    origin = get_origin(py_type)
    args = get_args(py_type)

    if py_type is Any or py_type is object:
        return AnyType()
    if py_type is bool:
        return BoolType()
    if py_type is int:
        return IntType()
    if py_type is float:
        return FloatType()
    if py_type is str:
        return StrType()
    if py_type is type(None) or py_type is None:
        return NoneType()

    if isinstance(py_type, types.UnionType) or origin is Union:
        options = [a for a in args if a is not type(None)]
        if len(options) == 1 and len(options) != len(args):
            return OptionalType(inner=extract_type(options[0]))
        return UnsupportedType(name=_type_name(py_type))

    if origin in (list, Sequence):
        return ListType(element=extract_type(args[0]) if args else AnyType())

    if origin in (dict, Mapping):
        if len(args) == 2 and args[0] is not str:
            return UnsupportedType(name=_type_name(py_type))
        return DictType(value=extract_type(args[1]) if args else AnyType())

    # Parameterized struct, e.g. RefOrValue[Schema]
    if isinstance(origin, type) and issubclass(origin, Marshaler):
        return StructType(origin)

    if origin is not None or not isinstance(py_type, type):
        return UnsupportedType(name=_type_name(py_type))

    if py_type is list:
        return ListType(element=AnyType())
    if py_type is dict:
        return DictType(value=AnyType())
    if issubclass(py_type, Marshaler):
        return StructType(py_type)
    if TypeCodecs.get(py_type) is not None:
        return CodecType(py_type)

    return UnsupportedType(name=_type_name(py_type))


def _type_name(py_type: Any) -> str:
    if isinstance(py_type, type):
        return py_type.__name__
    return str(py_type)


@cache
def type_info(cls: type[Any]) -> TypeInfo:
    """Get field descriptors for a struct class, in declaration order."""
    hints = get_type_hints(cls)
    infos = []
    for f in fields(cls):
        json_name = f.metadata.get(_JSON_NAME)
        infos.append(
            FieldInfo(
                name=f.name,
                json_name=json_name if json_name is not None else f.name,
                has_json_tag=json_name is not None,
                omit_empty=bool(f.metadata.get(_OMIT_EMPTY, False)),
                type=extract_type(hints[f.name]),
            ),
        )
    return TypeInfo(cls=cls, fields=tuple(infos))
