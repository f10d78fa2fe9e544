"""Structured encoder: tagged struct fields plus extension maps."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from specgraph.codecs import Marshaler, to_builtins
from specgraph.context import EncodeContext
from specgraph.errors import (
    ContractViolation,
    EncodeError,
    SpecGraphError,
    UnsupportedFieldError,
)
from specgraph.typeinfo import FieldInfo, type_info
from specgraph.types import (
    AnyType,
    BoolType,
    CodecType,
    DictType,
    FloatType,
    IntType,
    ListType,
    OptionalType,
    StrType,
    StructType,
    UnsupportedType,
)


def _is_empty(info: FieldInfo, value: Any, owner: str) -> bool:
    """Whether ``value`` counts as empty for the field's declared kind.

    A present optional is never empty: ``explode: bool | None = False``
    is written out.
    """
    match info.type:
        case OptionalType(inner=UnsupportedType(name=name)) | UnsupportedType(name=name):
            raise UnsupportedFieldError(owner, info.json_name, name)
        case OptionalType():
            return False
        case BoolType():
            return not value
        case IntType() | FloatType():
            return value == 0
        case StrType() | ListType() | DictType():
            return len(value) == 0
        case StructType() | AnyType() | CodecType():
            return False
    raise UnsupportedFieldError(owner, info.json_name, info.type.tag)


class ObjectEncoder:
    """Builds one serialized object.

    The result maps external field names to already-encoded builtins. Keys
    are overwritten on repeated writes; the last write wins.
    """

    def __init__(self, ctx: EncodeContext | None = None) -> None:
        self.ctx = ctx if ctx is not None else EncodeContext()
        self.result: dict[str, Any] = {}

    def encode_extension(self, key: str, value: Any) -> None:
        """Add one key/value pair to the object."""
        self.result[key] = to_builtins(value, self.ctx)

    def encode_extension_map(self, extensions: Mapping[str, Any] | None) -> None:
        """Add every pair of an extension map to the object."""
        if extensions is None:
            return
        for key, value in extensions.items():
            self.result[key] = to_builtins(value, self.ctx)

    def encode_struct_fields(self, value: Any) -> None:
        """Encode the tagged fields of a struct, in declaration order.

        Raises:
            ContractViolation: If ``value`` is None or not a struct
            UnsupportedFieldError: If a field has a kind with no encoding
            EncodeError: If a field value cannot be encoded

        """
        if value is None:
            msg = "Cannot encode fields of None"
            raise ContractViolation(msg)
        if not isinstance(value, Marshaler):
            msg = f"Value {type(value).__name__} is not a struct"
            raise ContractViolation(msg)

        owner = type(value).__name__
        for info in type_info(type(value)).fields:
            if not info.has_json_tag:
                continue

            field_value = getattr(value, info.name)
            if field_value is None:
                if not info.omit_empty:
                    self.result[info.json_name] = None
                continue

            # Custom serialization is never omitted by emptiness
            if not isinstance(field_value, Marshaler):
                empty = _is_empty(info, field_value, owner)
                if info.omit_empty and empty:
                    continue

            self._set_result_field(info, field_value)

    def _set_result_field(self, info: FieldInfo, value: Any) -> None:
        with self.ctx.enter(info.json_name):
            try:
                self.result[info.json_name] = to_builtins(value, self.ctx)
            except (ContractViolation, SpecGraphError):
                raise
            # Failures inside registered scalar codecs
            except (TypeError, ValueError) as e:
                msg = f"Cannot encode field '{info.json_name}': {e}"
                raise EncodeError(msg, self.ctx.path) from e

    def finish(self) -> dict[str, Any]:
        """Return the finished object."""
        return self.result


def marshal_strict_struct(value: Any, ctx: EncodeContext | None = None) -> dict[str, Any]:
    """Encode a struct's tagged fields and extensions into builtins.

    This ignores any ``to_builtins`` override on ``value`` itself and is the
    base that struct classes build on.

    Raises:
        ContractViolation: If ``value`` is None or not a struct

    """
    encoder = ObjectEncoder(ctx)
    encoder.encode_extension_map(getattr(value, "extensions", None))
    encoder.encode_struct_fields(value)
    return encoder.finish()
