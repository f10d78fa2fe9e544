"""Ordinary value codec: builtins conversion and scalar codec registry.

This is the fallback used for every value that is neither a struct with its
own marshal methods nor a ref-or-value wrapper. Encoding produces JSON/YAML
compatible builtins (dict, list, str, int, float, bool, None). Decoding is
driven by the declared field kind.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, ClassVar, Protocol, Self, runtime_checkable

from specgraph.context import EncodeContext
from specgraph.errors import ContractViolation, DecodeError, EncodeError
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


@runtime_checkable
class Marshaler(Protocol):
    """Value with its own builtins conversion in both directions."""

    def to_builtins(self, ctx: EncodeContext) -> Any: ...

    @classmethod
    def from_builtins(cls, data: Any, path: tuple[str, ...] = ()) -> Self: ...


class TypeCodecs:
    """Registry of encode/decode functions for scalar types.

    Covers values without a native JSON representation (datetime, bytes,
    Decimal, ...). Encoded values are written as-is, without a type tag, so
    decoding only happens where a field declares the type.

    Usage:
        TypeCodecs.register(
            UUID,
            encode=str,
            decode=UUID,
        )
    """

    _registry: ClassVar[
        dict[type, tuple[Callable[[Any], Any], Callable[[Any], Any]]]
    ] = {}

    @classmethod
    def register[T](
        cls,
        typ: type[T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> None:
        """Register encode/decode functions for a type.

        Args:
            typ: The type to register (e.g., datetime, UUID)
            encode: Function to convert T → JSON-compatible builtins
            decode: Function to convert JSON-compatible builtins → T

        """
        cls._registry[typ] = (encode, decode)

    @classmethod
    def get[T](
        cls,
        typ: type[T],
    ) -> tuple[Callable[[T], Any], Callable[[Any], T]] | None:
        """Get codec for type, or None if not registered."""
        return cls._registry.get(typ)

    @classmethod
    def unregister(cls, typ: type) -> bool:
        """Unregister a type's codec.

        Returns:
            True if the type was registered and removed, False otherwise.

        """
        if typ in cls._registry:
            del cls._registry[typ]
            return True
        return False

    @classmethod
    def clear(cls) -> None:
        """Clear codec registry and re-register builtins."""
        cls._registry.clear()
        _register_builtins()


def _register_builtins() -> None:
    """Pre-register codecs for Python builtin types."""
    TypeCodecs.register(
        bytes,
        encode=lambda b: base64.b64encode(b).decode("ascii"),
        decode=base64.b64decode,
    )

    # YAML loaders produce date/datetime for unquoted timestamps
    TypeCodecs.register(
        datetime,
        encode=lambda dt: dt.isoformat(),
        decode=datetime.fromisoformat,
    )

    TypeCodecs.register(
        date,
        encode=lambda d: d.isoformat(),
        decode=date.fromisoformat,
    )

    TypeCodecs.register(
        time,
        encode=lambda t: t.isoformat(),
        decode=time.fromisoformat,
    )

    TypeCodecs.register(
        timedelta,
        encode=lambda td: td.total_seconds(),
        decode=lambda s: timedelta(seconds=s),
    )

    TypeCodecs.register(
        Decimal,
        encode=str,
        decode=Decimal,
    )

    TypeCodecs.register(
        set,
        encode=sorted,
        decode=set,
    )

    TypeCodecs.register(
        frozenset,
        encode=sorted,
        decode=frozenset,
    )

    TypeCodecs.register(
        tuple,
        encode=list,
        decode=tuple,
    )


# Register builtins on module load
_register_builtins()


def to_builtins(obj: Any, ctx: EncodeContext | None = None) -> Any:
    """Convert a value to JSON-compatible Python builtins.

    Args:
        obj: Any value reachable from a document
        ctx: Encoding context. A fresh one is created when omitted.

    Returns:
        JSON-compatible Python value (dict, list, str, int, float, bool, None)

    Raises:
        EncodeError: If the value has no builtins representation

    """
    if ctx is None:
        ctx = EncodeContext()

    # 1. Structs and ref-or-value wrappers encode themselves
    if isinstance(obj, Marshaler):
        return obj.to_builtins(ctx)

    # 2. Primitives pass through
    if obj is None or isinstance(obj, bool | int | float | str):
        return obj

    # 3. Registered codec
    if codec := TypeCodecs.get(type(obj)):
        encode, _ = codec
        return to_builtins(encode(obj), ctx)

    # 4. Mappings; keys are not path elements
    if isinstance(obj, Mapping):
        return {str(k): to_builtins(v, ctx) for k, v in obj.items()}

    # 5. Sequences
    if isinstance(obj, Sequence) and not isinstance(obj, bytes | bytearray):
        return [to_builtins(item, ctx) for item in obj]

    msg = f"Cannot encode value of type {type(obj).__name__}"
    raise EncodeError(msg, ctx.path)


def _expect(
    data: Any,
    kinds: tuple[type, ...],
    name: str,
    path: tuple[str, ...],
) -> None:
    # bool is an int subclass
    if not isinstance(data, kinds) or (isinstance(data, bool) and bool not in kinds):
        msg = f"Expected {name}, got {type(data).__name__}"
        raise DecodeError(msg, path)


def from_builtins(data: Any, typedef: TypeDef, path: tuple[str, ...] = ()) -> Any:
    """Decode builtins into a value of the declared kind.

    Args:
        data: Parsed JSON/YAML value
        typedef: Declared kind of the destination
        path: JSON path of ``data`` for error reporting

    Returns:
        Decoded value

    Raises:
        DecodeError: If ``data`` does not match ``typedef``
        ContractViolation: If ``typedef`` is an unsupported kind

    """
    match typedef:
        case OptionalType(inner=inner):
            if data is None:
                return None
            return from_builtins(data, inner, path)
        case AnyType():
            return data
        case NoneType():
            if data is not None:
                msg = f"Expected null, got {type(data).__name__}"
                raise DecodeError(msg, path)
            return None
        case BoolType():
            _expect(data, (bool,), "boolean", path)
            return data
        case IntType():
            _expect(data, (int,), "integer", path)
            return data
        case FloatType():
            _expect(data, (int, float), "number", path)
            return float(data)
        case StrType():
            _expect(data, (str,), "string", path)
            return data
        case ListType(element=element):
            _expect(data, (list,), "array", path)
            return [
                from_builtins(item, element, (*path, str(i)))
                for i, item in enumerate(data)
            ]
        case DictType(value=value):
            _expect(data, (dict,), "object", path)
            return {
                str(k): from_builtins(v, value, (*path, str(k)))
                for k, v in data.items()
            }
        case StructType(cls=cls):
            return cls.from_builtins(data, path)
        case CodecType(cls=cls):
            codec = TypeCodecs.get(cls)
            if codec is None:
                msg = f"No codec registered for {cls.__name__}"
                raise ContractViolation(msg)
            _, decode = codec
            try:
                return decode(data)
            except (TypeError, ValueError) as e:
                msg = f"Cannot decode {cls.__name__}: {e}"
                raise DecodeError(msg, path) from e
        case UnsupportedType(name=name):
            msg = f"Cannot decode into unsupported type {name}"
            raise ContractViolation(msg)
    msg = f"Unknown field kind {typedef!r}"
    raise ContractViolation(msg)
