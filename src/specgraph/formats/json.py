"""JSON format adapter."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from specgraph.codecs import to_builtins

if TYPE_CHECKING:
    from specgraph.codecs import Marshaler
    from specgraph.context import EncodeContext


def to_json(
    obj: Any,
    *,
    indent: int | None = 2,
    sort_keys: bool = True,
    ctx: EncodeContext | None = None,
) -> str:
    """Serialize a struct (or any builtins-convertible value) to JSON.

    Args:
        obj: The object to serialize
        indent: JSON indentation level (default 2, None for compact)
        sort_keys: Sort object keys for stable output
        ctx: Encoding context, e.g. one holding promoted schema paths

    Returns:
        JSON string representation

    """
    return json.dumps(to_builtins(obj, ctx), indent=indent, sort_keys=sort_keys)


def from_json[T: Marshaler](s: str | bytes, cls: type[T]) -> T:
    """Deserialize a JSON string into an instance of ``cls``.

    Raises:
        json.JSONDecodeError: If string is not valid JSON
        DecodeError: If the JSON does not match ``cls``

    """
    return cls.from_builtins(json.loads(s))
