"""Structured decoder: tagged struct fields plus extension maps."""

from __future__ import annotations

from typing import Any

from specgraph.codecs import from_builtins
from specgraph.errors import DecodeError
from specgraph.typeinfo import type_info


def unmarshal_strict_struct[T](
    cls: type[T],
    data: Any,
    path: tuple[str, ...] = ("#",),
) -> T:
    """Decode a JSON object into an instance of a struct class.

    Keys matching a tagged field are decoded by the field's declared kind.
    Other keys are kept in the struct's ``extensions`` map when it has one
    and dropped otherwise.

    Raises:
        DecodeError: If ``data`` is not an object or a field does not match

    """
    if not isinstance(data, dict):
        msg = f"Expected object for {cls.__name__}, got {type(data).__name__}"
        raise DecodeError(msg, path)

    info = type_info(cls)
    known = info.by_json_name()
    kwargs: dict[str, Any] = {}
    extensions: dict[str, Any] = {}
    for key, raw in data.items():
        field_info = known.get(key)
        if field_info is None:
            extensions[key] = raw
            continue
        kwargs[field_info.name] = from_builtins(raw, field_info.type, (*path, key))

    if extensions and any(f.name == "extensions" for f in info.fields):
        kwargs["extensions"] = extensions
    try:
        return cls(**kwargs)
    except TypeError as e:
        msg = f"Cannot build {cls.__name__}: {e}"
        raise DecodeError(msg, path) from e
