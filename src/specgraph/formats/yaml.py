"""YAML format adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from specgraph.codecs import to_builtins

if TYPE_CHECKING:
    from specgraph.codecs import Marshaler
    from specgraph.context import EncodeContext


def to_yaml(
    obj: Any,
    *,
    sort_keys: bool = True,
    ctx: EncodeContext | None = None,
) -> str:
    """Serialize a struct (or any builtins-convertible value) to YAML.

    Args:
        obj: The object to serialize
        sort_keys: Sort mapping keys for stable output
        ctx: Encoding context, e.g. one holding promoted schema paths

    Returns:
        YAML string in block style

    """
    return yaml.safe_dump(
        to_builtins(obj, ctx),
        sort_keys=sort_keys,
        default_flow_style=False,
        allow_unicode=True,
    )


def from_yaml[T: Marshaler](s: str | bytes, cls: type[T]) -> T:
    """Deserialize a YAML string into an instance of ``cls``.

    Raises:
        yaml.YAMLError: If string is not valid YAML
        DecodeError: If the YAML does not match ``cls``

    """
    return cls.from_builtins(yaml.safe_load(s))
