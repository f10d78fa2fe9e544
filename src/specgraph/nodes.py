"""Core struct infrastructure for document nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self, dataclass_transform

from specgraph.context import EncodeContext
from specgraph.decoder import unmarshal_strict_struct
from specgraph.encoder import marshal_strict_struct


@dataclass_transform(kw_only_default=True)
class Struct:
    """Base for document nodes.

    Subclasses become keyword-only dataclasses. Fields declared with
    ``json_field`` are serialized; other fields are in-memory only.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Turn every subclass into a keyword-only dataclass."""
        super().__init_subclass__(**kwargs)
        dataclass(kw_only=True)(cls)

    def to_builtins(self, ctx: EncodeContext | None = None) -> Any:
        """Encode to JSON-compatible builtins."""
        return marshal_strict_struct(self, ctx)

    @classmethod
    def from_builtins(cls, data: Any, path: tuple[str, ...] = ("#",)) -> Self:
        """Decode from JSON-compatible builtins."""
        return unmarshal_strict_struct(cls, data, path)


class ExtensionProps(Struct):
    """Struct that carries passthrough keys unknown to its declared fields."""

    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Origin:
    """Where a node was loaded from, set by the loader for external fragments.

    Attributes:
        host: Host of the source document (empty for local files)
        path: Path of the source document
        fragment: JSON pointer of the node inside the source document
        id: Name the node had in its source registry

    """

    host: str = ""
    path: str = ""
    fragment: str = ""
    id: str = ""
