"""Promotion of externally loaded schemas into the schema registry.

A document whose schemas were loaded from other files may contain the same
schema object at many places, and cycles through it. Before such a
document is written, every externally sourced schema found below the
registry depth is given a registry name and pointer path. During encoding
each nested occurrence is then written as ``{"$ref": path}`` while the
registry entry itself is written inline.

Names are derived from the schema's origin: the name it had in its
source document plus a fingerprint of the source location, so that
``Pet`` from ``a.yaml`` and ``Pet`` from ``b.yaml`` get different names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from specgraph.errors import PromotionCollisionError
from specgraph.nodes import Origin
from specgraph.openapi.schema import Schema, SchemaRef
from specgraph.refs import ROOT_OBJECT_DEPTH
from specgraph.walk import GraphWalker

logger = logging.getLogger(__name__)

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fingerprint(host: str, path: str) -> int:
    """64-bit FNV-1a hash of a source location."""
    h = _FNV64_OFFSET
    for byte in (host + path).encode():
        h ^= byte
        h = (h * _FNV64_PRIME) & _MASK64
    return h


def _describe(origin: Origin) -> str:
    return f"{origin.host}{origin.path}#{origin.fragment}"


@dataclass(frozen=True)
class Promotion:
    """A schema selected for the registry, with its generated name and path."""

    schema: Schema
    name: str
    path: str


class ComponentRefMap:
    """Promoted schemas keyed by object identity.

    The schemas themselves are left untouched; generated names live here.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, Promotion] = {}
        # pointer path / registry name -> origin that claimed it
        self._paths: dict[str, Origin] = {}
        self._names: dict[str, Origin] = {}

    def __contains__(self, node: object) -> bool:
        return id(node) in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Promotion]:
        return iter(self._by_id.values())

    def path_for(self, node: Any) -> str | None:
        """Pointer path of a promoted node, or None."""
        promotion = self._by_id.get(id(node))
        return promotion.path if promotion is not None else None

    def ref_paths(self) -> dict[int, str]:
        """Identity to pointer path table for an ``EncodeContext``."""
        return {key: p.path for key, p in self._by_id.items()}

    def registry(self) -> dict[str, SchemaRef]:
        """Schema registry holding exactly the promoted schemas."""
        registry: dict[str, SchemaRef] = {}
        for promotion in self._by_id.values():
            registry.setdefault(promotion.name, SchemaRef(value=promotion.schema))
        return registry

    def promote(self, schema: Schema) -> Promotion | None:
        """Register an externally sourced schema.

        Returns:
            The promotion, or None if the schema has no external origin

        Raises:
            PromotionCollisionError: If the generated name or path was already
                given to a schema from a different origin

        """
        if (existing := self._by_id.get(id(schema))) is not None:
            return existing

        origin = schema.origin
        if origin is None or not origin.fragment:
            return None

        suffix = f"_{fingerprint(origin.host, origin.path):x}"
        promotion = Promotion(
            schema=schema,
            name=origin.id + suffix,
            path="#" + origin.fragment + suffix,
        )

        # Same document and fragment is the same definition loaded twice
        key = (origin.host, origin.path, origin.fragment)
        for claimed, value in ((self._paths, promotion.path), (self._names, promotion.name)):
            other = claimed.get(value)
            if other is not None and (other.host, other.path, other.fragment) != key:
                raise PromotionCollisionError(value, _describe(other), _describe(origin))

        self._paths.setdefault(promotion.path, origin)
        self._names.setdefault(promotion.name, origin)
        self._by_id[id(schema)] = promotion
        return promotion


def build_component_ref_map(root: Any) -> ComponentRefMap:
    """Find the schemas to promote into the registry.

    A schema is promoted when it is reached below the registry depth and
    was loaded from another document (its origin has a fragment). Other
    entity kinds are walked but not promoted.
    """
    refs = ComponentRefMap()

    def visit(node: Any, level: int, label: str) -> None:
        if not isinstance(node, Schema) or level <= ROOT_OBJECT_DEPTH or node in refs:
            return
        if (promotion := refs.promote(node)) is not None:
            logger.debug("Promoted '%s' at level %d as %s", label, level, promotion.path)

    walker = GraphWalker(visit)
    walker.walk(root)
    logger.info("Promoted %d of %d nodes to the schema registry", len(refs), walker.expanded)
    return refs
