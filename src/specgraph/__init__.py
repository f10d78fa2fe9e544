"""specgraph - API description documents as object graphs, with $ref compaction."""

from specgraph.codecs import (
    Marshaler,
    TypeCodecs,
    from_builtins,
    to_builtins,
)
from specgraph.context import EncodeContext
from specgraph.encoder import ObjectEncoder, marshal_strict_struct
from specgraph.decoder import unmarshal_strict_struct
from specgraph.errors import (
    ContractViolation,
    DecodeError,
    EncodeError,
    PromotionCollisionError,
    SpecGraphError,
    UnsupportedFieldError,
)
from specgraph.formats import from_json, from_yaml, to_json, to_yaml
from specgraph.nodes import ExtensionProps, Origin, Struct
from specgraph.openapi import (
    ComponentRefMap,
    Components,
    Document,
    Schema,
    SchemaRef,
    build_component_ref_map,
)
from specgraph.refs import (
    REF_KEY,
    ROOT_OBJECT_DEPTH,
    RefOrValue,
    clear_resolved_external_ref,
    is_external_ref,
    marshal_ref,
    unmarshal_ref,
)
from specgraph.typeinfo import FieldInfo, TypeInfo, extract_type, json_field, type_info
from specgraph.walk import GraphWalker, clear_resolved_external_refs

__all__ = [
    "REF_KEY",
    "ROOT_OBJECT_DEPTH",
    # Compaction
    "ComponentRefMap",
    # Document model
    "Components",
    # Errors
    "ContractViolation",
    "DecodeError",
    "Document",
    "EncodeContext",
    "EncodeError",
    "ExtensionProps",
    # Type descriptors
    "FieldInfo",
    # Traversal
    "GraphWalker",
    # Serialization
    "Marshaler",
    "ObjectEncoder",
    "Origin",
    "PromotionCollisionError",
    "RefOrValue",
    "Schema",
    "SchemaRef",
    "SpecGraphError",
    "Struct",
    "TypeCodecs",
    "TypeInfo",
    "UnsupportedFieldError",
    "build_component_ref_map",
    "clear_resolved_external_ref",
    "clear_resolved_external_refs",
    "extract_type",
    "from_builtins",
    "from_json",
    "from_yaml",
    "is_external_ref",
    "json_field",
    "marshal_ref",
    "marshal_strict_struct",
    "to_builtins",
    "to_json",
    "to_yaml",
    "type_info",
    "unmarshal_ref",
    "unmarshal_strict_struct",
]
