"""OpenAPI 3 document model built on the specgraph codec."""

from specgraph.openapi.compaction import (
    ComponentRefMap,
    Promotion,
    build_component_ref_map,
    fingerprint,
)
from specgraph.openapi.components import (
    Components,
    Header,
    HeaderRef,
    MediaType,
    Parameter,
    ParameterRef,
    RequestBody,
    RequestBodyRef,
    Response,
    ResponseRef,
    SecurityScheme,
    SecuritySchemeRef,
)
from specgraph.openapi.document import (
    Document,
    ExternalDocs,
    Info,
    Operation,
    PathItem,
    Server,
)
from specgraph.openapi.schema import Schema, SchemaRef

__all__ = [
    "ComponentRefMap",
    "Components",
    "Document",
    "ExternalDocs",
    "Header",
    "HeaderRef",
    "Info",
    "MediaType",
    "Operation",
    "Parameter",
    "ParameterRef",
    "PathItem",
    "Promotion",
    "RequestBody",
    "RequestBodyRef",
    "Response",
    "ResponseRef",
    "Schema",
    "SchemaRef",
    "SecurityScheme",
    "SecuritySchemeRef",
    "Server",
    "build_component_ref_map",
    "fingerprint",
]
