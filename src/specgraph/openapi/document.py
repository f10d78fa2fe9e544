"""Document root: paths, servers and the component registries."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Self

from specgraph.context import EncodeContext
from specgraph.formats.json import from_json, to_json
from specgraph.formats.yaml import from_yaml, to_yaml
from specgraph.nodes import ExtensionProps
from specgraph.openapi.compaction import build_component_ref_map
from specgraph.openapi.components import (
    Components,
    ParameterRef,
    RequestBodyRef,
    ResponseRef,
)
from specgraph.typeinfo import json_field

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class Info(ExtensionProps):
    title: str = json_field("title", default="")
    description: str = json_field("description", omit_empty=True, default="")
    terms_of_service: str = json_field("termsOfService", omit_empty=True, default="")
    version: str = json_field("version", default="")


class Server(ExtensionProps):
    url: str = json_field("url", default="")
    description: str = json_field("description", omit_empty=True, default="")


class ExternalDocs(ExtensionProps):
    description: str = json_field("description", omit_empty=True, default="")
    url: str = json_field("url", default="")


class Operation(ExtensionProps):
    """A single API operation on a path."""

    tags: list[str] = json_field("tags", omit_empty=True, default_factory=list)
    summary: str = json_field("summary", omit_empty=True, default="")
    description: str = json_field("description", omit_empty=True, default="")
    operation_id: str = json_field("operationId", omit_empty=True, default="")
    parameters: list[ParameterRef] = json_field(
        "parameters",
        omit_empty=True,
        default_factory=list,
    )
    request_body: RequestBodyRef | None = json_field(
        "requestBody",
        omit_empty=True,
        default=None,
    )
    responses: dict[str, ResponseRef] = json_field("responses", default_factory=dict)
    deprecated: bool = json_field("deprecated", omit_empty=True, default=False)
    security: list[dict[str, list[str]]] | None = json_field(
        "security",
        omit_empty=True,
        default=None,
    )
    servers: list[Server] = json_field("servers", omit_empty=True, default_factory=list)


class PathItem(ExtensionProps):
    """Operations available on a single path."""

    summary: str = json_field("summary", omit_empty=True, default="")
    description: str = json_field("description", omit_empty=True, default="")
    get: Operation | None = json_field("get", omit_empty=True, default=None)
    put: Operation | None = json_field("put", omit_empty=True, default=None)
    post: Operation | None = json_field("post", omit_empty=True, default=None)
    delete: Operation | None = json_field("delete", omit_empty=True, default=None)
    options: Operation | None = json_field("options", omit_empty=True, default=None)
    head: Operation | None = json_field("head", omit_empty=True, default=None)
    patch: Operation | None = json_field("patch", omit_empty=True, default=None)
    trace: Operation | None = json_field("trace", omit_empty=True, default=None)
    servers: list[Server] = json_field("servers", omit_empty=True, default_factory=list)
    parameters: list[ParameterRef] = json_field(
        "parameters",
        omit_empty=True,
        default_factory=list,
    )

    def operations(self) -> dict[str, Operation]:
        """Defined operations keyed by upper-case HTTP method."""
        return {
            method.upper(): op
            for method in HTTP_METHODS
            if (op := getattr(self, method)) is not None
        }

    def get_operation(self, method: str) -> Operation | None:
        return getattr(self, _method_attr(method))

    def set_operation(self, method: str, operation: Operation | None) -> None:
        setattr(self, _method_attr(method), operation)


def _method_attr(method: str) -> str:
    attr = method.lower()
    if attr not in HTTP_METHODS:
        msg = f"Unsupported HTTP method '{method}'"
        raise ValueError(msg)
    return attr


class Document(ExtensionProps):
    """Root of an OpenAPI 3 document.

    Two ways to write a document:

    - ``to_builtins`` / ``to_json`` / ``to_yaml`` write the graph as it is.
      They do not terminate on cyclic schemas.
    - ``to_compact_builtins`` / ``to_compact_json`` / ``to_compact_yaml``
      first promote externally sourced schemas into the schema registry and
      write every nested occurrence as a pointer. Use these for documents
      assembled from several files.

    Example:
        doc = Document.from_yaml(text)
        clear_resolved_external_refs(doc)
        output = doc.to_compact_json()

    """

    openapi: str = json_field("openapi", default="3.0.3")
    info: Info = json_field("info", default_factory=Info)
    servers: list[Server] = json_field("servers", omit_empty=True, default_factory=list)
    paths: dict[str, PathItem] = json_field("paths", omit_empty=True, default_factory=dict)
    components: Components = json_field(
        "components",
        omit_empty=True,
        default_factory=Components,
    )
    security: list[dict[str, list[str]]] = json_field(
        "security",
        omit_empty=True,
        default_factory=list,
    )
    external_docs: ExternalDocs | None = json_field(
        "externalDocs",
        omit_empty=True,
        default=None,
    )

    def add_operation(self, path: str, method: str, operation: Operation) -> None:
        """Set the operation for ``method`` on ``path``, creating the path item."""
        path_item = self.paths.get(path)
        if path_item is None:
            path_item = PathItem()
            self.paths[path] = path_item
        path_item.set_operation(method, operation)

    def add_server(self, server: Server) -> None:
        self.servers.append(server)

    def to_compact_builtins(self) -> dict[str, Any]:
        """Encode with externally sourced schemas promoted to the registry.

        The schema registry in the output holds exactly the promoted schemas,
        keyed by their generated names. This document is not modified.

        Raises:
            PromotionCollisionError: If two origins map to the same name

        """
        refs = build_component_ref_map(self)

        # TODO: promote parameters, request bodies, responses and headers too
        components = dataclasses.replace(self.components, schemas=refs.registry())
        compacted = dataclasses.replace(self, components=components)

        logger.info("Encoding document with %d promoted schemas", len(refs))
        return compacted.to_builtins(EncodeContext(refs.ref_paths()))

    def to_compact_json(self, *, indent: int | None = 2) -> str:
        """JSON text of ``to_compact_builtins``."""
        return to_json(self.to_compact_builtins(), indent=indent)

    def to_compact_yaml(self) -> str:
        """YAML text of ``to_compact_builtins``."""
        return to_yaml(self.to_compact_builtins())

    def to_json(self, *, indent: int | None = 2) -> str:
        """JSON text of the document as it is."""
        return to_json(self, indent=indent)

    def to_yaml(self) -> str:
        """YAML text of the document as it is."""
        return to_yaml(self)

    @classmethod
    def from_json(cls, s: str | bytes) -> Self:
        return from_json(s, cls)

    @classmethod
    def from_yaml(cls, s: str | bytes) -> Self:
        return from_yaml(s, cls)
