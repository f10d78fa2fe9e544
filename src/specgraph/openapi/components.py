"""Reusable component objects and the registries that own them."""

from __future__ import annotations

from typing import Any

from specgraph.nodes import ExtensionProps
from specgraph.openapi.schema import SchemaRef
from specgraph.refs import RefOrValue
from specgraph.typeinfo import json_field

COMPONENTS_REF_PREFIX = "#/components/"


class Parameter(ExtensionProps):
    """A single operation parameter."""

    name: str = json_field("name", default="")
    in_: str = json_field("in", default="")
    description: str = json_field("description", omit_empty=True, default="")
    required: bool = json_field("required", omit_empty=True, default=False)
    deprecated: bool = json_field("deprecated", omit_empty=True, default=False)
    style: str = json_field("style", omit_empty=True, default="")
    explode: bool | None = json_field("explode", omit_empty=True, default=None)
    schema: SchemaRef | None = json_field("schema", omit_empty=True, default=None)
    example: Any = json_field("example", omit_empty=True, default=None)


class ParameterRef(RefOrValue[Parameter]):
    pass


class MediaType(ExtensionProps):
    schema: SchemaRef | None = json_field("schema", omit_empty=True, default=None)
    example: Any = json_field("example", omit_empty=True, default=None)


class RequestBody(ExtensionProps):
    description: str = json_field("description", omit_empty=True, default="")
    required: bool = json_field("required", omit_empty=True, default=False)
    content: dict[str, MediaType] = json_field("content", default_factory=dict)


class RequestBodyRef(RefOrValue[RequestBody]):
    pass


class Header(ExtensionProps):
    description: str = json_field("description", omit_empty=True, default="")
    required: bool = json_field("required", omit_empty=True, default=False)
    deprecated: bool = json_field("deprecated", omit_empty=True, default=False)
    schema: SchemaRef | None = json_field("schema", omit_empty=True, default=None)


class HeaderRef(RefOrValue[Header]):
    pass


class Response(ExtensionProps):
    description: str = json_field("description", default="")
    headers: dict[str, HeaderRef] = json_field(
        "headers",
        omit_empty=True,
        default_factory=dict,
    )
    content: dict[str, MediaType] = json_field(
        "content",
        omit_empty=True,
        default_factory=dict,
    )


class ResponseRef(RefOrValue[Response]):
    pass


class SecurityScheme(ExtensionProps):
    type: str = json_field("type", default="")
    description: str = json_field("description", omit_empty=True, default="")
    name: str = json_field("name", omit_empty=True, default="")
    in_: str = json_field("in", omit_empty=True, default="")
    scheme: str = json_field("scheme", omit_empty=True, default="")
    bearer_format: str = json_field("bearerFormat", omit_empty=True, default="")


class SecuritySchemeRef(RefOrValue[SecurityScheme]):
    pass


class Components(ExtensionProps):
    """Named registries, one per reusable entity kind."""

    schemas: dict[str, SchemaRef] = json_field(
        "schemas",
        omit_empty=True,
        default_factory=dict,
    )
    parameters: dict[str, ParameterRef] = json_field(
        "parameters",
        omit_empty=True,
        default_factory=dict,
    )
    request_bodies: dict[str, RequestBodyRef] = json_field(
        "requestBodies",
        omit_empty=True,
        default_factory=dict,
    )
    responses: dict[str, ResponseRef] = json_field(
        "responses",
        omit_empty=True,
        default_factory=dict,
    )
    headers: dict[str, HeaderRef] = json_field(
        "headers",
        omit_empty=True,
        default_factory=dict,
    )
    security_schemes: dict[str, SecuritySchemeRef] = json_field(
        "securitySchemes",
        omit_empty=True,
        default_factory=dict,
    )

    def registries(self) -> dict[str, dict[str, RefOrValue[Any]]]:
        """Every registry keyed by its external name."""
        return {
            "schemas": self.schemas,
            "parameters": self.parameters,
            "requestBodies": self.request_bodies,
            "responses": self.responses,
            "headers": self.headers,
            "securitySchemes": self.security_schemes,
        }

    def ref_paths(self) -> dict[int, str]:
        """Pointer paths of the loaded registry values, keyed by identity.

        Installed in an ``EncodeContext``, this writes any other occurrence
        of a registry value as a pointer to its registry entry.
        """
        paths: dict[int, str] = {}
        for kind, registry in self.registries().items():
            for name, entry in registry.items():
                if entry.value is not None:
                    paths[id(entry.value)] = f"{COMPONENTS_REF_PREFIX}{kind}/{name}"
        return paths
