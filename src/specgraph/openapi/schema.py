"""Schema objects, the self-referential part of the document model."""

from __future__ import annotations

from typing import Any

from specgraph.nodes import ExtensionProps, Origin
from specgraph.refs import RefOrValue
from specgraph.typeinfo import json_field


class Schema(ExtensionProps):
    """A JSON Schema object as used by OpenAPI 3.0.

    Nested schemas are held through ``SchemaRef`` so each occurrence can be
    a pointer or an inline schema. ``origin`` is set by the loader when the
    schema was read from another document and is never serialized.
    """

    origin: Origin | None = None

    title: str = json_field("title", omit_empty=True, default="")
    description: str = json_field("description", omit_empty=True, default="")
    type: str = json_field("type", omit_empty=True, default="")
    format: str = json_field("format", omit_empty=True, default="")
    nullable: bool = json_field("nullable", omit_empty=True, default=False)
    deprecated: bool = json_field("deprecated", omit_empty=True, default=False)
    read_only: bool = json_field("readOnly", omit_empty=True, default=False)
    write_only: bool = json_field("writeOnly", omit_empty=True, default=False)
    enum: list[Any] = json_field("enum", omit_empty=True, default_factory=list)
    default: Any = json_field("default", omit_empty=True, default=None)
    example: Any = json_field("example", omit_empty=True, default=None)

    # Composition
    all_of: list[SchemaRef] = json_field("allOf", omit_empty=True, default_factory=list)
    any_of: list[SchemaRef] = json_field("anyOf", omit_empty=True, default_factory=list)
    one_of: list[SchemaRef] = json_field("oneOf", omit_empty=True, default_factory=list)
    not_: SchemaRef | None = json_field("not", omit_empty=True, default=None)

    # Numbers
    minimum: float | None = json_field("minimum", omit_empty=True, default=None)
    maximum: float | None = json_field("maximum", omit_empty=True, default=None)
    multiple_of: float | None = json_field("multipleOf", omit_empty=True, default=None)

    # Strings
    min_length: int = json_field("minLength", omit_empty=True, default=0)
    max_length: int | None = json_field("maxLength", omit_empty=True, default=None)
    pattern: str = json_field("pattern", omit_empty=True, default="")

    # Arrays
    items: SchemaRef | None = json_field("items", omit_empty=True, default=None)
    min_items: int = json_field("minItems", omit_empty=True, default=0)
    max_items: int | None = json_field("maxItems", omit_empty=True, default=None)
    unique_items: bool = json_field("uniqueItems", omit_empty=True, default=False)

    # Objects
    required: list[str] = json_field("required", omit_empty=True, default_factory=list)
    properties: dict[str, SchemaRef] = json_field(
        "properties",
        omit_empty=True,
        default_factory=dict,
    )
    additional_properties: SchemaRef | None = json_field(
        "additionalProperties",
        omit_empty=True,
        default=None,
    )


class SchemaRef(RefOrValue[Schema]):
    """Pointer to a schema or an inline schema."""
