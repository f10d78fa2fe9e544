"""Tests for specgraph.encoder module."""

from typing import Any

import pytest

from specgraph.context import EncodeContext
from specgraph.encoder import ObjectEncoder, marshal_strict_struct
from specgraph.errors import (
    ContractViolation,
    EncodeError,
    SpecGraphError,
    UnsupportedFieldError,
)
from specgraph.nodes import ExtensionProps, Struct
from specgraph.typeinfo import json_field


class Sample(Struct):
    name: str = json_field("name", omit_empty=True, default="")
    count: int = json_field("count", omit_empty=True, default=0)
    ratio: float = json_field("ratio", omit_empty=True, default=0.0)
    enabled: bool = json_field("enabled", omit_empty=True, default=False)
    tags: list[str] = json_field("tags", omit_empty=True, default_factory=list)
    labels: dict[str, str] = json_field("labels", omit_empty=True, default_factory=dict)
    note: str | None = json_field("note", default=None)
    hidden: str = "in-memory only"


class DepthProbe(Struct):
    """Encodes as the path depth it was encoded at."""

    def to_builtins(self, ctx: EncodeContext | None = None) -> Any:
        assert ctx is not None
        return ctx.depth


class Inner(Struct):
    probe: DepthProbe = json_field("probe", default_factory=DepthProbe)


class Outer(Struct):
    probe: DepthProbe = json_field("probe", default_factory=DepthProbe)
    inner: Inner = json_field("inner", default_factory=Inner)


class TestOmitEmpty:
    """Test omit-if-empty rules per field kind."""

    def test_empty_values_are_omitted(self) -> None:
        """Test that every omit-empty field with an empty value is left out."""
        assert Sample().to_builtins() == {"note": None}

    def test_empty_string_is_absent_not_empty(self) -> None:
        """Test that an empty omit-empty string is absent from the object."""
        result = Sample(name="").to_builtins()

        assert "name" not in result

    def test_non_empty_values_are_written(self) -> None:
        """Test that non-empty values are written under their external names."""
        sample = Sample(
            name="pet",
            count=3,
            ratio=0.5,
            enabled=True,
            tags=["a"],
            labels={"k": "v"},
            note="hi",
        )

        assert sample.to_builtins() == {
            "name": "pet",
            "count": 3,
            "ratio": 0.5,
            "enabled": True,
            "tags": ["a"],
            "labels": {"k": "v"},
            "note": "hi",
        }

    def test_fields_without_tag_are_skipped(self) -> None:
        """Test that untagged dataclass fields are not serialized."""
        result = Sample(hidden="x").to_builtins()

        assert "hidden" not in result

    def test_fields_without_omit_empty_are_kept(self) -> None:
        """Test that empty values are written when omit-empty is off."""

        class Plain(Struct):
            name: str = json_field("name", default="")
            count: int = json_field("count", default=0)
            enabled: bool = json_field("enabled", default=False)

        assert Plain().to_builtins() == {"name": "", "count": 0, "enabled": False}

    def test_present_optional_is_never_empty(self) -> None:
        """Test that an optional holding a falsy value is still written."""

        class Flags(Struct):
            explode: bool | None = json_field("explode", omit_empty=True, default=None)

        assert Flags().to_builtins() == {}
        assert Flags(explode=False).to_builtins() == {"explode": False}

    def test_nested_struct_is_never_omitted(self) -> None:
        """Test that an empty nested struct is written as an empty object."""

        class Empty(Struct):
            name: str = json_field("name", omit_empty=True, default="")

        class Holder(Struct):
            child: Empty = json_field("child", omit_empty=True, default_factory=Empty)

        assert Holder().to_builtins() == {"child": {}}


class TestNullEmission:
    """Test encoding of absent values."""

    def test_absent_value_without_omit_empty_is_null(self) -> None:
        """Test that None is written as a literal null."""
        result = Sample(note=None).to_builtins()

        assert "note" in result
        assert result["note"] is None

    def test_absent_struct_with_omit_empty_is_skipped(self) -> None:
        """Test that None is skipped entirely for omit-empty fields."""

        class Holder(Struct):
            child: Inner | None = json_field("child", omit_empty=True, default=None)

        assert Holder().to_builtins() == {}


class TestPathStack:
    """Test path stack bookkeeping during encoding."""

    def test_depth_follows_nesting(self) -> None:
        """Test that the path depth equals the nesting depth of each field."""
        assert Outer().to_builtins(EncodeContext()) == {
            "probe": 2,
            "inner": {"probe": 3},
        }

    def test_path_is_restored_after_encoding(self) -> None:
        """Test that the path stack is back at the root after a pass."""
        ctx = EncodeContext()
        Outer().to_builtins(ctx)

        assert ctx.path == ("#",)

    def test_path_is_restored_after_failure(self) -> None:
        """Test that a failing field does not leave its name on the stack."""

        class Broken(Struct):
            payload: Any = json_field("payload", default=None)

        ctx = EncodeContext()
        with pytest.raises(EncodeError):
            Broken(payload=object()).to_builtins(ctx)

        assert ctx.path == ("#",)


class TestExtensions:
    """Test merging of extension maps."""

    def test_extensions_are_merged(self) -> None:
        """Test that extension keys appear next to declared fields."""

        class Tagged(ExtensionProps):
            name: str = json_field("name", default="")

        tagged = Tagged(name="a", extensions={"x-internal": True})

        assert tagged.to_builtins() == {"name": "a", "x-internal": True}

    def test_declared_fields_win_over_extensions(self) -> None:
        """Test that a declared field overwrites an extension with its name."""

        class Tagged(ExtensionProps):
            name: str = json_field("name", default="")

        tagged = Tagged(name="a", extensions={"name": "shadow"})

        assert tagged.to_builtins() == {"name": "a"}

    def test_last_write_wins(self) -> None:
        """Test that repeated extension keys are overwritten."""
        encoder = ObjectEncoder()
        encoder.encode_extension("x-a", 1)
        encoder.encode_extension_map({"x-a": 2, "x-b": [1, 2]})

        assert encoder.finish() == {"x-a": 2, "x-b": [1, 2]}

    def test_none_extension_map_is_ignored(self) -> None:
        """Test that a missing extension map adds nothing."""
        encoder = ObjectEncoder()
        encoder.encode_extension_map(None)

        assert encoder.finish() == {}


class TestErrors:
    """Test error reporting."""

    def test_unsupported_kind_is_contract_violation(self) -> None:
        """Test that a field with no encoding is a defect, not a data error."""

        class WithComplex(Struct):
            value: complex = json_field("value", default=0j)

        with pytest.raises(UnsupportedFieldError) as exc_info:
            WithComplex(value=1j).to_builtins()

        assert exc_info.value.json_name == "value"
        assert isinstance(exc_info.value, ContractViolation)
        assert not isinstance(exc_info.value, SpecGraphError)

    def test_unsupported_optional_kind_is_contract_violation(self) -> None:
        """Test that wrapping an unsupported kind in an optional still fails."""

        class WithComplex(Struct):
            value: complex | None = json_field("value", default=None)

        with pytest.raises(UnsupportedFieldError):
            WithComplex(value=1j).to_builtins()

    def test_field_failure_reports_path(self) -> None:
        """Test that a failing field reports its path."""

        class Broken(Struct):
            payload: Any = json_field("payload", default=None)

        class Holder(Struct):
            broken: Broken = json_field("broken", default_factory=Broken)

        with pytest.raises(EncodeError) as exc_info:
            Holder(broken=Broken(payload=object())).to_builtins()

        assert exc_info.value.path == ("#", "broken", "payload")
        assert "#/broken/payload" in str(exc_info.value)

    def test_none_root_is_contract_violation(self) -> None:
        """Test that encoding None is a defect."""
        with pytest.raises(ContractViolation):
            marshal_strict_struct(None)

    def test_non_struct_root_is_contract_violation(self) -> None:
        """Test that encoding a non-struct through the struct entry point is a defect."""
        with pytest.raises(ContractViolation):
            marshal_strict_struct({"name": "x"})
