"""Tests for specgraph.walk module."""

from collections import Counter
from typing import Any

from specgraph.openapi.components import Components, Parameter, ParameterRef
from specgraph.openapi.document import Document, Operation
from specgraph.openapi.schema import Schema, SchemaRef
from specgraph.walk import GraphWalker, clear_resolved_external_refs


def _cycle() -> tuple[Schema, Schema]:
    """Two schemas that refer to each other through their properties."""
    a = Schema(type="object")
    b = Schema(type="object")
    a.properties["b"] = SchemaRef(value=b)
    b.properties["a"] = SchemaRef(value=a)
    return a, b


class TestGraphWalker:
    """Test traversal order, levels and cycle safety."""

    def test_cycle_terminates(self) -> None:
        """Test that a two-node cycle visits each arrival and expands each node once."""
        a, b = _cycle()
        arrivals: Counter[int] = Counter()

        walker = GraphWalker(lambda node, level, label: arrivals.update([id(node)]))
        walker.walk(a)

        assert arrivals[id(a)] == 2
        assert arrivals[id(b)] == 1

    def test_self_reference_terminates(self) -> None:
        """Test that a schema holding itself is walked once."""
        node = Schema(type="array")
        node.items = SchemaRef(value=node)
        seen: list[Any] = []

        GraphWalker(lambda n, level, label: seen.append(n)).walk(node)

        assert sum(1 for n in seen if n is node) == 2

    def test_levels(self) -> None:
        """Test that the root is level 0 and each field or entry adds one."""
        schema = Schema(type="string")
        doc = Document(components=Components(schemas={"Name": SchemaRef(value=schema)}))
        levels: dict[int, int] = {}

        GraphWalker(lambda n, level, label: levels.setdefault(id(n), level)).walk(doc)

        assert levels[id(doc)] == 0
        assert levels[id(doc.components)] == 1
        assert levels[id(doc.components.schemas)] == 2
        assert levels[id(doc.components.schemas["Name"])] == 3
        assert levels[id(schema)] == 4

    def test_labels_are_field_names_and_keys(self) -> None:
        """Test that children are labeled by field name or mapping key."""
        doc = Document(components=Components(schemas={"Name": SchemaRef()}))
        labels: dict[int, str] = {}

        GraphWalker(lambda n, level, label: labels.setdefault(id(n), label)).walk(doc)

        assert labels[id(doc)] == "#"
        assert labels[id(doc.components)] == "components"
        assert labels[id(doc.components.schemas["Name"])] == "Name"

    def test_expanded_counts_distinct_nodes(self) -> None:
        """Test that shared nodes are expanded once and the count resets."""
        shared = Schema(type="string")
        holder = {"x": shared, "y": shared}
        walker = GraphWalker(lambda n, level, label: None)

        walker.walk(holder)
        first = walker.expanded
        walker.walk(holder)

        assert walker.expanded == first
        assert first >= 2

    def test_visit_returning_false_skips_children(self) -> None:
        """Test that a visit can keep the walker out of a subtree."""
        inner = Schema(type="string")
        outer = Schema(type="object", properties={"name": SchemaRef(value=inner)})
        seen: list[Any] = []

        def visit(node: Any, level: int, label: str) -> bool:
            seen.append(node)
            return label != "properties"

        GraphWalker(visit).walk(outer)

        assert outer.properties in seen
        assert not any(n is inner for n in seen)

    def test_primitives_are_not_visited(self) -> None:
        """Test that strings, numbers and None are leaves."""
        visited: list[Any] = []

        GraphWalker(lambda n, level, label: visited.append(n)).walk(["a", 1, None, 2.5])

        assert len(visited) == 1


class TestClearResolvedExternalRefs:
    """Test resetting resolved external pointers over a whole graph."""

    def test_mixed_pointers(self) -> None:
        """Test that only resolved external pointers are reset."""
        pet = Schema(type="object")
        local = Schema(type="string")
        external = SchemaRef(ref="pets.yaml#/components/schemas/Pet", value=pet)
        internal = SchemaRef(ref="#/components/schemas/Name", value=local)
        unresolved = SchemaRef(ref="#/components/schemas/Missing")
        plain = SchemaRef(value=Schema(type="integer"))
        param = ParameterRef(
            ref="common.yaml#/components/parameters/Limit",
            value=Parameter(name="limit", in_="query"),
        )
        doc = Document(
            components=Components(
                schemas={
                    "Pet": external,
                    "Name": internal,
                    "Missing": unresolved,
                    "Count": plain,
                },
                parameters={"Limit": param},
            ),
        )

        reset = clear_resolved_external_refs(doc)

        assert reset == 2
        assert external.value is None
        assert external.ref == "pets.yaml#/components/schemas/Pet"
        assert param.value is None
        assert internal.value is local
        assert unresolved == SchemaRef(ref="#/components/schemas/Missing")
        assert plain.value is not None

    def test_nested_pointer_in_operation(self) -> None:
        """Test that pointers below the registry are reached too."""
        param = ParameterRef(ref="common.yaml#/Limit", value=Parameter(name="limit"))
        doc = Document()
        doc.add_operation("/pets", "get", Operation(parameters=[param]))

        assert clear_resolved_external_refs(doc) == 1
        assert param.value is None

    def test_cyclic_graph(self) -> None:
        """Test that the reset terminates on cycles."""
        a, b = _cycle()
        a.properties["ext"] = SchemaRef(ref="other.yaml#/X", value=b)

        assert clear_resolved_external_refs(a) == 1
        assert a.properties["b"].value is b
