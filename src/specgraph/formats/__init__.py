"""Text formats for documents.

Each format module provides to_<format> and from_<format> functions
that work with the core to_builtins/from_builtins conversion.
"""

from specgraph.formats.json import from_json, to_json
from specgraph.formats.yaml import from_yaml, to_yaml

__all__ = ["from_json", "from_yaml", "to_json", "to_yaml"]
