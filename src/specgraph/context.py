"""Encoding context threaded through every encode call."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any


class EncodeContext:
    """Path stack and promoted-node pointer table for one encode pass.

    The path stack starts at the document root (``#``) and grows by one
    external field name per nested struct field, so ``depth`` equals the
    nesting depth of the value currently being encoded.

    ``ref_paths`` maps ``id(value)`` to the pointer path the value should be
    written as when it occurs below the registry depth. It is read-only
    during the pass. Callers own the referenced objects and must keep them
    alive while the context is in use.
    """

    def __init__(self, ref_paths: Mapping[int, str] | None = None) -> None:
        self._path: list[str] = ["#"]
        self._ref_paths: Mapping[int, str] = ref_paths if ref_paths is not None else {}

    @property
    def depth(self) -> int:
        """Current length of the path stack, root included."""
        return len(self._path)

    @property
    def path(self) -> tuple[str, ...]:
        """Snapshot of the path stack."""
        return tuple(self._path)

    def ref_path(self, value: Any) -> str | None:
        """Pointer path registered for this exact object, if any."""
        if value is None:
            return None
        return self._ref_paths.get(id(value))

    @contextmanager
    def enter(self, name: str) -> Iterator[None]:
        """Push ``name`` onto the path stack for the duration of the block."""
        self._path.append(name)
        try:
            yield
        finally:
            self._path.pop()
