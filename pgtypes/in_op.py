"""Rendering of value lists for SQL ``IN (...)`` expressions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .append import append


def _append_in(values: Sequence[Any], flags: int) -> str:
    return ",".join(
        f"({_append_in(value, flags)})"
        if isinstance(value, (list, tuple))
        else append(value, flags)
        for value in values
    )


@dataclass(frozen=True)
class InOp:
    """A list of values rendered comma separated; nested lists become tuples."""

    values: tuple[Any, ...] = ()
    error: str | None = None

    def append_value(self, flags: int = 0) -> str:
        if self.error is not None:
            raise TypeError(self.error)
        return _append_in(self.values, flags)


def in_values(values: Any) -> InOp:
    """Wrap a list or tuple of values for an ``IN`` expression."""
    if not isinstance(values, (list, tuple)):
        return InOp(error=f"pg: In(non-slice {type(values).__name__})")
    return InOp(tuple(values))


def in_multi(*args: Any) -> InOp:
    """Wrap the given values for an ``IN`` expression."""
    return InOp(tuple(args))