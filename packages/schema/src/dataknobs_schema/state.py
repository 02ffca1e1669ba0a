"""Positional context handed down through nested validation calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .utils import UNDEFINED


@dataclass(frozen=True)
class ValidationState:
    """Where the value under validation sits within the document.

    Instances are never mutated; nested calls build a new state with one more
    path segment and the containing value pushed onto ``ancestors``.

    Attributes:
        key: Property name or index that addressed the value from its parent
        path: Keys and indexes from the document root to the value
        ancestors: Containing values, nearest parent first
    """

    key: Any = None
    path: tuple[Any, ...] = ()
    ancestors: tuple[Any, ...] = ()

    def child(self, key: Any, parent: Any) -> ValidationState:
        """Build the state for a value addressed by ``key`` inside ``parent``."""
        return ValidationState(key=key, path=(*self.path, key), ancestors=(parent, *self.ancestors))

    @property
    def parent(self) -> Any:
        """The nearest containing value, or ``UNDEFINED`` at the root."""
        return self.ancestors[0] if self.ancestors else UNDEFINED
