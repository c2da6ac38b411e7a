"""Typed handles to components kept in component storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ComponentId:
    """Key to one component, tagged with the component's type."""

    component_type: type
    key: Any

    def __repr__(self) -> str:
        return f"ComponentId({self.component_type.__name__}, {self.key!r})"