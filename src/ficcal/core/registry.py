from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Registry(Generic[T]):
    """Name -> schema table. `kind` only shows up in error messages."""
    kind: str
    _items: Dict[str, T] = field(default_factory=dict)

    def get(self, name: str) -> T:
        if name not in self._items:
            raise KeyError(f"Unknown {self.kind} '{name}'. Available: {sorted(self._items)}")
        return self._items[name]

    def list(self) -> List[str]:
        return sorted(self._items.keys())

    def register(self, name: str, item: T, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._items):
            raise KeyError(f"{self.kind.capitalize()} '{name}' already exists. Use overwrite=True to replace.")
        self._items[name] = item
        logger.debug("registered %s %r", self.kind, name)

    def __contains__(self, name: object) -> bool:
        return name in self._items


@dataclass
class CalendarRegistry:
    calendars: Registry = field(default_factory=lambda: Registry("calendar"))
    solar_systems: Registry = field(default_factory=lambda: Registry("solar system"))
