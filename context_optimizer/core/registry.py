"""Registry of named context sources."""

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass
import threading

from .types import QUERY_SOURCE, Constraint, ContextItem

if TYPE_CHECKING:
    from ..services.content_normalizer import AddOptions

RESERVED_SOURCES = (QUERY_SOURCE,)


class DuplicateItemError(ValueError):
    """Raised when a source would introduce an item id that already exists."""


@dataclass(frozen=True)
class ContextSource:
    """A registered source: its items and registration options."""
    name: str
    items: Tuple[ContextItem, ...]
    options: 'AddOptions'

    def constraints(self) -> List[Constraint]:
        return [Constraint(trigger, dependency)
                for trigger, dependency in self.options.requires.items()]


class SourceRegistry:
    """
    Caller-owned collection of sources, keyed by name.

    Registering a name that already exists replaces it. ``snapshot`` returns
    an immutable view so a packing call sees a consistent set of sources
    even if the registry changes concurrently.
    """

    def __init__(self):
        self._sources: Dict[str, ContextSource] = {}
        self._lock = threading.RLock()

    def register(self, source: ContextSource):
        """Add or replace a source."""
        if source.name in RESERVED_SOURCES:
            raise ValueError(f"Source name '{source.name}' is reserved")

        with self._lock:
            self._check_ids(source)
            self._sources[source.name] = source

    def unregister(self, name: str):
        """Remove a source; unknown names are ignored."""
        with self._lock:
            self._sources.pop(name, None)

    def clear(self):
        with self._lock:
            self._sources.clear()

    def snapshot(self) -> Tuple[ContextSource, ...]:
        """Sources in registration order."""
        with self._lock:
            return tuple(self._sources.values())

    def get(self, name: str) -> Optional[ContextSource]:
        with self._lock:
            return self._sources.get(name)

    def _check_ids(self, source: ContextSource):
        seen = set()
        for item in source.items:
            if item.id in seen:
                raise DuplicateItemError(
                    f"Duplicate item id '{item.id}' in source '{source.name}'"
                )
            seen.add(item.id)

        for other in self._sources.values():
            if other.name == source.name:
                continue
            clashes = seen.intersection(item.id for item in other.items)
            if clashes:
                raise DuplicateItemError(
                    f"Item id(s) {sorted(clashes)} of source '{source.name}' "
                    f"already registered by source '{other.name}'"
                )

    def __len__(self) -> int:
        with self._lock:
            return len(self._sources)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._sources

    def __iter__(self) -> Iterator[ContextSource]:
        return iter(self.snapshot())
