"""Memoization cache for resolved complex types.

Each complex type is reduced at most once per run, however many inheritance
paths lead to it. The cache doubles as a cycle guard: a name that is asked for
again while its own reduction is still running raises
:class:`~rio_schema_flattener.errors.CyclicTypeError` instead of recursing
forever.

Example::

    from rio_schema_flattener.cache import ResolvedTypeCache

    cache = ResolvedTypeCache()
    with cache.reducing("Foo"):
        attributes = []            # reduce Foo here
    cache.set("Foo", attributes)
    assert cache.get("Foo") is attributes
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Set

from .errors import CyclicTypeError
from .models import AttributeList

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Counters for one resolution pass."""

    hits: int = 0
    misses: int = 0
    reductions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "reductions": self.reductions}


@dataclass
class ResolvedTypeCache:
    """Type name -> resolved attribute list, grown during a single pass.

    Entries are never replaced once stored.
    """

    _entries: Dict[str, AttributeList] = field(default_factory=dict)
    _in_progress: Set[str] = field(default_factory=set)
    stats: CacheStats = field(default_factory=CacheStats)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[AttributeList]:
        """Return the cached list for ``name`` or None, updating hit/miss counters."""
        entry = self._entries.get(name)
        if entry is None:
            self.stats.misses += 1
        else:
            self.stats.hits += 1
        return entry

    def set(self, name: str, attributes: AttributeList) -> None:
        """Store the resolved attributes for ``name``.

        Raises:
            ValueError: If ``name`` was already resolved.
        """
        if name in self._entries:
            raise ValueError(f"Complex type '{name}' resolved twice")
        self._entries[name] = attributes

    @contextmanager
    def reducing(self, name: str) -> Iterator[None]:
        """Mark ``name`` as being reduced for the duration of the block.

        Raises:
            CyclicTypeError: If ``name`` is already being reduced further up
                the call stack.
        """
        if name in self._in_progress:
            raise CyclicTypeError(name)
        self._in_progress.add(name)
        self.stats.reductions += 1
        logger.debug("Reducing complex type %s", name)
        try:
            yield
        finally:
            self._in_progress.discard(name)
