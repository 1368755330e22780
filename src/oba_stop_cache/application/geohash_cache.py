"""Geohash-keyed cache with diffable mutations."""

import logging
from collections.abc import Iterable
from typing import Generic, TypeVar

from oba_stop_cache.domain.models.geohash import Geohash
from oba_stop_cache.domain.models.geohash_cache_difference import (
    Change,
    GeohashCacheDifference,
)

logger = logging.getLogger(__name__)

Element = TypeVar("Element")


class GeohashCache(Generic[Element]):
    """In-memory mapping from geohash cells to elements.

    Every mutating operation returns a ``GeohashCacheDifference`` so callers
    can mirror the cache incrementally (e.g. as map annotations). Nothing is
    evicted automatically; ``discard_content_if_possible`` drops every cell
    that is not in ``active_geohashes``.

    Not safe for concurrent use. The owner must serialize access.
    """

    def __init__(self, expected_precision: int | None = None) -> None:
        """Initialize an empty cache.

        Args:
            expected_precision: If set, active geohashes must have this
                precision. Checked with ``assert`` only.
        """
        self._cache: dict[Geohash, Element] = {}
        self._active_geohashes: frozenset[Geohash] = frozenset()
        self.expected_precision = expected_precision

    def __getitem__(self, geohash: Geohash) -> Element | None:
        return self._cache.get(geohash)

    def __setitem__(self, geohash: Geohash, element: Element | None) -> None:
        # Direct assignment bypasses diff reporting; assigning None removes the key
        if element is None:
            self._cache.pop(geohash, None)
        else:
            self._cache[geohash] = element

    def __delitem__(self, geohash: Geohash) -> None:
        self._cache.pop(geohash, None)

    def __contains__(self, geohash: object) -> bool:
        return geohash in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def contains(self, geohash: Geohash) -> bool:
        return geohash in self._cache

    @property
    def geohashes(self) -> set[Geohash]:
        """All cached geohashes."""
        return set(self._cache.keys())

    @property
    def elements(self) -> list[Element]:
        """All cached elements, in no particular order."""
        return list(self._cache.values())

    @property
    def active_geohashes(self) -> frozenset[Geohash]:
        """Geohashes protected from ``discard_content_if_possible``.

        May include geohashes that have no cached element yet.
        """
        return self._active_geohashes

    @active_geohashes.setter
    def active_geohashes(self, geohashes: Iterable[Geohash]) -> None:
        active = frozenset(geohashes)
        if self.expected_precision is not None:
            illegal = {g for g in active if g.precision != self.expected_precision}
            assert not illegal, f"Geohash precision mismatch: {sorted(str(g) for g in illegal)}"
        self._active_geohashes = active

    def upsert(
        self, geohash: Geohash, element: Element
    ) -> GeohashCacheDifference[Geohash, Element]:
        """Insert or replace the element for a geohash.

        A new geohash yields a key insertion and an element insertion. An
        existing geohash yields no key change, and the old element's removal
        followed by the new element's insertion.
        """
        key_changes: list[Change[Geohash]] = []
        element_changes: list[Change[Element]] = []

        if geohash in self._cache:
            element_changes.append(Change.removal(self._cache[geohash]))
        else:
            key_changes.append(Change.insertion(geohash))

        self._cache[geohash] = element
        element_changes.append(Change.insertion(element))

        return GeohashCacheDifference.of(key_changes, element_changes)

    def discard_content_if_possible(self) -> GeohashCacheDifference[Geohash, Element]:
        """Remove every geohash that is not active.

        Only exact members of ``active_geohashes`` are kept; neighbors of
        active cells are discarded like any other inactive cell.
        """
        key_changes: list[Change[Geohash]] = []
        element_changes: list[Change[Element]] = []

        for geohash in [g for g in self._cache if g not in self._active_geohashes]:
            element = self._cache.pop(geohash)
            element_changes.append(Change.removal(element))
            key_changes.append(Change.removal(geohash))

        if key_changes:
            logger.debug(
                f"Discarded {len(key_changes)} inactive geohash(es), {len(self._cache)} remaining"
            )
        return GeohashCacheDifference.of(key_changes, element_changes)
