"""Tests for GeohashCache diffing and eviction."""

import pytest

from oba_stop_cache.application.geohash_cache import GeohashCache
from oba_stop_cache.domain.models import Change, Geohash

SEATTLE = Geohash.from_string("c23nb")
TACOMA = Geohash.from_string("c22uv")
EVERETT = Geohash.from_string("c290p")


@pytest.fixture
def cache() -> GeohashCache[str]:
    """Create an empty cache of strings."""
    return GeohashCache()


class TestUpsert:
    """Tests for upsert differences."""

    def test_when_key_absent_then_reports_key_and_element_insertion(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given an absent key, when upserting, then key and element insertions are reported."""
        difference = cache.upsert(SEATTLE, "downtown")

        assert difference.key_changes == (Change.insertion(SEATTLE),)
        assert difference.element_changes == (Change.insertion("downtown"),)
        assert cache[SEATTLE] == "downtown"

    def test_when_key_present_then_reports_removal_before_insertion(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given a present key, when upserting, then old removal precedes new insertion."""
        cache.upsert(SEATTLE, "old")

        difference = cache.upsert(SEATTLE, "new")

        assert difference.key_changes == ()
        assert difference.element_changes == (Change.removal("old"), Change.insertion("new"))
        assert cache[SEATTLE] == "new"
        assert len(cache) == 1

    def test_when_same_value_upserted_then_still_reports_replacement(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given an equal value, when upserting, then it is still reported as a replacement."""
        cache.upsert(SEATTLE, "same")

        difference = cache.upsert(SEATTLE, "same")

        assert difference.element_changes == (Change.removal("same"), Change.insertion("same"))


class TestSubscript:
    """Tests for direct, non-diffing access."""

    def test_when_key_absent_then_get_returns_none(self, cache: GeohashCache[str]) -> None:
        """Given an empty cache, when reading a key, then None is returned."""
        assert cache[SEATTLE] is None
        assert not cache.contains(SEATTLE)
        assert SEATTLE not in cache

    def test_when_set_then_value_is_stored_silently(self, cache: GeohashCache[str]) -> None:
        """Given a set via subscript, when reading, then the value is present."""
        cache[SEATTLE] = "stored"

        assert cache[SEATTLE] == "stored"
        assert cache.contains(SEATTLE)

    def test_when_set_to_none_then_key_is_removed(self, cache: GeohashCache[str]) -> None:
        """Given a present key, when assigning None, then the key is removed."""
        cache[SEATTLE] = "stored"

        cache[SEATTLE] = None

        assert SEATTLE not in cache
        assert cache.geohashes == set()

    def test_when_deleted_then_key_is_removed(self, cache: GeohashCache[str]) -> None:
        """Given a present key, when deleting, then the key is removed."""
        cache[SEATTLE] = "stored"

        del cache[SEATTLE]

        assert SEATTLE not in cache


class TestProjections:
    """Tests for geohashes and elements views."""

    def test_projections_reflect_current_mapping(self, cache: GeohashCache[str]) -> None:
        """Given several entries, when reading projections, then they match the mapping."""
        cache.upsert(SEATTLE, "a")
        cache.upsert(TACOMA, "b")
        cache.upsert(TACOMA, "c")

        assert cache.geohashes == {SEATTLE, TACOMA}
        assert sorted(cache.elements) == ["a", "c"]


class TestDiscard:
    """Tests for discard_content_if_possible."""

    def test_when_nothing_active_then_everything_is_discarded(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given no active geohashes, when discarding, then all keys are removed."""
        cache.upsert(SEATTLE, "a")
        cache.upsert(TACOMA, "b")

        difference = cache.discard_content_if_possible()

        assert len(cache) == 0
        assert set(difference.removed_keys()) == {SEATTLE, TACOMA}
        assert sorted(difference.removed_elements()) == ["a", "b"]
        assert difference.inserted_keys() == []
        assert difference.inserted_elements() == []

    def test_when_some_active_then_only_inactive_are_discarded(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given an active subset, when discarding, then active entries survive unchanged."""
        cache.upsert(SEATTLE, "a")
        cache.upsert(TACOMA, "b")
        cache.upsert(EVERETT, "c")
        cache.active_geohashes = {SEATTLE, EVERETT}

        difference = cache.discard_content_if_possible()

        assert cache.geohashes == {SEATTLE, EVERETT}
        assert cache[SEATTLE] == "a"
        assert cache[EVERETT] == "c"
        assert difference.key_changes == (Change.removal(TACOMA),)
        assert difference.element_changes == (Change.removal("b"),)

    def test_when_active_key_has_no_entry_then_discard_ignores_it(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given an active key without an entry, when discarding, then nothing is inserted."""
        cache.upsert(TACOMA, "b")
        cache.active_geohashes = {SEATTLE}

        difference = cache.discard_content_if_possible()

        assert SEATTLE not in cache
        assert difference.removed_keys() == [TACOMA]
        assert len(difference.key_changes) == 1
        assert len(difference.element_changes) == 1

    def test_when_discarded_twice_then_second_difference_is_empty(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given a discard, when discarding again without upserts, then the diff is empty."""
        cache.upsert(SEATTLE, "a")
        cache.upsert(TACOMA, "b")
        cache.active_geohashes = {SEATTLE}
        cache.discard_content_if_possible()

        difference = cache.discard_content_if_possible()

        assert difference.is_empty

    def test_neighbors_of_active_cells_are_not_protected(self, cache: GeohashCache[str]) -> None:
        """Given an inactive neighbor of an active cell, when discarding, then it is removed."""
        neighbor = SEATTLE.neighbors()[0]
        cache.upsert(SEATTLE, "a")
        cache.upsert(neighbor, "b")
        cache.active_geohashes = {SEATTLE}

        cache.discard_content_if_possible()

        assert cache.geohashes == {SEATTLE}


class TestActivePrecision:
    """Tests for the precision precondition on active geohashes."""

    def test_when_precision_matches_then_active_set_is_stored(self) -> None:
        """Given matching precision, when setting active geohashes, then they are stored."""
        cache: GeohashCache[str] = GeohashCache(expected_precision=5)

        cache.active_geohashes = {SEATTLE, TACOMA}

        assert cache.active_geohashes == frozenset({SEATTLE, TACOMA})

    def test_when_precision_mismatches_then_assertion_fails(self) -> None:
        """Given a mismatching precision, when setting active geohashes, then it asserts."""
        cache: GeohashCache[str] = GeohashCache(expected_precision=6)

        with pytest.raises(AssertionError, match="precision mismatch"):
            cache.active_geohashes = {SEATTLE}

        assert cache.active_geohashes == frozenset()

    def test_when_no_expected_precision_then_any_precision_is_accepted(
        self, cache: GeohashCache[str]
    ) -> None:
        """Given no expected precision, when mixing precisions, then all are accepted."""
        cache.active_geohashes = {SEATTLE, Geohash.from_string("c23nbq")}

        assert len(cache.active_geohashes) == 2
