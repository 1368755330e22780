"""Geohash cache difference domain model."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

K = TypeVar("K")
E = TypeVar("E")
T = TypeVar("T")


class ChangeKind(Enum):
    """Kind of a structural change."""

    INSERTION = "insertion"
    REMOVAL = "removal"


@dataclass(frozen=True)
class Change(Generic[T]):
    """A single tagged insertion or removal."""

    kind: ChangeKind
    value: T

    @classmethod
    def insertion(cls, value: T) -> "Change[T]":
        return cls(ChangeKind.INSERTION, value)

    @classmethod
    def removal(cls, value: T) -> "Change[T]":
        return cls(ChangeKind.REMOVAL, value)

    @property
    def is_insertion(self) -> bool:
        return self.kind is ChangeKind.INSERTION

    @property
    def is_removal(self) -> bool:
        return self.kind is ChangeKind.REMOVAL


@dataclass(frozen=True)
class GeohashCacheDifference(Generic[K, E]):
    """Structural effect of one cache mutation.

    Changes are ordered and must be applied in sequence: a replaced element
    shows up as its removal followed by the insertion of its successor.
    """

    key_changes: tuple[Change[K], ...] = ()
    element_changes: tuple[Change[E], ...] = ()

    @classmethod
    def of(
        cls, key_changes: Sequence[Change[K]], element_changes: Sequence[Change[E]]
    ) -> "GeohashCacheDifference[K, E]":
        return cls(key_changes=tuple(key_changes), element_changes=tuple(element_changes))

    @property
    def is_empty(self) -> bool:
        return not self.key_changes and not self.element_changes

    def inserted_keys(self) -> list[K]:
        return [change.value for change in self.key_changes if change.is_insertion]

    def removed_keys(self) -> list[K]:
        return [change.value for change in self.key_changes if change.is_removal]

    def inserted_elements(self) -> list[E]:
        return [change.value for change in self.element_changes if change.is_insertion]

    def removed_elements(self) -> list[E]:
        return [change.value for change in self.element_changes if change.is_removal]
