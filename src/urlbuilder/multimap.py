"""urlbuilder.multimap
Ordered, multi-valued string mappings for query parameters.

Order is kept across the whole collection, not just within a key:
after add("a", "1"), add("b", "2"), add("a", "3") the flattened pairs are
("a", "1"), ("b", "2"), ("a", "3").

A value of None means the key appeared without "=value", which is not the same as "".
"""

from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from typing import Self

Entry = tuple[str, str | None]


class FlatEntries(Collection[Entry]):
    """Lazy, restartable view of the (key, value) pairs of a multimap, in insertion order."""

    def __init__(self: Self, entries: Sequence[Entry]) -> None:
        self._entries: Sequence[Entry] = entries

    def __iter__(self: Self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self: Self) -> int:
        return len(self._entries)

    def __contains__(self: Self, item: object) -> bool:
        return item in self._entries

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({list(self._entries)!r})"


class _BaseMultimap(Mapping[str, list[str | None]]):
    """Read-only operations shared by the builder and the snapshot."""

    _entries: Sequence[Entry]

    def __getitem__(self: Self, key: str) -> list[str | None]:
        values: list[str | None] = [v for k, v in self._entries if k == key]
        if len(values) == 0:
            raise KeyError(key)
        return values

    def __iter__(self: Self) -> Iterator[str]:
        # dict preserves first-appearance order
        return iter(dict.fromkeys(k for k, _ in self._entries))

    def __len__(self: Self) -> int:
        return len({k for k, _ in self._entries})

    def __contains__(self: Self, key: object) -> bool:
        return any(k == key for k, _ in self._entries)

    def __eq__(self: Self, other: object) -> bool:
        if isinstance(other, _BaseMultimap):
            return list(self._entries) == list(other._entries)
        return NotImplemented

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({list(self._entries)!r})"

    def get_all(self: Self, key: str) -> list[str | None]:
        return [v for k, v in self._entries if k == key]

    def get_first(self: Self, key: str, default: str | None = None) -> str | None:
        for k, v in self._entries:
            if k == key:
                return v
        return default

    def entry_count(self: Self) -> int:
        """Number of (key, value) pairs, counting repeated keys."""
        return len(self._entries)

    def flatten(self: Self) -> FlatEntries:
        return FlatEntries(self._entries)

    def deep_copy(self: Self) -> "Multimap":
        """Returns a new builder that shares no storage with this multimap."""
        return Multimap(self._entries)


class Multimap(_BaseMultimap):
    """Mutable builder. Mutators return self so that calls can be chained."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self: Self, entries: Iterable[Entry] = ()) -> None:
        self._entries: list[Entry] = list(entries)

    def add(self: Self, key: str, value: str | None) -> Self:
        self._entries.append((key, value))
        return self

    def replace_values(self: Self, key: str, value: str | None) -> Self:
        """Drops every value for key, then appends the single new value at the end."""
        self.remove_all_values(key)
        return self.add(key, value)

    def remove(self: Self, key: str, value: str | None) -> Self:
        """Removes the first (key, value) pair. Does nothing if there is no such pair."""
        if (key, value) in self._entries:
            self._entries.remove((key, value))
        return self

    def remove_all_values(self: Self, key: str) -> Self:
        self._entries[:] = [(k, v) for k, v in self._entries if k != key]
        return self

    def immutable(self: Self) -> "ImmutableMultimap":
        """Returns a snapshot of the current contents. Later mutation of this builder does not affect it."""
        return ImmutableMultimap(self._entries)


class ImmutableMultimap(_BaseMultimap):
    """Read-only snapshot, safe to share between owners. Use deep_copy() to get a builder."""

    def __init__(self: Self, entries: Iterable[Entry] = ()) -> None:
        self._entries: tuple[Entry, ...] = tuple(entries)

    def __hash__(self: Self) -> int:
        return hash(self._entries)

    def immutable(self: Self) -> Self:
        return self


EMPTY: ImmutableMultimap = ImmutableMultimap()
