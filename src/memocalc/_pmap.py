"""Persistent hash map with structural sharing.

`PersistentMap` is a hash array mapped trie (HAMT). Each level of the trie
consumes 5 bits of the key hash and stores its children in a tuple indexed
through a 32-bit occupancy bitmap. Setting a key copies only the nodes on
the path from the root to the key (O(log32 n)); every other node is shared
between the old and the new map, so the old map remains valid and unchanged.

Keys with identical 64-bit hashes end up in a collision bucket.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

K = TypeVar("K")
V = TypeVar("V")

_BITS = 5
_MASK = (1 << _BITS) - 1
_HASH_MASK = (1 << 64) - 1


def _hash(key: object) -> int:
    return hash(key) & _HASH_MASK


@dataclass(frozen=True, slots=True)
class _Entry:
    """A key/value pair stored in the trie."""

    hash: int
    key: Any
    value: Any


@dataclass(frozen=True, slots=True)
class _Collision:
    """Entries whose keys share the same full hash."""

    hash: int
    entries: tuple[_Entry, ...]

    def get(self, key: object, default: Any) -> Any:
        for entry in self.entries:
            if entry.key == key:
                return entry.value
        return default

    def set(self, entry: _Entry) -> tuple[_Collision, bool]:
        for i, existing in enumerate(self.entries):
            if existing.key == entry.key:
                if existing.value is entry.value:
                    return self, False
                entries = (*self.entries[:i], entry, *self.entries[i + 1 :])
                return _Collision(self.hash, entries), False
        return _Collision(self.hash, (*self.entries, entry)), True

    def __iter__(self) -> Iterator[_Entry]:
        return iter(self.entries)


@dataclass(frozen=True, slots=True)
class _Branch:
    """Bitmap-indexed trie node.

    Bit ``i`` of `bitmap` is set when the hash chunk ``i`` is occupied; the
    child for chunk ``i`` is stored at position ``popcount(bitmap & (2**i - 1))``
    of `children`.
    """

    bitmap: int
    children: tuple[_Entry | _Collision | _Branch, ...]

    def get(self, key_hash: int, key: object, shift: int, default: Any) -> Any:
        bit = 1 << ((key_hash >> shift) & _MASK)
        if not self.bitmap & bit:
            return default
        child = self.children[(self.bitmap & (bit - 1)).bit_count()]
        match child:
            case _Entry():
                return child.value if child.key == key else default
            case _Collision():
                return child.get(key, default) if child.hash == key_hash else default
            case _Branch():
                return child.get(key_hash, key, shift + _BITS, default)

    def set(self, entry: _Entry, shift: int) -> tuple[_Branch, bool]:
        """Return a branch containing `entry` and whether a new key was added."""
        bit = 1 << ((entry.hash >> shift) & _MASK)
        index = (self.bitmap & (bit - 1)).bit_count()

        if not self.bitmap & bit:
            children = (*self.children[:index], entry, *self.children[index:])
            return _Branch(self.bitmap | bit, children), True

        child = self.children[index]
        added = True
        match child:
            case _Entry() if child.key == entry.key:
                if child.value is entry.value:
                    return self, False
                replacement: _Entry | _Collision | _Branch = entry
                added = False
            case _Collision() if child.hash == entry.hash:
                replacement, added = child.set(entry)
            case _Branch():
                replacement, added = child.set(entry, shift + _BITS)
            case _:
                replacement = _merge(child, entry, shift + _BITS)

        if replacement is child:
            return self, False
        children = (*self.children[:index], replacement, *self.children[index + 1 :])
        return _Branch(self.bitmap, children), added

    def __iter__(self) -> Iterator[_Entry]:
        for child in self.children:
            if isinstance(child, _Entry):
                yield child
            else:
                yield from child


def _merge(existing: _Entry | _Collision, entry: _Entry, shift: int) -> _Collision | _Branch:
    """Build the smallest subtree holding two children with different keys."""
    if existing.hash == entry.hash:
        if isinstance(existing, _Collision):
            collision, _ = existing.set(entry)
            return collision
        return _Collision(entry.hash, (existing, entry))

    existing_chunk = (existing.hash >> shift) & _MASK
    entry_chunk = (entry.hash >> shift) & _MASK
    if existing_chunk == entry_chunk:
        return _Branch(1 << entry_chunk, (_merge(existing, entry, shift + _BITS),))
    if existing_chunk < entry_chunk:
        children: tuple[_Entry | _Collision, ...] = (existing, entry)
    else:
        children = (entry, existing)
    return _Branch((1 << existing_chunk) | (1 << entry_chunk), children)


_EMPTY_BRANCH = _Branch(0, ())
_MISSING = object()


@dataclass(frozen=True, slots=True, eq=False)
class PersistentMap(Mapping[K, V]):
    """An immutable mapping where updates return new maps.

    Equality follows the `Mapping` protocol: two maps are equal when they
    hold the same key/value pairs.

    Example:
        >>> empty = PersistentMap()
        >>> one = empty.set("a", 1)
        >>> one["a"], len(empty)
        (1, 0)

    """

    _root: _Branch = _EMPTY_BRANCH
    _size: int = 0

    @classmethod
    def from_items(cls, items: Mapping[K, V] | list[tuple[K, V]]) -> PersistentMap[K, V]:
        """Build a map from a mapping or a list of (key, value) pairs."""
        pairs = items.items() if isinstance(items, Mapping) else items
        result: PersistentMap[K, V] = cls()
        for key, value in pairs:
            result = result.set(key, value)
        return result

    def set(self, key: K, value: V) -> PersistentMap[K, V]:
        """Return a map with `key` bound to `value`.

        The receiver is left unchanged. If `key` is already bound to the very
        same value object, the receiver itself is returned.
        """
        root, added = self._root.set(_Entry(_hash(key), key, value), 0)
        if root is self._root:
            return self
        return PersistentMap(root, self._size + 1 if added else self._size)

    def __getitem__(self, key: K) -> V:
        value = self._root.get(_hash(key), key, 0, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return self._root.get(_hash(key), key, 0, _MISSING) is not _MISSING

    def __iter__(self) -> Iterator[K]:
        return (entry.key for entry in self._root)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        items = ", ".join(f"{entry.key!r}: {entry.value!r}" for entry in self._root)
        return f"{type(self).__name__}({{{items}}})"
