"""
KeyValues document model.

A document value is either a text leaf (a plain ``str``) or a ``KVObject``:
an ordered list of ``(key, value)`` entries. Duplicate keys are allowed and
insertion order is preserved, because Steam's own files contain both.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

Value = Union[str, "KVObject"]
Entry = Tuple[str, Value]


class KVObject:
    """Ordered, duplicate-key-tolerant collection of KeyValues entries."""

    __slots__ = ("entries",)

    def __init__(self, entries: Optional[Iterable[Entry]] = None):
        self.entries: List[Entry] = list(entries) if entries is not None else []

    def append(self, key: str, value: Value) -> None:
        self.entries.append((key, value))

    def keys(self) -> List[str]:
        return [key for key, _ in self.entries]

    def items(self) -> List[Entry]:
        return list(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict view. Nested objects become dicts; first duplicate wins."""
        result: Dict[str, Any] = {}
        for key, value in self.entries:
            if key in result:
                continue
            result[key] = value.to_dict() if isinstance(value, KVObject) else value
        return result

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        # An empty object is still an object, not "missing"
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KVObject):
            return NotImplemented
        return self.entries == other.entries

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"KVObject({self.entries!r})"


def is_object(value: Optional[Value]) -> bool:
    return isinstance(value, KVObject)


def is_leaf(value: Optional[Value]) -> bool:
    return isinstance(value, str)
