"""
Case-insensitive navigation and in-place mutation of KeyValues documents.

Steam is inconsistent about key case ("Apps" vs "apps", "LaunchOptions" vs
"launchoptions"), so every lookup here folds case. When duplicates exist the
first entry in document order wins.

Mutations never reorder unrelated siblings: replacements happen in place and
new entries are appended at the end of their object.
"""

from typing import Iterable, List, Optional

from .document import KVObject, Value


def _same(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def find(obj: KVObject, key: str) -> Optional[Value]:
    """First value stored under ``key``, or None."""
    for entry_key, value in obj:
        if _same(entry_key, key):
            return value
    return None


def find_object(obj: KVObject, key: str) -> Optional[KVObject]:
    """First object stored under ``key``, skipping leaves with that key."""
    for entry_key, value in obj:
        if isinstance(value, KVObject) and _same(entry_key, key):
            return value
    return None


def find_leaf(obj: KVObject, key: str) -> Optional[str]:
    """First leaf stored under ``key``, skipping objects with that key."""
    for entry_key, value in obj:
        if isinstance(value, str) and _same(entry_key, key):
            return value
    return None


def find_path(root: KVObject, keys: Iterable[str]) -> Optional[KVObject]:
    """Follow ``keys`` through nested objects without creating anything."""
    current = root
    for key in keys:
        child = find_object(current, key)
        if child is None:
            return None
        current = child
    return current


def find_all_objects(root: KVObject, key: str) -> List[KVObject]:
    """Every object, at any depth, stored under ``key``.

    The same logical section shows up at different depths depending on the
    file and client version, so callers search instead of assuming a schema.
    Results are in document order (pre-order, depth-first).
    """
    found: List[KVObject] = []
    stack = [iter(root.entries)]
    while stack:
        try:
            entry_key, value = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if isinstance(value, KVObject):
            if _same(entry_key, key):
                found.append(value)
            stack.append(iter(value.entries))
    return found


def find_leaf_deep(root: KVObject, key: str) -> Optional[str]:
    """First leaf, at any depth, stored under ``key`` (pre-order)."""
    stack = [iter(root.entries)]
    while stack:
        try:
            entry_key, value = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if isinstance(value, KVObject):
            stack.append(iter(value.entries))
        elif _same(entry_key, key):
            return value
    return None


def ensure_path(root: KVObject, keys: Iterable[str]) -> KVObject:
    """Walk ``keys``, creating missing objects, and return the last one.

    Destructive: a leaf found where an object is needed is replaced, in its
    original position, by an empty object. Only call this on paths that are
    about to be populated.
    """
    current = root
    for key in keys:
        current = _ensure_child_object(current, key)
    return current


def _ensure_child_object(obj: KVObject, key: str) -> KVObject:
    first_leaf = None
    for index, (entry_key, value) in enumerate(obj.entries):
        if not _same(entry_key, key):
            continue
        if isinstance(value, KVObject):
            return value
        if first_leaf is None:
            first_leaf = index

    child = KVObject()
    if first_leaf is not None:
        obj.entries[first_leaf] = (obj.entries[first_leaf][0], child)
    else:
        obj.append(key, child)
    return child


def set_leaf(obj: KVObject, key: str, text: str) -> None:
    """Store ``text`` under ``key``.

    The first matching entry is replaced in place (keeping its original key
    spelling) and any later duplicates are dropped, so the value read back by
    find() is the one just written. Otherwise the entry is appended.
    """
    replaced = False
    kept = []
    for entry_key, value in obj.entries:
        if _same(entry_key, key):
            if replaced:
                continue
            kept.append((entry_key, text))
            replaced = True
        else:
            kept.append((entry_key, value))
    if not replaced:
        kept.append((key, text))
    obj.entries[:] = kept


def remove_entry(obj: KVObject, key: str) -> int:
    """Delete every entry stored under ``key``. Returns how many went."""
    before = len(obj.entries)
    obj.entries[:] = [(k, v) for k, v in obj.entries if not _same(k, key)]
    return before - len(obj.entries)
