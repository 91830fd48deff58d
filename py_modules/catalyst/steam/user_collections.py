"""
User collection (tag) extraction from Steam user configuration.

sharedconfig.vdf and localconfig.vdf both carry an "apps" section keyed by
appid, and each app may have a "tags" object. Depending on the file and
client version that section sits at different depths, so every "apps"
object in the tree is scanned and the results merged.

Tag objects mix real names with index keys and flags, e.g.::

    "tags"
    {
        "0"     "Favorites"
        "1"     "Co-op"
    }

so candidates pass through a noise filter before they are accepted.
"""

import logging
from typing import Dict, Iterable, Iterator, Mapping, Optional, Set

from ..errors import KeyValuesFileError, MalformedDocument
from ..keyvalues import KVObject, find_all_objects, find_object, load_document
from .topology import is_digits

logger = logging.getLogger(__name__)

NOISE_VALUES = frozenset({"0", "1", "true", "false"})


def clean_collection_name(candidate: str) -> Optional[str]:
    """The candidate as a collection name, or None if it is noise."""
    name = candidate.strip("\0 \t\r\n\f\v").strip()
    if not name or name in NOISE_VALUES or is_digits(name):
        return None
    return name


def _leaves(value) -> Iterator[str]:
    if isinstance(value, str):
        yield value
        return
    for _key, child in value:
        yield from _leaves(child)


def _tag_candidates(tags: KVObject) -> Iterator[str]:
    for key, value in tags:
        yield key
        yield from _leaves(value)


def extract_collections(document: KVObject) -> Dict[str, Set[str]]:
    """Map appid -> collection names found in one configuration document."""
    result: Dict[str, Set[str]] = {}
    for apps in find_all_objects(document, "apps"):
        for app_id, app_section in apps:
            if not is_digits(app_id) or not isinstance(app_section, KVObject):
                continue
            tags = find_object(app_section, "tags")
            if tags is None:
                continue
            for candidate in _tag_candidates(tags):
                name = clean_collection_name(candidate)
                if name is not None:
                    result.setdefault(app_id, set()).add(name)
    return result


def merge_collections(*maps: Mapping[str, Iterable[str]]) -> Dict[str, Set[str]]:
    """Union several appid -> names maps."""
    merged: Dict[str, Set[str]] = {}
    for collection_map in maps:
        for app_id, names in collection_map.items():
            merged.setdefault(app_id, set()).update(names)
    return merged


def load_collections(paths: Iterable[str]) -> Dict[str, Set[str]]:
    """Extract and merge collections from several configuration files.

    Missing files are skipped silently; unreadable or malformed ones are
    skipped with a warning.
    """
    maps = []
    for path in paths:
        try:
            document = load_document(path)
        except KeyValuesFileError as e:
            if isinstance(e.cause, FileNotFoundError):
                logger.debug(f"[Collections] {path} not found")
            else:
                logger.warning(f"[Collections] Skipping {path}: {e}")
            continue
        except MalformedDocument as e:
            logger.warning(f"[Collections] Skipping malformed file: {e}")
            continue
        found = extract_collections(document)
        logger.debug(f"[Collections] {path}: {len(found)} app(s) with collections")
        maps.append(found)
    return merge_collections(*maps)
