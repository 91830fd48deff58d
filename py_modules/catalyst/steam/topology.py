"""
Steam filesystem topology.

Finds the Steam install root, the library folders declared in
libraryfolders.vdf, and the app manifests inside each library folder.
"""

import logging
import os
import re
from typing import Iterable, List, Optional, Tuple

from ..errors import KeyValuesFileError, MalformedDocument
from ..keyvalues import KVObject, find_leaf, find_object, load_document
from ..utils.paths import (
    CONFIG_DIR,
    LIBRARY_FOLDERS_FILE,
    STEAMAPPS_DIR,
    candidate_steam_roots,
    normalize_path,
)

logger = logging.getLogger(__name__)

MANIFEST_PATTERN = re.compile(r"^appmanifest_(\d+)\.acf$", re.IGNORECASE)


def is_digits(text: str) -> bool:
    """True for a non-empty run of ASCII digits."""
    return bool(text) and text.isascii() and text.isdigit()


def is_steam_root(path: Optional[str]) -> bool:
    return bool(path) and os.path.isdir(os.path.join(path, STEAMAPPS_DIR))


def find_steam_root(override: Optional[str] = None,
                    candidates: Optional[List[str]] = None) -> Optional[str]:
    """Locate the Steam install root.

    Args:
        override: Explicit root supplied by the application. Used only if it
            holds a steamapps directory; there is no fallback to probing.
        candidates: Paths to probe instead of this platform's defaults

    Returns:
        The root path, or None when Steam does not appear to be installed
    """
    if override:
        override = os.path.expanduser(override)
        if is_steam_root(override):
            return override
        logger.warning(f"[Topology] Override {override} has no {STEAMAPPS_DIR} directory")
        return None

    for path in candidates if candidates is not None else candidate_steam_roots():
        if is_steam_root(path):
            logger.debug(f"[Topology] Found Steam root: {path}")
            return path

    logger.debug("[Topology] No Steam installation found")
    return None


def library_index_path(root: str) -> Optional[str]:
    """libraryfolders.vdf under steamapps, or the older copy under config."""
    for path in (
        os.path.join(root, STEAMAPPS_DIR, LIBRARY_FOLDERS_FILE),
        os.path.join(root, CONFIG_DIR, LIBRARY_FOLDERS_FILE),
    ):
        if os.path.isfile(path):
            return path
    return None


def parse_library_paths(document: KVObject) -> List[str]:
    """Library paths declared in a parsed libraryfolders.vdf.

    Current clients write one object per library with a "path" leaf. Older
    clients wrote bare numbered leaves ("1" "D:\\\\SteamLibrary"), which are
    read only when no "path" entries exist.
    """
    section = find_object(document, "libraryfolders") or document

    paths = []
    for _key, value in section:
        if isinstance(value, KVObject):
            path = find_leaf(value, "path")
            if path:
                paths.append(path)

    if not paths:
        for key, value in section:
            if isinstance(value, str) and is_digits(key) and value:
                paths.append(value)

    return paths


def library_folders(root: str) -> List[str]:
    """All steamapps folders for a root: the root's own first, then declared libraries."""
    folders = [os.path.join(root, STEAMAPPS_DIR)]

    index_path = library_index_path(root)
    if index_path:
        try:
            declared = parse_library_paths(load_document(index_path))
        except (KeyValuesFileError, MalformedDocument) as e:
            logger.warning(f"[Topology] Ignoring library index: {e}")
            declared = []
        folders.extend(os.path.join(path, STEAMAPPS_DIR) for path in declared)

    seen = set()
    unique = []
    for folder in folders:
        key = normalize_path(folder)
        if key not in seen:
            seen.add(key)
            unique.append(folder)

    logger.debug(f"[Topology] {len(unique)} library folder(s): {unique}")
    return unique


def list_library_folders(override: Optional[str] = None) -> List[str]:
    """Library folders of the detected (or overridden) root; empty if none."""
    root = find_steam_root(override)
    if not root:
        return []
    return library_folders(root)


def manifest_paths(library_folder: str) -> List[Tuple[str, str]]:
    """(app_id, manifest path) for every appmanifest_<id>.acf in a folder."""
    try:
        names = os.listdir(library_folder)
    except OSError:
        return []

    found = []
    for name in names:
        match = MANIFEST_PATTERN.match(name)
        if match:
            found.append((match.group(1), os.path.join(library_folder, name)))
    found.sort(key=lambda item: int(item[0]))
    return found


def installed_app_ids(folders: Iterable[str]) -> List[str]:
    """App ids with a manifest in any folder, from file names alone."""
    ids = set()
    for folder in folders:
        ids.update(app_id for app_id, _ in manifest_paths(folder))
    return sorted(ids, key=int)
