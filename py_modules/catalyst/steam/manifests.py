"""
App manifest (appmanifest_<id>.acf) interpreter.

Manifest layout changes between client versions, so each field is found by
scanning the whole tree for its key instead of following a fixed path.
Numeric fields that are missing or unparseable come back as None.
"""

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from ..keyvalues import KVObject, find_leaf_deep, load_document
from ..utils.paths import COMMON_DIR

logger = logging.getLogger(__name__)

DOWNLOADED_KEYS = ("BytesDownloaded", "BytesDownloadedOnCurrentRun")
TOTAL_KEYS = ("BytesToDownload", "TotalDownloaded")


@dataclass
class ManifestRecord:
    """Install metadata for one app, read fresh from its manifest."""
    app_id: str
    install_dir: Optional[str] = None
    size_on_disk: Optional[int] = None
    state_flags: Optional[int] = None
    bytes_downloaded: Optional[int] = None
    bytes_total: Optional[int] = None
    library_folder: Optional[str] = None

    @property
    def install_path(self) -> Optional[str]:
        """steamapps/common/<installdir>, when both parts are known."""
        if not self.install_dir or not self.library_folder:
            return None
        return os.path.join(self.library_folder, COMMON_DIR, self.install_dir)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_int(text: Optional[str]) -> Optional[int]:
    """Integer value of a leaf, or None if absent or not a whole number."""
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def _first_int(document: KVObject, keys: Tuple[str, ...]) -> Optional[int]:
    for key in keys:
        value = find_leaf_deep(document, key)
        if value is not None:
            return parse_int(value)
    return None


def read_manifest(document: KVObject, app_id: str,
                  library_folder: Optional[str] = None) -> ManifestRecord:
    """Extract a ManifestRecord from a parsed manifest."""
    install_dir = find_leaf_deep(document, "installdir")
    return ManifestRecord(
        app_id=str(app_id),
        install_dir=install_dir or None,
        size_on_disk=parse_int(find_leaf_deep(document, "SizeOnDisk")),
        state_flags=parse_int(find_leaf_deep(document, "StateFlags")),
        bytes_downloaded=_first_int(document, DOWNLOADED_KEYS),
        bytes_total=_first_int(document, TOTAL_KEYS),
        library_folder=library_folder,
    )


def manifest_path(library_folder: str, app_id: str) -> str:
    return os.path.join(library_folder, f"appmanifest_{app_id}.acf")


def load_manifest(path: str, app_id: str, library_folder: Optional[str] = None) -> ManifestRecord:
    """Read and interpret one manifest file.

    Raises:
        KeyValuesFileError: The file could not be read
        MalformedDocument: The file is not a valid document
    """
    logger.debug(f"[Manifests] Reading {path}")
    return read_manifest(load_document(path), app_id, library_folder)


def find_manifest(folders: Iterable[str], app_id: str) -> Optional[str]:
    """First library folder holding a manifest for ``app_id``."""
    for folder in folders:
        if os.path.isfile(manifest_path(folder, app_id)):
            return folder
    return None
