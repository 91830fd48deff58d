"""
Active download report across every library folder.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from ..errors import KeyValuesFileError, MalformedDocument
from ..utils.paths import DOWNLOADING_DIR
from .download_state import DownloadState, has_progress, progress_percent, resolve_download_state
from .manifests import ManifestRecord, load_manifest
from .topology import manifest_paths

logger = logging.getLogger(__name__)


@dataclass
class DownloadProgress:
    app_id: str
    state: DownloadState
    bytes_downloaded: Optional[int] = None
    bytes_total: Optional[int] = None
    progress_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'app_id': self.app_id,
            'state': self.state.value,
            'bytes_downloaded': self.bytes_downloaded,
            'bytes_total': self.bytes_total,
            'progress_percent': self.progress_percent,
        }


def has_active_download_dir(library_folder: str, app_id: str) -> bool:
    """Steam stages in-flight content under steamapps/downloading/<appid>."""
    return os.path.isdir(os.path.join(library_folder, DOWNLOADING_DIR, str(app_id)))


def download_progress(record: ManifestRecord, active_download_dir: bool = False) -> Optional[DownloadProgress]:
    """DownloadProgress for a manifest, or None if the app is idle."""
    state = resolve_download_state(
        record.state_flags,
        progress=has_progress(record.bytes_downloaded, record.bytes_total),
        active_download_dir=active_download_dir,
    )
    if state is None:
        return None
    return DownloadProgress(
        app_id=record.app_id,
        state=state,
        bytes_downloaded=record.bytes_downloaded,
        bytes_total=record.bytes_total,
        progress_percent=progress_percent(record.bytes_downloaded, record.bytes_total),
    )


def collect_downloads(folders: Iterable[str]) -> Dict[str, DownloadProgress]:
    """Every app mid-download/install in the given library folders.

    A manifest that cannot be read is skipped so one bad file does not hide
    the rest. When an app has manifests in several folders the first
    folder reporting activity wins.
    """
    downloads: Dict[str, DownloadProgress] = {}
    for folder in folders:
        for app_id, path in manifest_paths(folder):
            if app_id in downloads:
                continue
            try:
                record = load_manifest(path, app_id, folder)
            except (KeyValuesFileError, MalformedDocument) as e:
                logger.warning(f"[Downloads] Skipping manifest: {e}")
                continue

            progress = download_progress(record, has_active_download_dir(folder, app_id))
            if progress is not None:
                downloads[app_id] = progress

    logger.debug(f"[Downloads] {len(downloads)} active download(s)")
    return downloads
