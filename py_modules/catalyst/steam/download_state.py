"""
Install/download state machine.

Steam records an app's install phase as an ``EAppState`` bitmask in its
manifest ("StateFlags"). Several bits are often set at once, so they are
checked in a fixed priority order and reduced to one user-facing state.
"""

import enum
from typing import Optional


class AppState(enum.IntFlag):
    """Steam EAppState bits."""
    INVALID = 0
    UNINSTALLED = 0x1
    UPDATE_REQUIRED = 0x2
    FULLY_INSTALLED = 0x4
    ENCRYPTED = 0x8
    LOCKED = 0x10
    FILES_MISSING = 0x20
    APP_RUNNING = 0x40
    FILES_CORRUPT = 0x80
    UPDATE_RUNNING = 0x100
    UPDATE_PAUSED = 0x200
    UPDATE_STARTED = 0x400
    UNINSTALLING = 0x800
    BACKUP_RUNNING = 0x1000
    RECONFIGURING = 0x10000
    VALIDATING = 0x20000
    ADDING_FILES = 0x40000
    PREALLOCATING = 0x80000
    DOWNLOADING = 0x100000
    STAGING = 0x200000
    COMMITTING = 0x400000
    UPDATE_STOPPING = 0x800000


class DownloadState(enum.Enum):
    PAUSED = "Paused"
    PREALLOCATING = "Preallocating"
    DOWNLOADING = "Downloading"
    UPDATING = "Updating"
    STAGING = "Staging"
    INSTALLING = "Installing"
    VERIFYING = "Verifying"
    QUEUED = "Queued"


def has_progress(bytes_downloaded: Optional[int], bytes_total: Optional[int]) -> bool:
    """Both counters known and the download not yet complete."""
    return (
        bytes_downloaded is not None
        and bytes_total is not None
        and bytes_downloaded < bytes_total
    )


def resolve_download_state(state_flags: Optional[int],
                           progress: bool = False,
                           active_download_dir: bool = False) -> Optional[DownloadState]:
    """Reduce state flags plus filesystem hints to one download state.

    Args:
        state_flags: Raw StateFlags value (None counts as 0)
        progress: Byte counters show an incomplete download
        active_download_dir: steamapps/downloading/<appid> exists

    Returns:
        The state, or None when the app is not mid-operation
    """
    flags = AppState((state_flags or 0) & 0xFFFFFFFF)
    busy = progress or active_download_dir

    if flags & AppState.UPDATE_PAUSED:
        return DownloadState.PAUSED
    if flags & AppState.PREALLOCATING:
        return DownloadState.PREALLOCATING
    if flags & AppState.DOWNLOADING:
        return DownloadState.DOWNLOADING
    if flags & (AppState.UPDATE_RUNNING | AppState.UPDATE_STARTED):
        return DownloadState.DOWNLOADING if busy else DownloadState.UPDATING
    if flags & AppState.STAGING:
        return DownloadState.STAGING
    if flags & (AppState.COMMITTING | AppState.ADDING_FILES):
        return DownloadState.INSTALLING
    if flags & AppState.VALIDATING:
        return DownloadState.VERIFYING
    if busy:
        return DownloadState.QUEUED
    if flags & AppState.UPDATE_REQUIRED and not flags & AppState.FULLY_INSTALLED:
        return DownloadState.QUEUED
    return None


def progress_percent(bytes_downloaded: Optional[int], bytes_total: Optional[int]) -> Optional[float]:
    """Download progress in percent, clamped to 0..100; None if unknown."""
    if bytes_downloaded is None or bytes_total is None or bytes_total <= 0:
        return None
    fraction = min(max(bytes_downloaded / bytes_total, 0.0), 1.0)
    return fraction * 100.0
