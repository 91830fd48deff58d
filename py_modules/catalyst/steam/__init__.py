"""
Local Steam client state: install topology, manifests, download state,
collections and per-game settings.
"""

from .download_state import AppState, DownloadState, has_progress, progress_percent, resolve_download_state
from .downloads import DownloadProgress, collect_downloads, has_active_download_dir
from .manifests import ManifestRecord, find_manifest, load_manifest, read_manifest
from .settings import GameSettings, apply_compat_tool, apply_game_settings, read_game_settings
from .topology import find_steam_root, installed_app_ids, library_folders, list_library_folders, manifest_paths
from .user_collections import extract_collections, load_collections, merge_collections
from .local_client import SteamLocalClient
