"""
Centralized path constants for Steam's on-disk layout.

Candidate install roots are probed in order per operating system; the first
one holding a ``steamapps`` directory wins.
"""
import os
import sys
from typing import List, Optional

STEAMAPPS_DIR = "steamapps"
LIBRARY_FOLDERS_FILE = "libraryfolders.vdf"
DOWNLOADING_DIR = "downloading"
COMMON_DIR = "common"
COMPAT_TOOLS_DIR = "compatibilitytools.d"
COMPAT_TOOL_MANIFEST = "compatibilitytool.vdf"

CONFIG_DIR = "config"
CONFIG_VDF = "config.vdf"
LOGINUSERS_VDF = "loginusers.vdf"
USERDATA_DIR = "userdata"
LOCALCONFIG_VDF = "localconfig.vdf"
# userdata/<id>/7/remote/sharedconfig.vdf (7 is the Steam client's own appid)
SHAREDCONFIG_PARTS = ("7", "remote", "sharedconfig.vdf")

LINUX_STEAM_ROOTS = [
    "~/.steam/steam",
    "~/.steam/root",
    "~/.local/share/Steam",
    "~/.var/app/com.valvesoftware.Steam/.local/share/Steam",
    "~/snap/steam/common/.local/share/Steam",
]

MACOS_STEAM_ROOTS = [
    "~/Library/Application Support/Steam",
]

WINDOWS_STEAM_ROOTS = [
    r"C:\Program Files (x86)\Steam",
    r"C:\Program Files\Steam",
]


def candidate_steam_roots(platform: Optional[str] = None) -> List[str]:
    """Candidate Steam install roots for a platform (defaults to this host)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        candidates = WINDOWS_STEAM_ROOTS
    elif platform == "darwin":
        candidates = MACOS_STEAM_ROOTS
    else:
        candidates = LINUX_STEAM_ROOTS
    return [os.path.expanduser(path) for path in candidates]


def normalize_path(path: str) -> str:
    """Comparison key for a directory path (symlinks resolved, case folded on Windows)."""
    try:
        resolved = os.path.realpath(path)
    except OSError:
        # If realpath fails, just use the original path
        resolved = os.path.abspath(path)
    return os.path.normcase(os.path.normpath(resolved))
