"""
Local Steam client facade.

Single entry point the library application uses to read and edit the local
Steam client's state. Every call re-reads the files it needs; nothing is
cached between calls except the resolved install root and user.
"""

import logging
import os
import shutil
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import CatalystError, KeyValuesFileError, MalformedDocument, SteamNotFoundError
from ..keyvalues import KVObject, dumps, load_document, save_document
from .compat_tools import list_compat_tools
from .downloads import collect_downloads
from .manifests import find_manifest, load_manifest, manifest_path
from .settings import (
    GameSettings,
    apply_compat_tool,
    apply_game_settings,
    apply_hidden,
    read_game_settings,
    read_hidden,
)
from .topology import find_steam_root, installed_app_ids, library_folders
from .user import UserConfigPaths, find_user_id
from .user_collections import load_collections

logger = logging.getLogger(__name__)


@dataclass
class InstallationDetails:
    install_path: Optional[str] = None
    size_on_disk_bytes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InstallLocation:
    path: str
    free_space_bytes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _load_optional(path: str) -> Optional[KVObject]:
    """Parse a file that may legitimately not exist yet."""
    if not os.path.exists(path):
        return None
    return load_document(path)


class SteamLocalClient:
    """Reads install/download state, collections and per-game settings.

    Args:
        root_override: Steam install root chosen by the user, if any
        steam_id: Steam64 ID of the linked account, if any
        backup: Keep a .backup copy of configuration files before rewriting them
    """

    def __init__(self, root_override: Optional[str] = None, steam_id: Optional[str] = None,
                 backup: bool = True):
        self.root_override = root_override
        self.steam_id = steam_id
        self.backup = backup
        self._root: Optional[str] = None
        self._user_id: Optional[str] = None

    # ---- topology ----

    @property
    def root(self) -> Optional[str]:
        if self._root is None:
            self._root = find_steam_root(self.root_override)
        return self._root

    def library_folders(self) -> List[str]:
        root = self.root
        return library_folders(root) if root else []

    def user_paths(self) -> Optional[UserConfigPaths]:
        root = self.root
        if not root:
            return None
        if self._user_id is None:
            self._user_id = find_user_id(root, self.steam_id)
        if not self._user_id:
            return None
        return UserConfigPaths(root, self._user_id)

    def get_status(self) -> Dict[str, Any]:
        paths = self.user_paths()
        return {
            'installed': self.root is not None,
            'root': self.root,
            'library_folders': self.library_folders(),
            'user_id': paths.user_id if paths else None,
        }

    # ---- installs and downloads ----

    def list_installed_app_ids(self) -> List[str]:
        return installed_app_ids(self.library_folders())

    def list_downloads(self) -> List[Dict[str, Any]]:
        downloads = collect_downloads(self.library_folders())
        return [progress.to_dict() for _, progress in sorted(downloads.items(), key=lambda item: int(item[0]))]

    def get_installation_details(self, app_id: Union[str, int]) -> Optional[Dict[str, Any]]:
        """Install path and size on disk, or None when the app is not installed."""
        app_id = str(app_id)
        folder = find_manifest(self.library_folders(), app_id)
        if folder is None:
            return None
        try:
            record = load_manifest(manifest_path(folder, app_id), app_id, folder)
        except (KeyValuesFileError, MalformedDocument) as e:
            logger.warning(f"[SteamLocal] Could not read manifest for {app_id}: {e}")
            return None
        return InstallationDetails(record.install_path, record.size_on_disk).to_dict()

    def list_install_locations(self) -> List[Dict[str, Any]]:
        """Library folders a game can be installed to, with free space."""
        locations = []
        for folder in self.library_folders():
            if not os.path.isdir(folder):
                continue
            try:
                free = shutil.disk_usage(folder).free
            except OSError as e:
                logger.debug(f"[SteamLocal] disk_usage failed for {folder}: {e}")
                free = None
            locations.append(InstallLocation(os.path.dirname(folder), free).to_dict())
        return locations

    # ---- collections ----

    def import_collections(self) -> Dict[str, List[str]]:
        """appid -> sorted collection names from the user's configuration."""
        paths = self.user_paths()
        if paths is None:
            return {}
        collections = load_collections(paths.collection_sources())
        logger.info(f"[SteamLocal] Imported collections for {len(collections)} app(s)")
        return {app_id: sorted(names) for app_id, names in collections.items()}

    # ---- settings ----

    def get_game_settings(self, app_id: Union[str, int]) -> Dict[str, Any]:
        """Stored settings for a game (defaults when nothing is stored).

        Raises:
            KeyValuesFileError, MalformedDocument: A configuration file exists but can't be read
        """
        paths = self.user_paths()
        if paths is None:
            return GameSettings().to_dict()
        localconfig = _load_optional(paths.localconfig)
        config = _load_optional(paths.config_vdf)
        return read_game_settings(localconfig, str(app_id), config).to_dict()

    def set_game_settings(self, app_id: Union[str, int],
                          settings: Union[GameSettings, Mapping[str, Any]]) -> Dict[str, Any]:
        """Apply settings to localconfig.vdf and config.vdf.

        Each file is read once, edited in memory and written once.

        Returns:
            {"success": True} or {"success": False, "error": "..."}
        """
        app_id = str(app_id)
        try:
            if not isinstance(settings, GameSettings):
                settings = GameSettings.from_dict(settings)

            paths = self._require_user_paths()

            # Read and edit both files before writing either
            localconfig = load_document(paths.localconfig)
            localconfig_before = dumps(localconfig)
            apply_game_settings(localconfig, app_id, settings)

            # config.vdf only needs to exist when a tool is being forced
            config = _load_optional(paths.config_vdf)
            if config is None and settings.force_compat_tool:
                config = KVObject()
            config_before = dumps(config) if config is not None else None
            if config is not None:
                apply_compat_tool(config, app_id, settings.force_compat_tool, settings.compat_tool)

            if dumps(localconfig) != localconfig_before:
                save_document(paths.localconfig, localconfig, backup=self.backup)
            if config is not None and dumps(config) != config_before:
                save_document(paths.config_vdf, config, backup=self.backup)
        except CatalystError as e:
            logger.error(f"[SteamLocal] Could not save settings for {app_id}: {e}")
            return {'success': False, 'error': str(e)}

        logger.info(f"[SteamLocal] Saved settings for app {app_id}")
        return {'success': True}

    def get_privacy_settings(self, app_id: Union[str, int]) -> Dict[str, Any]:
        paths = self.user_paths()
        localconfig = _load_optional(paths.localconfig) if paths else None
        return {'hideInLibrary': read_hidden(localconfig, str(app_id))}

    def set_privacy_settings(self, app_id: Union[str, int], hide_in_library: bool) -> Dict[str, Any]:
        app_id = str(app_id)
        try:
            paths = self._require_user_paths()
            localconfig = load_document(paths.localconfig)
            apply_hidden(localconfig, app_id, hide_in_library)
            save_document(paths.localconfig, localconfig, backup=self.backup)
        except CatalystError as e:
            logger.error(f"[SteamLocal] Could not save privacy settings for {app_id}: {e}")
            return {'success': False, 'error': str(e)}
        return {'success': True}

    def list_compat_tools(self) -> List[Dict[str, Any]]:
        root = self.root
        if not root:
            return []
        return [tool.to_dict() for tool in list_compat_tools(root, self.library_folders())]

    def _require_user_paths(self) -> UserConfigPaths:
        paths = self.user_paths()
        if paths is None:
            raise SteamNotFoundError("No Steam installation or user found")
        return paths
