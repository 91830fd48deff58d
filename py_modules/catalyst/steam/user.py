"""
Steam User Detection Utilities

Resolves which userdata/<account id> folder belongs to the linked Steam
account, and where that user's configuration files live.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from ..errors import KeyValuesFileError, MalformedDocument
from ..keyvalues import KVObject, find_leaf, find_object, load_document
from ..utils.paths import (
    CONFIG_DIR,
    CONFIG_VDF,
    LOCALCONFIG_VDF,
    LOGINUSERS_VDF,
    SHAREDCONFIG_PARTS,
    USERDATA_DIR,
)
from .topology import is_digits

logger = logging.getLogger(__name__)


def account_id_from_steam64(steam64_id: str) -> Optional[str]:
    """Convert a Steam64 ID to the account ID used for userdata folders (lower 32 bits)."""
    try:
        return str(int(str(steam64_id).strip()) & 0xFFFFFFFF)
    except ValueError:
        logger.warning(f"[SteamUser] Invalid Steam64ID: {steam64_id}")
        return None


def _userdata_exists(steam_path: str, account_id: str) -> bool:
    return os.path.isdir(os.path.join(steam_path, USERDATA_DIR, account_id))


def find_user_id(steam_path: str, steam_id: Optional[str] = None) -> Optional[str]:
    """
    Get the account ID (userdata folder name) to read configuration from.

    Order: the linked Steam64 ID when given, then the MostRecent entry of
    loginusers.vdf, then the most recently modified userdata folder
    (excluding user 0).

    Args:
        steam_path: Steam install root
        steam_id: Steam64 ID of the linked account, if known

    Returns:
        Account ID string or None
    """
    if steam_id:
        account_id = account_id_from_steam64(steam_id)
        if account_id and _userdata_exists(steam_path, account_id):
            return account_id
        logger.debug(f"[SteamUser] No userdata folder for linked account {steam_id}")

    user_id = _get_user_from_loginusers(steam_path)
    if user_id:
        logger.debug(f"[SteamUser] Found logged-in user from loginusers.vdf: {user_id}")
        return user_id

    user_id = _get_user_from_mtime(steam_path)
    if user_id:
        logger.debug(f"[SteamUser] Fallback: Using mtime-based user detection: {user_id}")
        return user_id

    logger.debug("[SteamUser] Could not detect a Steam user")
    return None


def _get_user_from_loginusers(steam_path: str) -> Optional[str]:
    """The MostRecent user in loginusers.vdf whose userdata folder exists."""
    loginusers_path = os.path.join(steam_path, CONFIG_DIR, LOGINUSERS_VDF)
    if not os.path.isfile(loginusers_path):
        return None

    try:
        document = load_document(loginusers_path)
    except (KeyValuesFileError, MalformedDocument) as e:
        logger.warning(f"[SteamUser] Error reading loginusers.vdf: {e}")
        return None

    users = find_object(document, "users") or KVObject()
    for steam64_id, user_info in users:
        if not isinstance(user_info, KVObject):
            continue
        if (find_leaf(user_info, "MostRecent") or "").strip() != "1":
            continue
        account_id = account_id_from_steam64(steam64_id)
        if account_id and _userdata_exists(steam_path, account_id):
            return account_id
        logger.warning(f"[SteamUser] MostRecent user {account_id} folder doesn't exist")
    return None


def _get_user_from_mtime(steam_path: str) -> Optional[str]:
    """Most recently modified numeric userdata folder. User 0 is a meta-directory, not a real user."""
    userdata_path = os.path.join(steam_path, USERDATA_DIR)
    try:
        names = os.listdir(userdata_path)
    except OSError:
        return None

    user_dirs = []
    for name in names:
        if not is_digits(name) or name == "0":
            continue
        dir_path = os.path.join(userdata_path, name)
        if os.path.isdir(dir_path):
            user_dirs.append((name, os.path.getmtime(dir_path)))

    if not user_dirs:
        return None

    user_dirs.sort(key=lambda x: x[1], reverse=True)
    return user_dirs[0][0]


@dataclass
class UserConfigPaths:
    """Locations of one user's configuration files under a Steam root."""
    steam_path: str
    user_id: str

    @property
    def user_dir(self) -> str:
        return os.path.join(self.steam_path, USERDATA_DIR, self.user_id)

    @property
    def localconfig(self) -> str:
        return os.path.join(self.user_dir, CONFIG_DIR, LOCALCONFIG_VDF)

    @property
    def sharedconfig(self) -> str:
        return os.path.join(self.user_dir, *SHAREDCONFIG_PARTS)

    @property
    def config_vdf(self) -> str:
        # config.vdf is per install, not per user
        return os.path.join(self.steam_path, CONFIG_DIR, CONFIG_VDF)

    def collection_sources(self) -> List[str]:
        return [self.sharedconfig, self.localconfig]
