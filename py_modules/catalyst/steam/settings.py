"""
Per-game settings editor.

Maps the library UI's game-properties settings onto Steam's own files:

- localconfig.vdf, section UserLocalConfigStore/Software/Valve/Steam/apps/<appid>:
  launch options, overlay, update behaviour, background downloads,
  Steam Input override and the hidden flag
- config.vdf, section InstallConfigStore/Software/Valve/Steam/CompatToolMapping/<appid>:
  forced compatibility tool

Mode strings map through closed lookup tables. "Use the default" is encoded
by removing the leaf, never by writing a sentinel, so Steam falls back to
its global setting. Everything else in the files is left untouched.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..errors import InvalidSettingsError
from ..keyvalues import KVObject, ensure_path, find, find_leaf, find_path, remove_entry, set_leaf

LOCALCONFIG_APPS_PATH = ("UserLocalConfigStore", "Software", "Valve", "Steam", "apps")
COMPAT_MAPPING_PATH = ("InstallConfigStore", "Software", "Valve", "Steam", "CompatToolMapping")

LAUNCH_OPTIONS_KEY = "LaunchOptions"
OVERLAY_KEY = "OverlayAppEnable"
AUTO_UPDATE_KEY = "AutoUpdateBehavior"
BACKGROUND_DOWNLOADS_KEY = "AllowOtherDownloadsWhileRunning"
STEAM_INPUT_KEY = "UseSteamControllerConfig"
HIDDEN_KEY = "hidden"

COMPAT_TOOL_PRIORITY = "250"

# UI mode -> leaf value (None removes the leaf)
AUTOMATIC_UPDATES_MODES: Dict[str, Optional[str]] = {
    "use-global-setting": None,
    "let-steam-decide": "0",
    "wait-until-launch": "1",
    "immediately-download": "2",
}

BACKGROUND_DOWNLOADS_MODES: Dict[str, Optional[str]] = {
    "pause-while-playing-global": None,
    "always-allow": "1",
    "never-allow": "2",
}

STEAM_INPUT_MODES: Dict[str, Optional[str]] = {
    "use-default-settings": None,
    "disable-steam-input": "0",
    "enable-steam-input": "2",
}

DEFAULT_AUTOMATIC_UPDATES = "use-global-setting"
DEFAULT_BACKGROUND_DOWNLOADS = "pause-while-playing-global"
DEFAULT_STEAM_INPUT = "use-default-settings"


def _check_mode(field: str, value: Any, table: Mapping[str, Optional[str]]) -> str:
    if not isinstance(value, str) or value not in table:
        allowed = ", ".join(table)
        raise InvalidSettingsError(f"Invalid {field} {value!r} (expected one of: {allowed})")
    return value


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Nested settings group, or the payload itself when it is flat."""
    value = data.get(name)
    return value if isinstance(value, Mapping) else data


def _typed(record: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = record.get(key)
    return value if isinstance(value, kind) else default


@dataclass
class GameSettings:
    """Normalized per-game settings as exchanged with the library UI.

    The UI persists them grouped as general/updates/controller/compatibility;
    a flat record with the same keys is accepted too.
    """
    launch_options: str = ""
    steam_overlay_enabled: bool = True
    automatic_updates_mode: str = DEFAULT_AUTOMATIC_UPDATES
    background_downloads_mode: str = DEFAULT_BACKGROUND_DOWNLOADS
    steam_input_override: str = DEFAULT_STEAM_INPUT
    force_compat_tool: bool = False
    compat_tool: str = ""

    def __post_init__(self):
        _check_mode("automatic updates mode", self.automatic_updates_mode, AUTOMATIC_UPDATES_MODES)
        _check_mode("background downloads mode", self.background_downloads_mode, BACKGROUND_DOWNLOADS_MODES)
        _check_mode("Steam Input override", self.steam_input_override, STEAM_INPUT_MODES)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameSettings":
        """Build from the UI's settings payload; missing or mistyped values take defaults.

        Raises:
            InvalidSettingsError: A mode is present but outside its closed set
        """
        if not isinstance(data, Mapping):
            raise InvalidSettingsError(f"Settings payload must be an object, got {type(data).__name__}")

        general = _section(data, "general")
        updates = _section(data, "updates")
        controller = _section(data, "controller")
        compatibility = _section(data, "compatibility")

        compat_tool = _typed(compatibility, "steamPlayCompatibilityTool", str, "").strip()

        return cls(
            launch_options=_typed(general, "launchOptions", str, ""),
            steam_overlay_enabled=_typed(general, "steamOverlayEnabled", bool, True),
            automatic_updates_mode=updates.get("automaticUpdatesMode") or DEFAULT_AUTOMATIC_UPDATES,
            background_downloads_mode=updates.get("backgroundDownloadsMode") or DEFAULT_BACKGROUND_DOWNLOADS,
            steam_input_override=controller.get("steamInputOverride") or DEFAULT_STEAM_INPUT,
            force_compat_tool=_typed(compatibility, "forceSteamPlayCompatibilityTool", bool, False),
            compat_tool=compat_tool,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "general": {
                "launchOptions": self.launch_options,
                "steamOverlayEnabled": self.steam_overlay_enabled,
            },
            "updates": {
                "automaticUpdatesMode": self.automatic_updates_mode,
                "backgroundDownloadsMode": self.background_downloads_mode,
            },
            "controller": {
                "steamInputOverride": self.steam_input_override,
            },
            "compatibility": {
                "forceSteamPlayCompatibilityTool": self.force_compat_tool,
                "steamPlayCompatibilityTool": self.compat_tool,
            },
        }


def _set_or_remove(section: KVObject, key: str, value: Optional[str]) -> None:
    if value is None:
        remove_entry(section, key)
    else:
        set_leaf(section, key, value)


def _lookup_mode(table: Mapping[str, Optional[str]], leaf: Optional[str], default: str) -> str:
    if leaf is None:
        return default
    for mode, encoded in table.items():
        if encoded is not None and encoded == leaf.strip():
            return mode
    return default


def app_section(document: KVObject, app_id: str) -> Optional[KVObject]:
    """Existing localconfig section for an app, or None."""
    return find_path(document, LOCALCONFIG_APPS_PATH + (str(app_id),))


def apply_game_settings(document: KVObject, app_id: str, settings: GameSettings) -> None:
    """Write launch/update/input settings into a localconfig.vdf tree in place."""
    section = ensure_path(document, LOCALCONFIG_APPS_PATH + (str(app_id),))

    _set_or_remove(section, LAUNCH_OPTIONS_KEY, settings.launch_options or None)
    _set_or_remove(section, OVERLAY_KEY, None if settings.steam_overlay_enabled else "0")
    _set_or_remove(section, AUTO_UPDATE_KEY, AUTOMATIC_UPDATES_MODES[settings.automatic_updates_mode])
    _set_or_remove(section, BACKGROUND_DOWNLOADS_KEY, BACKGROUND_DOWNLOADS_MODES[settings.background_downloads_mode])
    _set_or_remove(section, STEAM_INPUT_KEY, STEAM_INPUT_MODES[settings.steam_input_override])


def apply_compat_tool(document: KVObject, app_id: str, enabled: bool, tool_name: str = "") -> None:
    """Force (or stop forcing) a compatibility tool in a config.vdf tree in place.

    Enabling without a tool name is treated as disabling.
    """
    app_id = str(app_id)
    if enabled and tool_name:
        mapping = ensure_path(document, COMPAT_MAPPING_PATH)
        entry = ensure_path(mapping, (app_id,))
        set_leaf(entry, "name", tool_name)
        set_leaf(entry, "config", "")
        set_leaf(entry, "priority", COMPAT_TOOL_PRIORITY)
        return

    mapping = find_path(document, COMPAT_MAPPING_PATH)
    if mapping is not None:
        remove_entry(mapping, app_id)


def read_compat_tool(document: Optional[KVObject], app_id: str) -> str:
    """Tool name forced for an app in config.vdf, or "" if none."""
    if document is None:
        return ""
    entry = find_path(document, COMPAT_MAPPING_PATH + (str(app_id),))
    if entry is None:
        return ""
    return find_leaf(entry, "name") or ""


def read_game_settings(document: Optional[KVObject], app_id: str,
                       compat_document: Optional[KVObject] = None) -> GameSettings:
    """Settings currently stored for an app; defaults where nothing is set.

    Unknown encodings read back as the default mode.
    """
    section = app_section(document, app_id) if document is not None else None
    compat_tool = read_compat_tool(compat_document, app_id)

    if section is None:
        return GameSettings(force_compat_tool=bool(compat_tool), compat_tool=compat_tool)

    launch_options = find_leaf(section, LAUNCH_OPTIONS_KEY) or ""
    overlay = find_leaf(section, OVERLAY_KEY)

    return GameSettings(
        launch_options=launch_options,
        steam_overlay_enabled=(overlay is None or overlay.strip() != "0"),
        automatic_updates_mode=_lookup_mode(
            AUTOMATIC_UPDATES_MODES, find_leaf(section, AUTO_UPDATE_KEY), DEFAULT_AUTOMATIC_UPDATES),
        background_downloads_mode=_lookup_mode(
            BACKGROUND_DOWNLOADS_MODES, find_leaf(section, BACKGROUND_DOWNLOADS_KEY), DEFAULT_BACKGROUND_DOWNLOADS),
        steam_input_override=_lookup_mode(
            STEAM_INPUT_MODES, find_leaf(section, STEAM_INPUT_KEY), DEFAULT_STEAM_INPUT),
        force_compat_tool=bool(compat_tool),
        compat_tool=compat_tool,
    )


def read_hidden(document: Optional[KVObject], app_id: str) -> bool:
    """Whether the app is hidden from the Steam library."""
    if document is None:
        return False
    section = app_section(document, app_id)
    if section is None:
        return False
    value = find(section, HIDDEN_KEY)
    return isinstance(value, str) and value.strip() == "1"


def apply_hidden(document: KVObject, app_id: str, hidden: bool) -> None:
    """Hide or unhide an app in a localconfig.vdf tree in place."""
    if hidden:
        section = ensure_path(document, LOCALCONFIG_APPS_PATH + (str(app_id),))
        set_leaf(section, HIDDEN_KEY, "1")
        return
    section = app_section(document, app_id)
    if section is not None:
        remove_entry(section, HIDDEN_KEY)
