"""
Compatibility tool discovery.

Lists the tools the user can force for a game: custom tools installed under
compatibilitytools.d (GE-Proton and friends) and Valve's Proton builds
installed as regular apps in steamapps/common.
"""

import logging
import os
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import KeyValuesFileError, MalformedDocument
from ..keyvalues import KVObject, find_all_objects, find_leaf, load_document
from ..utils.paths import COMMON_DIR, COMPAT_TOOL_MANIFEST, COMPAT_TOOLS_DIR

logger = logging.getLogger(__name__)

PROTON_DIR_PATTERN = re.compile(r"^Proton\b[\s\-]*(.*)$", re.IGNORECASE)
PROTON_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)")


@dataclass
class CompatToolOption:
    name: str
    display_name: str
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def official_proton_name(folder_name: str) -> Optional[str]:
    """Steam's internal tool name for an official Proton folder.

    "Proton 9.0" -> "proton_9", "Proton 6.3" -> "proton_63",
    "Proton - Experimental" -> "proton_experimental". None if the folder is
    not a Proton build.
    """
    match = PROTON_DIR_PATTERN.match(folder_name.strip())
    if not match:
        return None
    rest = match.group(1).strip()
    if not rest:
        return "proton"

    version = PROTON_VERSION_PATTERN.match(rest)
    if version:
        major, minor = version.groups()
        return f"proton_{major}" if minor == "0" else f"proton_{major}{minor}"

    words = re.findall(r"[A-Za-z0-9]+", rest)
    return "proton_" + "_".join(word.lower() for word in words)


def _custom_tools(steam_root: str) -> List[CompatToolOption]:
    tools_dir = os.path.join(steam_root, COMPAT_TOOLS_DIR)
    try:
        entries = sorted(os.listdir(tools_dir))
    except OSError:
        return []

    tools = []
    for entry in entries:
        tool_dir = os.path.join(tools_dir, entry)
        manifest = os.path.join(tool_dir, COMPAT_TOOL_MANIFEST)
        if not os.path.isfile(manifest):
            continue
        try:
            document = load_document(manifest)
        except (KeyValuesFileError, MalformedDocument) as e:
            logger.warning(f"[CompatTools] Skipping {entry}: {e}")
            continue
        for section in find_all_objects(document, "compat_tools"):
            for name, info in section:
                if not isinstance(info, KVObject):
                    continue
                display_name = find_leaf(info, "display_name") or name
                tools.append(CompatToolOption(name=name, display_name=display_name, path=tool_dir))
    return tools


def _official_tools(folders: Iterable[str]) -> List[CompatToolOption]:
    tools = []
    for folder in folders:
        common = os.path.join(folder, COMMON_DIR)
        try:
            entries = sorted(os.listdir(common))
        except OSError:
            continue
        for entry in entries:
            name = official_proton_name(entry)
            path = os.path.join(common, entry)
            if name and os.path.isdir(path):
                tools.append(CompatToolOption(name=name, display_name=entry, path=path))
    return tools


def list_compat_tools(steam_root: str, folders: Iterable[str]) -> List[CompatToolOption]:
    """Installed compatibility tools, deduplicated by internal name."""
    seen = set()
    tools = []
    for tool in _custom_tools(steam_root) + _official_tools(folders):
        if tool.name in seen:
            continue
        seen.add(tool.name)
        tools.append(tool)
    tools.sort(key=lambda tool: tool.display_name.lower())
    logger.debug(f"[CompatTools] Found {len(tools)} tool(s)")
    return tools
