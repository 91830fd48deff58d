from __future__ import annotations

import os
from pathlib import Path

from catalyst.steam.user import UserConfigPaths, account_id_from_steam64, find_user_id
from conftest import write

STEAM64 = "76561197960287930"
ACCOUNT = "22202"


def loginusers(*entries: tuple) -> str:
    body = "".join(
        f'"{steam64}" {{ "AccountName" "user{steam64[-3:]}" "MostRecent" "{recent}" }}\n'
        for steam64, recent in entries
    )
    return f'"users"\n{{\n{body}}}\n'


def test_account_id_from_steam64() -> None:
    assert account_id_from_steam64(STEAM64) == ACCOUNT
    assert account_id_from_steam64(" 76561197960265729 ") == "1"
    assert account_id_from_steam64("not-a-number") is None


def test_linked_account_wins(steam_root: Path) -> None:
    (steam_root / "userdata" / ACCOUNT).mkdir(parents=True)
    (steam_root / "userdata" / "999").mkdir()
    write(steam_root / "config" / "loginusers.vdf", loginusers(("76561197960266727", "1")))
    assert find_user_id(str(steam_root), STEAM64) == ACCOUNT


def test_most_recent_login_used_when_linked_folder_missing(steam_root: Path) -> None:
    (steam_root / "userdata" / "999").mkdir(parents=True)
    (steam_root / "userdata" / "1000").mkdir()
    write(steam_root / "config" / "loginusers.vdf", loginusers(
        ("76561197960266728", "0"),  # 1000
        ("76561197960266727", "1"),  # 999
    ))
    assert find_user_id(str(steam_root), STEAM64) == "999"


def test_mtime_fallback_skips_user_zero(steam_root: Path) -> None:
    userdata = steam_root / "userdata"
    for name, mtime in (("0", 3000), ("111", 1000), ("222", 2000), ("anonymous", 4000)):
        (userdata / name).mkdir(parents=True)
        os.utime(userdata / name, (mtime, mtime))
    assert find_user_id(str(steam_root)) == "222"


def test_malformed_loginusers_falls_back(steam_root: Path) -> None:
    (steam_root / "userdata" / "5").mkdir(parents=True)
    write(steam_root / "config" / "loginusers.vdf", '"users" { "1" }')
    assert find_user_id(str(steam_root)) == "5"


def test_no_user(steam_root: Path) -> None:
    assert find_user_id(str(steam_root)) is None


def test_user_config_paths() -> None:
    paths = UserConfigPaths("/steam", "42")
    assert paths.localconfig == os.path.join("/steam", "userdata", "42", "config", "localconfig.vdf")
    assert paths.sharedconfig == os.path.join("/steam", "userdata", "42", "7", "remote", "sharedconfig.vdf")
    assert paths.config_vdf == os.path.join("/steam", "config", "config.vdf")
    assert paths.collection_sources() == [paths.sharedconfig, paths.localconfig]
