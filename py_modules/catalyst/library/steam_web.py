"""
Steam Web API owned-games client.

Fetches the linked account's owned games (IPlayerService/GetOwnedGames) and
maps each one to a library-game record for the persistence layer.
"""
import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import aiohttp

from ..errors import SteamApiError

logger = logging.getLogger(__name__)

OWNED_GAMES_URL = "https://api.steampowered.com/IPlayerService/GetOwnedGames/v1/"
ARTWORK_URL = "https://media.steampowered.com/steamcommunity/public/images/apps/{appid}/{logo_hash}.jpg"
PROVIDER = "steam"
REQUEST_TIMEOUT = 30


@dataclass
class LibraryGame:
    """Represents an owned game as stored by the library"""
    id: str
    provider: str
    external_id: str
    name: str
    playtime_minutes: int = 0
    artwork_url: Optional[str] = None
    last_synced_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def fetch_owned_games(session: aiohttp.ClientSession, api_key: str, steam_id: str,
                            include_played_free_games: bool = True) -> List[Dict[str, Any]]:
    """
    Fetch the raw owned-games list for a Steam account.

    Returns:
        List of game dicts as returned by the API ([] if the profile has none
        or is private)

    Raises:
        SteamApiError: Missing API key, non-2xx status, timeout or bad payload
    """
    if not api_key or not api_key.strip():
        raise SteamApiError("Missing Steam Web API key")

    params = {
        'key': api_key.strip(),
        'steamid': steam_id,
        'include_appinfo': 'true',
        'include_played_free_games': 'true' if include_played_free_games else 'false',
        'format': 'json',
    }

    try:
        async with session.get(OWNED_GAMES_URL, params=params,
                               timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)) as resp:
            if resp.status < 200 or resp.status >= 300:
                raise SteamApiError(f"Steam owned games request failed with status {resp.status}",
                                    status=resp.status)
            data = await resp.json(content_type=None)
    except asyncio.TimeoutError as e:
        raise SteamApiError("Steam owned games request timed out") from e
    except aiohttp.ClientError as e:
        raise SteamApiError(f"Steam owned games request failed: {e}") from e

    if not isinstance(data, dict):
        raise SteamApiError("Unexpected Steam owned games payload")

    games = (data.get('response') or {}).get('games') or []
    logger.info(f"[SteamApi] Fetched {len(games)} owned games")
    return games


def build_artwork_url(appid: str, logo_hash: Optional[str]) -> Optional[str]:
    if not logo_hash:
        return None
    return ARTWORK_URL.format(appid=appid, logo_hash=logo_hash)


def map_owned_game(raw: Mapping[str, Any], now: Optional[datetime] = None) -> LibraryGame:
    """Map one GetOwnedGames entry to a LibraryGame."""
    external_id = str(raw['appid'])
    name = (raw.get('name') or '').strip() or f"Steam App {external_id}"
    synced = (now or datetime.now(timezone.utc)).isoformat()

    return LibraryGame(
        id=f"{PROVIDER}:{external_id}",
        provider=PROVIDER,
        external_id=external_id,
        name=name,
        playtime_minutes=int(raw.get('playtime_forever') or 0),
        artwork_url=build_artwork_url(external_id, raw.get('img_logo_url')),
        last_synced_at=synced,
    )


async def get_owned_library(session: aiohttp.ClientSession, api_key: str, steam_id: str,
                            include_played_free_games: bool = True) -> List[LibraryGame]:
    """Fetch and map the owned-games list in one call."""
    now = datetime.now(timezone.utc)
    raw_games = await fetch_owned_games(session, api_key, steam_id, include_played_free_games)
    return [map_owned_game(game, now) for game in raw_games if 'appid' in game]
