"""
Tests for the Steam Web API owned-games client.
"""
import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from catalyst.errors import SteamApiError
from catalyst.library import LibraryGame, fetch_owned_games, get_owned_library, map_owned_game
from catalyst.library.steam_web import OWNED_GAMES_URL

OWNED_GAMES = {
    'response': {
        'game_count': 2,
        'games': [
            {'appid': 70, 'name': 'Half-Life', 'playtime_forever': 125, 'img_logo_url': 'abc123'},
            {'appid': 440, 'name': '   ', 'img_logo_url': ''},
        ],
    }
}


def make_session(status=200, payload=None):
    """Mock aiohttp session whose get() yields a response with the given status/body."""
    resp = MagicMock(status=status)
    resp.json = AsyncMock(return_value=payload)
    session = MagicMock()
    session.get.return_value.__aenter__.return_value = resp
    return session


@pytest.mark.asyncio
async def test_fetch_owned_games():
    session = make_session(payload=OWNED_GAMES)

    games = await fetch_owned_games(session, ' KEY ', '76561197960287930')

    assert [game['appid'] for game in games] == [70, 440]
    args, kwargs = session.get.call_args
    assert args == (OWNED_GAMES_URL,)
    assert kwargs['params']['key'] == 'KEY'
    assert kwargs['params']['steamid'] == '76561197960287930'
    assert kwargs['params']['include_appinfo'] == 'true'
    assert kwargs['params']['include_played_free_games'] == 'true'


@pytest.mark.asyncio
async def test_fetch_owned_games_can_skip_free_games():
    session = make_session(payload=OWNED_GAMES)
    await fetch_owned_games(session, 'KEY', '1', include_played_free_games=False)
    assert session.get.call_args.kwargs['params']['include_played_free_games'] == 'false'


@pytest.mark.asyncio
async def test_missing_api_key_makes_no_request():
    session = make_session(payload=OWNED_GAMES)
    with pytest.raises(SteamApiError):
        await fetch_owned_games(session, '  ', '1')
    session.get.assert_not_called()


@pytest.mark.asyncio
async def test_http_error_status():
    session = make_session(status=403, payload={})
    with pytest.raises(SteamApiError) as exc:
        await fetch_owned_games(session, 'KEY', '1')
    assert exc.value.status == 403


@pytest.mark.asyncio
async def test_private_profile_returns_empty_list():
    session = make_session(payload={'response': {}})
    assert await fetch_owned_games(session, 'KEY', '1') == []


@pytest.mark.asyncio
async def test_unexpected_payload():
    session = make_session(payload=['not', 'a', 'dict'])
    with pytest.raises(SteamApiError):
        await fetch_owned_games(session, 'KEY', '1')


@pytest.mark.asyncio
async def test_timeout_and_client_errors_are_wrapped():
    session = MagicMock()
    session.get.side_effect = asyncio.TimeoutError()
    with pytest.raises(SteamApiError, match="timed out"):
        await fetch_owned_games(session, 'KEY', '1')

    session.get.side_effect = aiohttp.ClientConnectionError("connection reset")
    with pytest.raises(SteamApiError, match="connection reset"):
        await fetch_owned_games(session, 'KEY', '1')


def test_map_owned_game():
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    game = map_owned_game(OWNED_GAMES['response']['games'][0], now)
    assert game == LibraryGame(
        id='steam:70',
        provider='steam',
        external_id='70',
        name='Half-Life',
        playtime_minutes=125,
        artwork_url='https://media.steampowered.com/steamcommunity/public/images/apps/70/abc123.jpg',
        last_synced_at='2024-05-01T00:00:00+00:00',
    )


def test_map_owned_game_fallbacks():
    game = map_owned_game({'appid': 440, 'name': '   ', 'img_logo_url': ''})
    assert game.name == 'Steam App 440'
    assert game.playtime_minutes == 0
    assert game.artwork_url is None
    assert game.last_synced_at is not None


@pytest.mark.asyncio
async def test_get_owned_library_skips_entries_without_appid():
    payload = {'response': {'games': OWNED_GAMES['response']['games'] + [{'name': 'ghost'}]}}
    session = make_session(payload=payload)

    games = await get_owned_library(session, 'KEY', '1')

    assert [game.id for game in games] == ['steam:70', 'steam:440']
    assert games[0].to_dict()['provider'] == 'steam'
