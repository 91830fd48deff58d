"""Owned-game catalogue from the Steam Web API."""

from .steam_web import LibraryGame, fetch_owned_games, get_owned_library, map_owned_game
