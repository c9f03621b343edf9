from __future__ import annotations
import logging
from typing import Dict, Iterable

from .models import AggregatedGame, AggregationResult, OwnedGame
from .steam_api import ConfigurationError, get_owned_games, require_key
from .steam_id import resolve_steam_id
from .steam_store_api import fetch_app_details

log = logging.getLogger(__name__)


def _new_entry(game: OwnedGame) -> AggregatedGame:
    try:
        details = fetch_app_details(game.appid)
    except ConfigurationError:
        raise
    except Exception as e:
        log.warning("No store details for app %s: %s", game.appid, e)
        details = None
    return AggregatedGame.from_owned(game, details)


def aggregate_games(identifiers: Iterable[str], api_key: str) -> AggregationResult:
    """
    Union of the libraries owned by every identifier.

    Identifiers are handled one at a time, in order. Each game appears once,
    in the order it was first seen, with the identifiers that own it in
    `accounts`. Store details are fetched once per appid, on first sighting.
    Identifiers that can't be resolved or whose library can't be fetched end
    up in `errors` instead of failing the whole call.
    """
    require_key(api_key)

    result = AggregationResult()
    games_by_appid: Dict[int, AggregatedGame] = {}

    for identifier in identifiers:
        try:
            steamid = resolve_steam_id(identifier, api_key)
        except ConfigurationError:
            raise
        except Exception as e:
            log.exception("Resolving %r failed", identifier)
            result.errors.append(f"Could not resolve Steam ID for '{identifier}': {e}")
            continue

        if steamid is None:
            log.warning("Could not resolve Steam ID for %r", identifier)
            result.errors.append(
                f"Could not resolve Steam ID for '{identifier}'. "
                "Use a SteamID64, a full profile URL or a valid vanity name."
            )
            continue

        try:
            owned = get_owned_games(steamid, api_key)
        except ConfigurationError:
            raise
        except Exception as e:
            log.warning("Failed to fetch games for %r (%s): %s", identifier, steamid, e)
            result.errors.append(f"Failed to fetch games for '{identifier}': {e}")
            continue

        for game in owned:
            entry = games_by_appid.get(game.appid)
            if entry is None:
                entry = _new_entry(game)
                games_by_appid[game.appid] = entry
            entry.add_account(identifier)

    result.games = list(games_by_appid.values())
    return result
