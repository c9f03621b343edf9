import os
import logging
import requests

from .models import OwnedGame

STEAM_API_BASE = "https://api.steampowered.com"

log = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when no Steam Web API key was supplied."""


class UpstreamError(Exception):
    """
    A Steam endpoint could not be reached or answered with a non-OK status.
    `status` is the HTTP status code, or None for transport failures.
    """

    def __init__(self, description: str, status: int | None = None):
        super().__init__(description)
        self.description = description
        self.status = status


def request_timeout() -> float:
    return float(os.getenv("STEAM_REQUEST_TIMEOUT", "15"))


def require_key(api_key: str | None) -> str:
    if not api_key:
        raise ConfigurationError("Steam API key is required. Get one at https://steamcommunity.com/dev/apikey")
    return api_key


def steam_api_request(path: str, api_key: str, **params) -> dict:
    """
    GET a Steam Web API endpoint and return the decoded JSON body.
    Raises UpstreamError for transport failures, non-OK statuses and bad bodies.
    """
    url = f"{STEAM_API_BASE}{path}"
    query = {**params, "key": require_key(api_key), "format": "json"}
    try:
        r = requests.get(url, params=query, timeout=request_timeout())
    except requests.RequestException as e:
        raise UpstreamError(f"Steam API request to {path} failed: {e}") from e

    if not r.ok:
        raise UpstreamError(f"Steam API error on {path}: {r.status_code} {r.reason}", status=r.status_code)

    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamError(f"Steam API returned an invalid body for {path}", status=r.status_code) from e

    if not isinstance(data, dict):
        raise UpstreamError(f"Steam API returned an unexpected body for {path}", status=r.status_code)
    return data


def _response_object(data: dict, path: str) -> dict:
    response = data.get("response") or {}
    if not isinstance(response, dict):
        raise UpstreamError(f"Steam API returned an unexpected response field for {path}")
    return response


def resolve_vanity_url(vanity: str, api_key: str) -> str | None:
    path = "/ISteamUser/ResolveVanityURL/v0001/"
    response = _response_object(steam_api_request(path, api_key, vanityurl=vanity), path)

    # success = 1 means resolved, 42 means no match
    if response.get("success") == 1 and response.get("steamid"):
        return str(response["steamid"])

    log.debug("ResolveVanityURL found no match for %r (success=%s)", vanity, response.get("success"))
    return None


def get_owned_games(steamid64: str, api_key: str) -> list[OwnedGame]:
    path = "/IPlayerService/GetOwnedGames/v0001/"
    data = steam_api_request(
        path,
        api_key,
        steamid=steamid64,
        include_appinfo=1,
        include_played_free_games=1,
    )
    # Private libraries come back without a "games" key at all
    raw_games = _response_object(data, path).get("games") or []
    if not isinstance(raw_games, list):
        raise UpstreamError(f"Steam API returned an unexpected games list for {path}")

    games = []
    for raw in raw_games:
        game = OwnedGame.from_api(raw)
        if game is not None:
            games.append(game)
    return games
