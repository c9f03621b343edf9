import requests

from .models import GameDetails
from .steam_api import UpstreamError, request_timeout

STEAM_STORE_APPDETAILS = "https://store.steampowered.com/api/appdetails"

def fetch_app_details(appid: int) -> GameDetails | None:
    """
    Returns the store details for one app, or None if the store has none.
    Uses Steam Store appdetails endpoint.
    """
    try:
        r = requests.get(
            STEAM_STORE_APPDETAILS,
            params={"appids": appid, "l": "en"},
            timeout=request_timeout()
        )
    except requests.RequestException as e:
        raise UpstreamError(f"Steam Store request for app {appid} failed: {e}") from e

    if not r.ok:
        raise UpstreamError(f"Steam Store error for app {appid}: {r.status_code} {r.reason}", status=r.status_code)

    try:
        payload = r.json()
    except ValueError as e:
        raise UpstreamError(f"Steam Store returned an invalid body for app {appid}", status=r.status_code) from e

    if not isinstance(payload, dict):
        raise UpstreamError(f"Steam Store returned an unexpected body for app {appid}", status=r.status_code)

    entry = payload.get(str(appid))
    if not isinstance(entry, dict) or not entry.get("success"):
        return None

    data = entry.get("data")
    if not data or not isinstance(data, dict):
        return None

    return GameDetails.from_api(appid, data)
