"""
Turns whatever a user typed into a SteamID64.

Accepts:
  - a numeric SteamID64 (trusted as-is)
  - a profile URL (https://steamcommunity.com/profiles/<steamid64>/ or /id/<vanity>/)
  - a bare vanity name (e.g. 'gaben')

Vanity names go through a cascade of lookups, each less structured than the
last: the ResolveVanityURL Web API call, the community XML feed and finally the
HTML profile page. ResolveVanityURL often misses accounts that never set a
custom URL, so the two community pages are scraped as fallbacks.
"""
import re
import logging
from urllib.parse import quote

import requests

from .models import is_steamid64
from .steam_api import ConfigurationError, require_key, request_timeout, resolve_vanity_url

COMMUNITY_HOST = "steamcommunity.com"
COMMUNITY_PROFILE_URL = f"https://{COMMUNITY_HOST}/id/{{vanity}}"

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36",
}

NUMERIC_RE = re.compile(r"^\d+$")
PROFILE_PATH_RE = re.compile(r"/profiles/(\d+)")
VANITY_PATH_RE = re.compile(r"/id/([^/?#]+)")

# Evaluated in order; the first match that looks like a SteamID64 wins.
XML_STEAMID_PATTERNS = (
    re.compile(r"<steamID64>(\d+)</steamID64>"),
    re.compile(r"<steamID64><!\[CDATA\[(\d+)\]\]></steamID64>"),
    re.compile(r"<steamID64>\s*(?:<!\[CDATA\[)?\s*(\d+)\s*(?:\]\]>)?\s*</steamID64>", re.IGNORECASE),
)

HTML_STEAMID_PATTERNS = (
    re.compile(r'"steamid"\s*:\s*"(\d{17})"'),
    re.compile(r'g_rgProfileData\s*=\s*\{[^}]*"steamid"\s*:\s*"(\d{17})"'),
    re.compile(r'data-steamid="(\d{17})"'),
    re.compile(r"/profiles/(\d{17})"),
    re.compile(r'"steamId"\s*:\s*"?(\d{17})'),
    re.compile(r'"steamID"\s*:\s*"?(\d{17})'),
    re.compile(r'"SteamID"\s*:\s*"?(\d{17})'),
    re.compile(r'"steamID64"\s*:\s*"?(\d{17})'),
)

log = logging.getLogger(__name__)


def find_steamid64(text: str, patterns) -> str | None:
    """
    Scan `text` with each pattern in order and return the first match that
    passes the SteamID64 check. Unrelated 17-digit numbers are skipped.
    """
    for pattern in patterns:
        for match in pattern.finditer(text):
            candidate = match.group(1)
            if is_steamid64(candidate):
                return candidate
    return None


def _fetch_community_page(vanity: str, **params) -> str | None:
    r = requests.get(
        COMMUNITY_PROFILE_URL.format(vanity=quote(vanity, safe="")),
        params=params or None,
        headers=BROWSER_HEADERS,
        timeout=request_timeout(),
    )
    if not r.ok:
        log.debug("Community page for %r answered %s", vanity, r.status_code)
        return None
    return r.text


def resolve_vanity_via_api(vanity: str, api_key: str) -> str | None:
    return resolve_vanity_url(vanity, api_key)


def resolve_vanity_via_xml(vanity: str, api_key: str) -> str | None:
    body = _fetch_community_page(vanity, xml=1)
    if body is None:
        return None
    return find_steamid64(body, XML_STEAMID_PATTERNS)


def resolve_vanity_via_profile_page(vanity: str, api_key: str) -> str | None:
    body = _fetch_community_page(vanity)
    if body is None:
        return None
    return find_steamid64(body, HTML_STEAMID_PATTERNS)


VANITY_RESOLVERS = (
    resolve_vanity_via_api,
    resolve_vanity_via_xml,
    resolve_vanity_via_profile_page,
)


def resolve_vanity(vanity: str, api_key: str) -> str | None:
    for resolver in VANITY_RESOLVERS:
        try:
            steamid = resolver(vanity, api_key)
        except ConfigurationError:
            raise
        except Exception as e:
            # Any failure inside a tier only means this tier found nothing
            log.warning("%s failed for %r: %s", resolver.__name__, vanity, e)
            continue

        if steamid and is_steamid64(steamid):
            log.debug("%s resolved %r to %s", resolver.__name__, vanity, steamid)
            return steamid
        if steamid:
            log.debug("%s returned %r for %r, not a SteamID64", resolver.__name__, steamid, vanity)

    return None


def resolve_steam_id(identifier: str, api_key: str) -> str | None:
    """
    Returns the SteamID64 for `identifier`, or None when every lookup came up empty.
    Raises ConfigurationError when no API key is given.
    """
    require_key(api_key)
    s = (identifier or "").strip()

    # Already numeric, trust it
    if NUMERIC_RE.match(s):
        return s

    if COMMUNITY_HOST in s:
        m = PROFILE_PATH_RE.search(s)
        if m:
            return m.group(1)

        m = VANITY_PATH_RE.search(s)
        if not m:
            log.debug("No /profiles/ or /id/ segment in %r", s)
            return None
        s = m.group(1)

    if not s:
        return None

    return resolve_vanity(s, api_key)
