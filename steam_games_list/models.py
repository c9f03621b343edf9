from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Optional

STEAMID64_PREFIX = "7656119"
STEAMID64_LENGTH = 17

COMMUNITY_IMAGE_URL = "https://media.steampowered.com/steamcommunity/public/images/apps/{appid}/{image}.jpg"


def is_steamid64(value) -> bool:
    """True for a 17-digit string starting with the individual-account prefix."""
    return (
        isinstance(value, str)
        and len(value) == STEAMID64_LENGTH
        and value.isdigit()
        and value.startswith(STEAMID64_PREFIX)
    )


@dataclass
class OwnedGame:
    appid: int
    name: str
    img_icon_url: str = ""
    img_logo_url: str = ""
    playtime_forever: int = 0

    @classmethod
    def from_api(cls, raw: dict) -> Optional["OwnedGame"]:
        """Returns None for records without a usable appid."""
        if not isinstance(raw, dict):
            return None
        try:
            appid = int(raw.get("appid"))
        except (TypeError, ValueError):
            return None
        if appid <= 0:
            return None
        return cls(
            appid=appid,
            name=raw.get("name") or f"AppID {appid}",
            img_icon_url=raw.get("img_icon_url") or "",
            img_logo_url=raw.get("img_logo_url") or "",
            playtime_forever=raw.get("playtime_forever", 0) or 0,
        )

    def fallback_picture(self) -> Optional[str]:
        # Logo is the wider image; older accounts only carry the icon hash.
        image = self.img_logo_url or self.img_icon_url
        if not image:
            return None
        return COMMUNITY_IMAGE_URL.format(appid=self.appid, image=image)

    def to_dict(self) -> dict:
        return asdict(self)


def _descriptions(entries) -> List[str]:
    return [e.get("description") for e in (entries or []) if isinstance(e, dict) and e.get("description")]


@dataclass
class GameDetails:
    appid: int
    name: str
    short_description: str = ""
    header_image: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, appid: int, data: dict) -> "GameDetails":
        """
        Build from the `data` object of a store appdetails entry.
        Every field is optional in the store payload.
        """
        return cls(
            appid=appid,
            name=data.get("name") or f"AppID {appid}",
            short_description=data.get("short_description") or "",
            header_image=data.get("header_image") or None,
            categories=_descriptions(data.get("categories")),
            genres=_descriptions(data.get("genres")),
        )

    @property
    def tags(self) -> List[str]:
        """Category descriptions; an empty category list falls through to genres."""
        if self.categories:
            return list(self.categories)
        return list(self.genres)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["tags"] = self.tags
        return d


@dataclass
class AggregatedGame:
    appid: int
    name: str
    picture: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    accounts: List[str] = field(default_factory=list)

    @classmethod
    def from_owned(cls, game: OwnedGame, details: Optional[GameDetails] = None) -> "AggregatedGame":
        if details is None:
            return cls(appid=game.appid, name=game.name, picture=game.fallback_picture())
        return cls(
            appid=game.appid,
            name=game.name,
            picture=details.header_image or game.fallback_picture(),
            tags=details.tags,
        )

    def add_account(self, identifier: str) -> None:
        if identifier not in self.accounts:
            self.accounts.append(identifier)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AggregationResult:
    games: List[AggregatedGame] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def warning(self) -> Optional[str]:
        if self.errors and not self.games:
            return "No games could be loaded. Check that the identifiers are correct and the game details of those profiles are public."
        return None

    def to_dict(self) -> dict:
        payload = {
            "games": [g.to_dict() for g in self.games],
            "errors": list(self.errors),
        }
        if self.warning:
            payload["warning"] = self.warning
        return payload
