from __future__ import annotations

import pytest


_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data=_NO_JSON, text: str = ""):
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self._json = json_data
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSteam:
    """
    Stands in for `requests.get` and answers like the Steam endpoints.

    Tests fill the dicts below; anything missing answers the way Steam does for
    unknown users/apps. A value that is a FakeResponse or an exception is
    returned/raised as-is.
    """

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.vanity: dict = {}
        self.owned: dict = {}
        self.details: dict = {}
        self.xml: dict = {}
        self.html: dict = {}

    def _canned(self, value):
        if isinstance(value, BaseException):
            raise value
        return value

    def get(self, url, params=None, headers=None, timeout=None):
        params = dict(params or {})
        self.calls.append((url, params))

        if "ResolveVanityURL" in url:
            resp = self.vanity.get(params["vanityurl"], {"success": 42, "message": "No match"})
            if isinstance(resp, dict):
                return FakeResponse(json_data={"response": resp})
            return self._canned(resp)

        if "GetOwnedGames" in url:
            games = self.owned.get(params["steamid"])
            if games is None:
                return FakeResponse(json_data={"response": {}})
            if isinstance(games, list):
                return FakeResponse(json_data={"response": {"game_count": len(games), "games": games}})
            return self._canned(games)

        if "appdetails" in url:
            appid = params["appids"]
            data = self.details.get(appid)
            if data is None:
                return FakeResponse(json_data={str(appid): {"success": False}})
            if isinstance(data, dict):
                return FakeResponse(json_data={str(appid): {"success": True, "data": data}})
            return self._canned(data)

        if "steamcommunity.com/id/" in url:
            vanity = url.rsplit("/id/", 1)[1]
            pages = self.xml if params.get("xml") else self.html
            resp = pages.get(vanity, FakeResponse(status_code=404, text="<html>Not Found</html>"))
            return self._canned(resp)

        raise AssertionError(f"unexpected request: {url}")

    def count(self, fragment: str) -> int:
        return sum(1 for url, _ in self.calls if fragment in url)


@pytest.fixture
def steam(monkeypatch):
    fake = FakeSteam()
    monkeypatch.setattr("requests.get", fake.get)
    return fake


@pytest.fixture
def response():
    return FakeResponse


@pytest.fixture
def app():
    from steam_games_list import create_app

    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()
