import logging
from flask import Blueprint, jsonify, request
from werkzeug.exceptions import HTTPException

from .forms import GamesForUsersForm, OwnedGamesForm, ResolveSteamIdForm
from .library import aggregate_games
from .steam_api import ConfigurationError, UpstreamError, get_owned_games
from .steam_id import resolve_steam_id
from .steam_store_api import fetch_app_details

api = Blueprint("api", __name__, url_prefix="/api")

log = logging.getLogger(__name__)


def get_api_key(form) -> str:
    """
    The caller's Steam Web API key: the `api_key` field, else an
    `Authorization: Bearer <key>` header. Nothing is stored server-side.
    """
    if form.api_key.data:
        return form.api_key.data

    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()

    raise ConfigurationError("Steam API key is required. Please enter your API key in the settings.")


def invalid(form):
    return jsonify({"error": "Invalid request", "fields": form.errors}), 400


@api.before_request
def require_json_object():
    # Forms read JSON bodies as key/value pairs
    if request.method == "POST" and request.is_json:
        if not isinstance(request.get_json(silent=True), dict):
            return jsonify({"error": "Invalid request", "fields": {"body": ["Expected a JSON object."]}}), 400


@api.errorhandler(ConfigurationError)
def configuration_error(e):
    return jsonify({"error": str(e)}), 401


@api.errorhandler(UpstreamError)
def upstream_error(e):
    return jsonify({"error": e.description, "upstream_status": e.status}), 502


@api.errorhandler(HTTPException)
def http_error(e):
    return jsonify({"error": e.description}), e.code


@api.errorhandler(Exception)
def unexpected_error(e):
    log.exception("Unhandled error on %s", request.path)
    return jsonify({"error": "Internal server error"}), 500


@api.route("/health")
def health():
    return {"status": "ok"}


@api.route("/resolve-steam-id", methods=["POST"])
def resolve_id():
    form = ResolveSteamIdForm()
    if not form.validate_on_submit():
        return invalid(form)

    steamid = resolve_steam_id(form.identifier.data, get_api_key(form))
    if steamid is None:
        return jsonify({
            "error": "Could not resolve Steam ID. Use a SteamID64, a full profile URL or a valid vanity name."
        }), 404

    return {"steam_id": steamid}


@api.route("/user-games", methods=["POST"])
def user_games():
    form = OwnedGamesForm()
    if not form.validate_on_submit():
        return invalid(form)

    games = get_owned_games(form.steam_id.data, get_api_key(form))
    return {"games": [g.to_dict() for g in games]}


@api.route("/game-details/<int:appid>")
def game_details(appid):
    details = fetch_app_details(appid)
    if details is None:
        return jsonify({"error": "Game not found"}), 404
    return details.to_dict()


@api.route("/games-for-users", methods=["POST"])
def games_for_users():
    form = GamesForUsersForm()
    if not form.validate_on_submit():
        return invalid(form)

    result = aggregate_games(form.identifiers.data, get_api_key(form))
    return result.to_dict()
