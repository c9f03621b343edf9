from flask_wtf import FlaskForm
from wtforms import Field, StringField
from wtforms.validators import DataRequired, Length, Regexp


def _strip(value):
    return str(value).strip() if value is not None else value


class IdentifierListField(Field):
    """
    A list of account identifiers. JSON bodies send a list, form posts repeat
    the key; blank entries are dropped.
    """

    def process_formdata(self, valuelist):
        cleaned = (_strip(v) for v in valuelist)
        self.data = [v for v in cleaned if v]


class ApiForm(FlaskForm):
    # JSON API calls carry their own credential, no session to protect
    class Meta:
        csrf = False

    api_key = StringField("Steam API key", filters=[_strip])


class ResolveSteamIdForm(ApiForm):
    identifier = StringField(
        "Steam ID, profile URL or vanity name",
        filters=[_strip],
        validators=[DataRequired(), Length(max=256)]
    )


class OwnedGamesForm(ApiForm):
    steam_id = StringField(
        "SteamID64",
        filters=[_strip],
        validators=[DataRequired(), Regexp(r"^\d+$", message="SteamID64 must be numeric.")]
    )


class GamesForUsersForm(ApiForm):
    identifiers = IdentifierListField(
        "Steam IDs, profile URLs or vanity names",
        default=list,
        validators=[DataRequired(message="At least one identifier is required.")]
    )
