from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.betaseries.com"
DEFAULT_API_VERSION = "2.4"


class BetaSeriesSettings(BaseSettings):
    """
    Loads BetaSeries credentials and endpoint settings from .env.

    Leaving login or password empty yields an anonymous session.
    """

    api_key: str = Field(alias="BETASERIES_API_KEY")
    login: str = Field(default="", alias="BETASERIES_LOGIN")
    password: str = Field(default="", alias="BETASERIES_PASSWORD")

    base_url: str = Field(default=DEFAULT_BASE_URL, alias="BETASERIES_BASE_URL")
    api_version: str = Field(
        default=DEFAULT_API_VERSION, alias="BETASERIES_API_VERSION"
    )
    timeout: float | None = Field(default=None, alias="BETASERIES_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
