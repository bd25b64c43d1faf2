"""Client configuration with environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the headless client."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    API_URL: str = Field(
        "http://localhost:8000", validation_alias=AliasChoices("API_URL", "REACT_APP_API_URL")
    )
    ENV: str = Field("dev", validation_alias=AliasChoices("ENV", "NODE_ENV"))
    API_TIMEOUT_SECONDS: float = 30.0

    # Local key/value store (token, user, draft, theme)
    STORAGE_PATH: str = ".namingops-client.json"

    @property
    def is_dev(self) -> bool:
        return self.ENV in ("dev", "development")


client_settings = ClientSettings()
