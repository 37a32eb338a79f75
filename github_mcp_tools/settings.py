"""Application settings loaded from environment variables and .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ambient GitHub configuration.

    Values are kept as raw strings; parsing and fallback rules live in
    ``environment.resolve_environment``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: str | None = None
    github_personal_access_token: str | None = None
    github_host: str | None = None
    gh_host: str | None = None
    github_repository: str | None = None
    github_timeout: str | None = None
    github_verify_token: str | None = None

    def as_source(self) -> dict[str, str | None]:
        """Expose the settings keyed by their environment variable names."""
        return {name.upper(): value for name, value in self.model_dump().items()}


def get_settings() -> Settings:
    """Load settings fresh from the process environment.

    Not cached: every gateway call re-derives its configuration.
    """
    return Settings()
