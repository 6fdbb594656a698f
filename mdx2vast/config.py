from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    framework: str | None = None  # profile id override, case-insensitive; unknown values fall back to detection
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="MDX2VAST_",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Read settings from the environment.

    Not cached: each conversion samples the environment exactly once, at its start.
    """
    return Settings()
