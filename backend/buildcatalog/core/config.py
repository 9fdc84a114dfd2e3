from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings object.
    Environment variables win; locally you can use backend/.env.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Data store (JSON export of builds, catalog products, banner ads)
    DATA_PATH: str = "data/catalog.json"

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS (comma separated)
    CORS_ALLOW_ORIGINS: str = "*"

    # Versioning
    APP_VERSION: str = "0.1.0"
    BUILD_ID: str = "dev"

    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


# other modules import this
settings = Settings()
