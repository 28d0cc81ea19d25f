from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Inventory Access Policy"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    # Log a decision trace for every evaluated check (noisy, dev only)
    PERMS_EXPLAIN: bool = False
    # Requests under this prefix are UI navigations checked by the route guard
    NAVIGATION_PREFIX: str = "/nav"
    EXTRA_PUBLIC_ROUTES: list[str] = []


settings = Settings()
