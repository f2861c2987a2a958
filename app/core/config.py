from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    TENANT_ID: str = "00000000-0000-0000-0000-000000000001"
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"

    SLOT_INTERVAL_MINUTES: int = 30
    GRID_START_HOUR: int = 8
    GRID_END_HOUR: int = 20
    GRID_HOUR_HEIGHT: int = 64

    ONLINE_CUTOFF_BEFORE_CLOSE_MINUTES: int = 60
    ONLINE_LAST_SLOT_BEFORE_CLOSE_MINUTES: int = 30

    STORE_PROVIDER: str = "memory"
    STORE_DATA_FILE: str = "./data/studio.json"
    POSTGREST_URL: str | None = None
    POSTGREST_API_KEY: str | None = None

    GOOGLE_MAPS_API_KEY: str | None = None
    GOOGLE_ROUTES_URL: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    DISPLACEMENT_ORIGIN: str = "Centro, Amparo - SP, Brasil"

    HTTP_TIMEOUT_SECONDS: float = 10.0

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


settings = Settings()
