"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Bridge Treatment Dispatch"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut pour le développement
    # Database - SQLite by default for development
    DATABASE_URL: str = "sqlite+aiosqlite:///./treatment_dispatch.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]

    # JWT Authentication
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Rate Limiting
    RATE_LIMIT_LOGIN: str = "5/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Tickets
    TICKET_NUMBER_MAX_ATTEMPTS: int = 5

    # Alertes meteo NOAA / NOAA weather alerts
    WEATHER_ALERTS_URL: str = "https://api.weather.gov/alerts/active?area=AL"
    WEATHER_USER_AGENT: str = "(treatment-dispatch, dispatch@example.org)"
    WEATHER_TIMEOUT_SECONDS: float = 10.0

    # Inventaire des ponts (fichier CSV) / Bridge inventory (CSV file)
    BRIDGE_DATA_PATH: str = "./data/bridges.csv"

    # Seed
    SEED_ADMIN_EMAIL: str = "admin@treatment-dispatch.io"
    SEED_ADMIN_PASSWORD: str = "admin"
    DEFAULT_TMC_NAME: str = "Central TMC"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
