import os


class Settings:
    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "RentMarket")
        self.api_version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.secret_key = os.getenv("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./rentmarket.db")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOG_FILE") or None
        # Server-side memoization windows, in seconds
        self.stats_cache_ttl_seconds = int(os.getenv("STATS_CACHE_TTL_SECONDS", "60"))
        self.notifications_cache_ttl_seconds = int(os.getenv("NOTIFICATIONS_CACHE_TTL_SECONDS", "60"))
        self.cache_control_header = os.getenv(
            "CACHE_CONTROL_HEADER", "public, s-maxage=60, stale-while-revalidate=120"
        )
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if origin.strip()
        ]


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
