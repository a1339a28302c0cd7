from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    app_env: str = "local"
    api_port: int = 8000
    log_level: str = "INFO"

    hub_name: str = "Hub"
    delivery_timeout_seconds: float = 5.0

    cors_allowed_origins_raw: str = "http://127.0.0.1:5173,http://localhost:5173"
    trusted_hosts_raw: str = "127.0.0.1,localhost"
    force_https: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def delivery_timeout(self) -> float | None:
        if self.delivery_timeout_seconds <= 0:
            return None
        return self.delivery_timeout_seconds

    @property
    def cors_allowed_origins(self) -> list[str]:
        return _split_csv(self.cors_allowed_origins_raw)

    @property
    def trusted_hosts(self) -> list[str]:
        return _split_csv(self.trusted_hosts_raw)

    def validate_security_settings(self) -> None:
        if not self.hub_name.strip():
            raise ValueError("HUB_NAME must not be empty.")

        if not self.is_production:
            return

        allow_lists = {
            "CORS_ALLOWED_ORIGINS_RAW": ("CORS origin", self.cors_allowed_origins),
            "TRUSTED_HOSTS_RAW": ("trusted host", self.trusted_hosts),
        }
        for env_name, (label, values) in allow_lists.items():
            if not values:
                raise ValueError(f"{env_name} must list explicit values in production.")
            if "*" in values:
                raise ValueError(f"Wildcard {label} is not allowed in production.")


@lru_cache
def get_settings() -> Settings:
    return Settings()
