"""genesis-framework configuration settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from genesis_framework.infrastructure.config.settings_utils import (
    env_bool,
    env_float,
    env_int,
    env_list,
    env_optional_path,
    env_str,
)
from genesis_framework.infrastructure.logging_setup import configure_logging
from genesis_framework.infrastructure.storage.path_guard import (
    ensure_within_root,
    normalize_path,
    safe_join,
)


class Settings(BaseSettings):
    """Application settings with env var support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Rooted runtime paths (souls_path must remain inside genesis_root)
    genesis_root: Path = Field(
        default_factory=lambda: Path(env_str("GENESIS_ROOT", ".genesis"))
    )
    souls_path: Path = Field(default=Path("souls"))

    # Optional law file; when unset agents fall back to the default constitution
    constitution_path: Optional[Path] = Field(
        default_factory=lambda: env_optional_path("GENESIS_CONSTITUTION_PATH")
    )

    # Life loop
    loop_interval_seconds: float = Field(
        default_factory=lambda: env_float("GENESIS_LOOP_INTERVAL", 60.0, minimum=0.0)
    )
    replication_min_cycles: int = Field(
        default_factory=lambda: env_int("GENESIS_REPLICATION_MIN_CYCLES", 3, minimum=0)
    )

    # Server/observability
    api_host: str = Field(default_factory=lambda: env_str("GENESIS_HOST", "127.0.0.1"))
    api_port: int = Field(
        default_factory=lambda: env_int("GENESIS_PORT", 8000, minimum=1, maximum=65535)
    )
    api_reload: bool = Field(default_factory=lambda: env_bool("GENESIS_RELOAD", False))
    log_level: str = Field(default_factory=lambda: env_str("GENESIS_LOG_LEVEL", "INFO"))
    log_json: bool = Field(default_factory=lambda: env_bool("GENESIS_LOG_JSON", False))
    cors_origins: list[str] = Field(
        default_factory=lambda: env_list("GENESIS_CORS_ORIGINS", default=["*"])
    )

    def _resolve_under_root(self, value: Path) -> Path:
        root = normalize_path(self.genesis_root)
        raw = Path(value)
        if raw.is_absolute():
            return ensure_within_root(root, raw)
        if not raw.parts:
            return root
        return safe_join(root, *raw.parts)

    def _normalize_runtime_paths(self) -> None:
        self.genesis_root = normalize_path(self.genesis_root)
        self.souls_path = self._resolve_under_root(self.souls_path)

    @model_validator(mode="after")
    def _normalize_paths_validator(self) -> "Settings":
        self._normalize_runtime_paths()
        return self

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        self._normalize_runtime_paths()
        for path in (self.genesis_root, self.souls_path):
            path.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
