import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from sqlalchemy.engine import URL


DEFAULT_CONFIG_PATH = Path("config/config.yaml")
DEFAULT_SQLITE_URL = "sqlite:///./subscriptions.db"
DEFAULT_STATEMENT_TIMEOUT_MS = 30000


def _getenv(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def _getenv_bool(name: str, default: bool = False) -> bool:
    raw = _getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the optional YAML config. A missing file yields an empty mapping."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    return value if isinstance(value, dict) else {}


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class Settings:
    def __init__(self, config_path: Path | None = None) -> None:
        # .env never overrides variables already present in the environment
        load_dotenv(override=False)

        path = config_path or Path(_getenv("CONFIG_PATH", str(DEFAULT_CONFIG_PATH)) or DEFAULT_CONFIG_PATH)
        file_cfg = load_config_file(path)
        db_cfg = _section(file_cfg, "db")
        log_cfg = _section(file_cfg, "log")

        self.db_host = _getenv("DB_HOST", _str_or_none(db_cfg.get("host")))
        self.db_port = _getenv("DB_PORT", _str_or_none(db_cfg.get("port")) or "5432") or "5432"
        self.db_user = _getenv("DB_USER") or _getenv("DB_USERNAME", _str_or_none(db_cfg.get("user")))
        self.db_password = _getenv("DB_PASSWORD", _str_or_none(db_cfg.get("password")))
        self.db_name = _getenv("DB_NAME", _str_or_none(db_cfg.get("dbname")))
        self.db_sslmode = _getenv("DB_SSLMODE", _str_or_none(db_cfg.get("sslmode")) or "disable")
        self.db_auto_create = _getenv_bool("DB_AUTO_CREATE", default=True)
        self.db_statement_timeout_ms = _getenv_int("DB_STATEMENT_TIMEOUT_MS", DEFAULT_STATEMENT_TIMEOUT_MS)
        self.database_url = _getenv("DATABASE_URL") or self._build_database_url()

        self.log_level = (_getenv("LOG_LEVEL", _str_or_none(log_cfg.get("level")) or "info") or "info").lower()
        if self.log_level == "warn":
            self.log_level = "warning"

        self.cors_allow_origins = _getenv("CORS_ALLOW_ORIGINS")
        self.http_host = _getenv("HTTP_HOST", "0.0.0.0") or "0.0.0.0"
        self.http_port = _getenv_int("HTTP_PORT", 8080)

    def _build_database_url(self) -> str:
        if not self.db_host:
            return DEFAULT_SQLITE_URL
        query = {"sslmode": self.db_sslmode} if self.db_sslmode else {}
        url = URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=int(self.db_port),
            database=self.db_name,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    def resolved_cors_origins(self) -> list[str]:
        raw = self.cors_allow_origins
        if raw is None:
            return []
        if raw.strip() == "*":
            return ["*"]
        origins = [o.strip() for o in raw.split(",") if o.strip()]
        return origins


settings = Settings()
