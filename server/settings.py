"""Server settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_DOTENV_LOADED = False

DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


def load_dotenv(path: str | Path = ".env") -> None:
    """Load KEY=VALUE lines from a .env file without overriding existing variables."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True

    dotenv_path = Path(path)
    if not dotenv_path.exists():
        return

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[7:].strip()
        if "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def getenv_any(*names: str, default: str | None = None) -> str | None:
    """Return the first non-empty variable among `names`."""
    load_dotenv()
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass(frozen=True)
class ServerSettings:
    """Runtime settings for the local API."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    event_log_dir: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerSettings":
        raw_origins = getenv_any("TICTACCHESS_CORS_ORIGINS")
        origins = (
            tuple(origin.strip() for origin in raw_origins.split(",") if origin.strip())
            if raw_origins
            else DEFAULT_CORS_ORIGINS
        )
        raw_port = getenv_any("TICTACCHESS_PORT", "PORT", default="8000")
        try:
            port = int(raw_port or "8000")
        except ValueError as exc:
            raise ValueError(f"TICTACCHESS_PORT must be an integer; received {raw_port!r}.") from exc
        log_dir = getenv_any("TICTACCHESS_EVENT_LOG_DIR")
        return cls(
            host=getenv_any("TICTACCHESS_HOST", default="127.0.0.1") or "127.0.0.1",
            port=port,
            cors_origins=origins,
            event_log_dir=Path(log_dir) if log_dir else None,
            log_level=(getenv_any("TICTACCHESS_LOG_LEVEL", default="INFO") or "INFO").upper(),
        )
