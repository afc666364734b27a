"""
Runtime configuration.

Everything is read from environment variables once, at application
creation. Tests build a Settings directly instead of touching os.environ.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PORT = 3000
DEFAULT_ADMIN_PASSWORD = "admin2024"
DEFAULT_DATA_FILE = "data.json"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    data_file: Path = Path(DEFAULT_DATA_FILE)
    # When set, mutation events are only honoured on connections that
    # have completed a successful adminLogin.
    require_admin_auth: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
            admin_password=os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            data_file=Path(os.getenv("DATA_FILE", DEFAULT_DATA_FILE)),
            require_admin_auth=_env_flag("REQUIRE_ADMIN_AUTH"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
