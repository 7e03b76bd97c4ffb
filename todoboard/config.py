# todoboard — configuration
# Override paths and server settings via config.yaml, env vars or CLI args.

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .store import DEFAULT_STORAGE_KEY, DEFAULT_SEED_TITLE, DEFAULT_SEED_DESC

CONFIG_PATH = Path.home() / ".config" / "todoboard" / "config.yaml"


class ConfigError(Exception):
    """Raised when a config file exists but cannot be used."""
    pass


@dataclass
class Config:
    """Runtime configuration for the board server."""

    # Storage
    db_path: str = "~/.local/share/todoboard/board.db"
    storage_key: str = DEFAULT_STORAGE_KEY

    # First-load example card
    seed_title: str = DEFAULT_SEED_TITLE
    seed_desc: str = DEFAULT_SEED_DESC

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    ui_file: str = ""   # empty = look next to the package

    log_level: str = "INFO"

    def resolve_paths(self):
        """Apply env overrides and expand ~."""
        env_db = os.environ.get("TODOBOARD_DB")
        if env_db:
            self.db_path = env_db
        self.db_path = str(Path(self.db_path).expanduser())
        if self.ui_file:
            self.ui_file = str(Path(self.ui_file).expanduser())

    def validate(self, source=None) -> None:
        """Coerce the port to an int and reject values a server cannot bind."""
        where = f" in {source}" if source else ""
        port = self.port
        if isinstance(port, bool):
            raise ConfigError(f"port must be an integer{where}, got: {port!r}")
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise ConfigError(f"port must be an integer{where}, got: {port!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"port out of range{where}: {port}")
        self.port = port
        for name in ("db_path", "storage_key", "host", "log_level"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a string{where}, got: {getattr(self, name)!r}")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML, falling back to defaults when no file exists."""
        if path is None:
            path = os.environ.get("TODOBOARD_CONFIG")
        cfg_path = Path(path) if path else CONFIG_PATH

        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must be a mapping")
            known = {f.name for f in fields(cls)}
            cfg = cls(**{k: v for k, v in data.items() if k in known})
            cfg.validate(cfg_path)
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        else:
            cfg = cls()

        cfg.resolve_paths()
        return cfg


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [todoboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
