# File: hierfs/core/config/settings.py

import getpass
import os
from pathlib import Path


def _default_owner() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "hierfs"


class Settings:
    # --- Paths ---
    # hierfs/core/config/settings.py -> hierfs/core/config -> hierfs/core -> hierfs -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    LOCAL_ROOT: Path = Path(os.getenv("HIERFS_LOCAL_ROOT", "/"))

    # --- Catalog Database ---
    DATABASE_URL: str = os.getenv("HIERFS_DATABASE_URL", "sqlite:///./hierfs.db")
    ECHO_SQL: bool = os.getenv("HIERFS_ECHO_SQL", "false").lower() == "true"

    # --- Entry Defaults ---
    # Applied to new entries when the caller does not say otherwise
    DEFAULT_OWNER: str = os.getenv("HIERFS_DEFAULT_OWNER", _default_owner())
    DEFAULT_GROUP: str = os.getenv("HIERFS_DEFAULT_GROUP", "supergroup")
    DIR_PERMISSION: int = int(os.getenv("HIERFS_DIR_PERMISSION", "0o755"), 0)
    FILE_PERMISSION: int = int(os.getenv("HIERFS_FILE_PERMISSION", "0o644"), 0)
    REPLICATION: int = int(os.getenv("HIERFS_REPLICATION", "3"))
    BLOCK_SIZE: int = int(os.getenv("HIERFS_BLOCK_SIZE", str(128 * 1024 * 1024)))


settings = Settings()
