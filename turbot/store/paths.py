"""Storage location resolution."""

import os
from pathlib import Path

DEFAULT_HOME = os.path.join(str(Path.home()), ".turbot")
DB_FILENAME = "turbot.db"


def resolve_home() -> str:
    """Resolve the storage directory, honouring TURBOT_HOME."""
    home = os.environ.get("TURBOT_HOME") or DEFAULT_HOME
    _ensure_dir(home)
    return home


def resolve_db_path(home: str | None = None) -> str:
    """Get the SQLite database path."""
    base = home or resolve_home()
    _ensure_dir(base)
    return os.path.join(base, DB_FILENAME)


def _ensure_dir(dir_path: str) -> None:
    if not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)
