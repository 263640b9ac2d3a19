"""Configuration for qol storage locations.

Paths are resolved once at startup into a QolConfig and handed to the
storage layer explicitly.

### config.json Structure

```json
{
  "database": {
    "schema_path": "~/dotfiles/qol/database.sql",
    "db_path": "~/.local/share/qol/rsrc/database.db"
  }
}
```

### Resolution Order

1. QOL_SCHEMA_PATH / QOL_DB_PATH environment variables
2. ~/.config/qol/config.json (or the file named by QOL_CONFIG_FILE)
3. Bundled schema next to the package, database in the user data dir
"""

import os
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

from .errors import ConfigError

# User-level config location
USER_CONFIG_DIR = Path.home() / ".config" / "qol"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.json"

# Resource directory shipped with the package
RSRC_DIR = Path(__file__).resolve().parent / "rsrc"
SCHEMA_FILE = "database.sql"
DATABASE_FILE = "database.db"

ENV_CONFIG_FILE = "QOL_CONFIG_FILE"
ENV_SCHEMA_PATH = "QOL_SCHEMA_PATH"
ENV_DB_PATH = "QOL_DB_PATH"


@dataclass(frozen=True)
class QolConfig:
    """Resolved storage locations."""

    schema_path: Path
    db_path: Path
    config_source: str = "defaults"  # "env", "user", "defaults"
    config_path: Optional[Path] = None


def default_schema_path() -> Path:
    """Schema file bundled with the package."""
    return RSRC_DIR / SCHEMA_FILE


def default_db_path() -> Path:
    """Database file under the platform's user data directory."""
    return Path(user_data_dir("qol", appauthor=False)) / "rsrc" / DATABASE_FILE


def user_config_file() -> Path:
    override = os.environ.get(ENV_CONFIG_FILE)
    if override:
        return Path(override).expanduser()
    return USER_CONFIG_FILE


def load_user_config(path: Optional[Path] = None) -> Optional[dict]:
    """Load the user-level config file.

    Args:
        path: Config file to read (default: user_config_file())

    Returns:
        Parsed config, or None when the file does not exist

    Raises:
        ConfigError: If the file is not a JSON object
    """
    config_path = path or user_config_file()
    if not config_path.exists():
        return None

    try:
        with open(config_path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {config_path}: expected a JSON object")
    return data


def resolve_config(config_path: Optional[Path] = None) -> QolConfig:
    """Resolve schema and database locations.

    Each field is taken from the first source that sets it: environment,
    user config file, then defaults.

    Args:
        config_path: Explicit config file (default: user_config_file())

    Returns:
        QolConfig with absolute paths
    """
    source = "defaults"
    schema_path: Optional[str] = None
    db_path: Optional[str] = None

    # Step 1: user config file
    config_file = config_path or user_config_file()
    user_config = load_user_config(config_file)
    if user_config:
        db_config = user_config.get("database") or {}
        schema_path = db_config.get("schema_path")
        db_path = db_config.get("db_path")
        if schema_path or db_path:
            source = "user"

    # Step 2: environment wins over the file
    env_schema = os.environ.get(ENV_SCHEMA_PATH)
    env_db = os.environ.get(ENV_DB_PATH)
    if env_schema:
        schema_path = env_schema
        source = "env"
    if env_db:
        db_path = env_db
        source = "env"

    return QolConfig(
        schema_path=Path(schema_path).expanduser() if schema_path else default_schema_path(),
        db_path=Path(db_path).expanduser() if db_path else default_db_path(),
        config_source=source,
        config_path=config_file if user_config is not None else None,
    )


def get_config_help_message(config: QolConfig) -> str:
    """Generate a short description of the resolved configuration."""
    lines = [f"qol configuration (from {config.config_source}):"]
    if config.config_path:
        lines.append(f"  Config: {config.config_path}")
    lines.append(f"  Schema: {config.schema_path}")
    lines.append(f"  Database: {config.db_path}")
    return "\n".join(lines)
