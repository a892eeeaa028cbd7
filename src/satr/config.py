from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import platformdirs
import yaml
from dotenv import load_dotenv

APP_NAME = "satr"

DOCUMENT_SUFFIX = ".xml"
ARCHIVE_SUFFIX = ".zip"

CFDI_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Lower bound used when no start date is given.
EARLIEST_DATE = datetime(1900, 1, 1)

SETTINGS_FILE = "settings.yaml"


def get_config_dir() -> Path:
    """SATR_CONFIG_DIR if set, else the platform user config directory.

    Re-evaluated on each call to pick up env changes.
    """
    from_env = os.environ.get("SATR_CONFIG_DIR")
    if from_env:
        return Path(from_env)
    return Path(platformdirs.user_config_dir(APP_NAME))


def load_env() -> None:
    """Load .env from the cwd, then from the config dir. Values already set win."""
    load_dotenv(Path.cwd() / ".env")
    load_dotenv(get_config_dir() / ".env")


def load_yaml(path: Path) -> dict:
    """Load and parse a YAML file, returning the top-level dict."""
    return yaml.safe_load(path.read_text()) or {}


def load_settings() -> dict:
    """Load config/settings.yaml, or an empty dict if it does not exist."""
    path = get_config_dir() / SETTINGS_FILE
    if not path.is_file():
        return {}
    return load_yaml(path)


def save_settings(data: dict) -> Path:
    """Write config/settings.yaml (atomic write)."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / SETTINGS_FILE
    tmp = path.with_suffix(".tmp")
    tmp.write_text(yaml.dump(data, default_flow_style=False, allow_unicode=True))
    os.replace(tmp, path)
    return path


def get_invoices_dir() -> Path:
    """Default root to scan for invoices.

    Priority: 1) SATR_INVOICES_DIR env var, 2) ``invoices_dir`` in settings.yaml,
    3) the current working directory.
    """
    from_env = os.environ.get("SATR_INVOICES_DIR")
    if from_env:
        return Path(from_env)
    configured = load_settings().get("invoices_dir")
    if configured:
        return Path(configured).expanduser()
    return Path.cwd()
