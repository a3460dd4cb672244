"""Configuration loading for the EML publisher.

Reads ``config/eml_config.json`` into a plain dict. Every consumer reads
its section with ``.get(..., default)`` so a missing file section falls
back to the module defaults defined here.

The database DSN may also come from the ``EML_DATABASE_DSN`` environment
variable, which takes precedence over the file.
"""

import json
import logging
import os
from pathlib import Path

from src.paths import EML_CONFIG_PATH

logger = logging.getLogger(__name__)

DSN_ENV_VAR: str = "EML_DATABASE_DSN"
"""Environment variable holding the PostgreSQL connection string."""

DEFAULT_CONSTANT_NAMES: dict[str, str] = {
    "provider_url": "PROVIDER_URL",
    "security_provider_url": "SECURITY_PROVIDER_URL",
    "organization_name": "ORGANIZATION_NAME_FULL",
    "organization_url": "ORGANIZATION_URL",
    "intellectual_rights": "INTELLECTUAL_RIGHTS",
    "taxonomic_provider_url": "TAXONOMIC_PROVIDER_URL",
}
"""Logical constant key -> system constant name stored in the database."""

DEFAULT_ARCHIVE_FILE_NAME: str = "eml.xml"
DEFAULT_ARCHIVE_MIME_TYPE: str = "application/zip"


def load_config(path: Path | None = None) -> dict:
    """Load publisher configuration.

    Args:
        path: Config file to read. Defaults to ``EML_CONFIG_PATH``.

    Returns:
        The parsed config dict, or an empty dict when the file is absent.
    """
    config_path = path or EML_CONFIG_PATH
    if not config_path.exists():
        logger.warning("No config file at %s, using defaults", config_path)
        return {}
    with open(config_path, encoding="utf-8") as f:
        return json.load(f)


def get_dsn(config: dict) -> str | None:
    """Return the database DSN, preferring the environment over the file."""
    return os.environ.get(DSN_ENV_VAR) or config.get("database", {}).get("dsn")


def get_constant_names(config: dict) -> dict[str, str]:
    """Return the system constant names, with config overrides applied."""
    names = dict(DEFAULT_CONSTANT_NAMES)
    names.update(config.get("constants", {}))
    return names
