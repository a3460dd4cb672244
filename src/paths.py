"""Filesystem locations used by the EML publisher.

Config and output locations are module-level constants resolved from the
project root. Only ``pathlib`` is imported here, so any module can import
these names without pulling in the rest of the package. Nothing is
created or checked at import time; writers create their own directories.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# -- Project Root --
# ---------------------------------------------------------------------------

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
"""Directory holding ``src/``, ``config/`` and ``outputs/``."""

# ---------------------------------------------------------------------------
# -- Config Paths --
# ---------------------------------------------------------------------------

CONFIG_DIR: Path = PROJECT_ROOT / "config"
"""Directory containing publisher configuration files."""

EML_CONFIG_PATH: Path = CONFIG_DIR / "eml_config.json"
"""Main publisher configuration (database, constant names, output)."""

# ---------------------------------------------------------------------------
# -- Output Paths --
# ---------------------------------------------------------------------------

OUTPUTS_DIR: Path = PROJECT_ROOT / "outputs"
"""Top-level output directory."""

EML_OUTPUT_DIR: Path = OUTPUTS_DIR / "eml"
"""Rendered EML documents, one file per data package."""


def eml_output_path(data_package_id: int, output_dir: Path | None = None) -> Path:
    """Return the rendered EML path for a data package.

    Args:
        data_package_id: Data package identifier.
        output_dir: Override directory. Defaults to ``EML_OUTPUT_DIR``.

    Returns:
        Path like ``outputs/eml/42.xml``.
    """
    return (output_dir or EML_OUTPUT_DIR) / f"{data_package_id}.xml"
