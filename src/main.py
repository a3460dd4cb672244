"""EML publisher -- command-line entry point.

Pipeline: Resolve -> Fan-out reads -> Assemble -> Serialize -> Write/Bundle

Usage:
    python -m src.main --data-package-id 42                  # Write outputs/eml/42.xml
    python -m src.main --data-package-id 42 --title "Moose"  # Override dataset title
    python -m src.main --data-package-id 42 --output eml.xml # Write to a specific file
    python -m src.main --data-package-id 42 --archive-dir /data/archives
                                                             # Add eml.xml to the submission archive
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from src.config import (
    DEFAULT_ARCHIVE_FILE_NAME,
    DSN_ENV_VAR,
    get_constant_names,
    get_dsn,
    load_config,
)
from src.eml.archive import LocalArchiveStorage, publish_eml_to_archive
from src.eml.connection import connect
from src.eml.constants import ConstantResolver
from src.eml.errors import EmlPipelineError
from src.eml.pipeline import produce_eml
from src.paths import eml_output_path

logger = logging.getLogger(__name__)


def write_eml(xml: str, path: Path) -> None:
    """Write the document atomically (tmp file + os.replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(xml)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    logger.info("EML written to %s", path)


async def run(config: dict, args: argparse.Namespace) -> str:
    """Produce the EML for ``args.data_package_id`` and write or bundle it.

    Returns:
        The output file path or archive key written.
    """
    dsn = args.dsn or get_dsn(config)
    if not dsn:
        raise ValueError(f"No database DSN: pass --dsn or set {DSN_ENV_VAR}")

    eml_cfg = config.get("eml", {})
    async with connect(dsn) as connection:
        resolver = ConstantResolver(connection, get_constant_names(config))
        if args.archive_dir:
            return await publish_eml_to_archive(
                args.data_package_id,
                connection,
                LocalArchiveStorage(Path(args.archive_dir)),
                supplied_title=args.title,
                file_name=eml_cfg.get("archive_file_name", DEFAULT_ARCHIVE_FILE_NAME),
                constant_resolver=resolver,
            )

        xml = await produce_eml(args.data_package_id, connection, args.title, resolver)

    raw_dir = config.get("output", {}).get("dir")
    path = Path(args.output) if args.output else eml_output_path(
        args.data_package_id, Path(raw_dir) if raw_dir else None
    )
    write_eml(xml, path)
    return str(path)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="EML publisher -- Ecological Metadata Language extracts for survey data packages"
    )
    parser.add_argument("--data-package-id", type=int, required=True,
                        help="Data package to describe")
    parser.add_argument("--title", type=str, help="Dataset title (defaults to the package UUID)")
    parser.add_argument("--dsn", type=str, help=f"PostgreSQL DSN (overrides {DSN_ENV_VAR})")
    parser.add_argument("--output", type=str, help="Output file for the EML document")
    parser.add_argument("--archive-dir", type=str,
                        help="Add eml.xml to the submission archive under this storage root")
    parser.add_argument("--config", type=str, help="Path to an alternate config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config = load_config(Path(args.config) if args.config else None)

    try:
        target = asyncio.run(run(config, args))
    except EmlPipelineError as exc:
        print(f"Error: {exc.message}")
        sys.exit(1)
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(f"\nEML produced for data package {args.data_package_id}: {target}")


if __name__ == "__main__":
    main()
