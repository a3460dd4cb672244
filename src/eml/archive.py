"""Bundle a rendered EML document into its Darwin Core archive.

An occurrence submission's processed output is a zip archive stored
under the submission's ``output_key``. Publishing re-packs that archive
with ``eml.xml`` added and writes it back under the same key.

Storage is injected through the ``ArchiveStorage`` protocol;
``LocalArchiveStorage`` keeps archives under a directory on disk.
"""

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Protocol

from src.config import (
    DEFAULT_ARCHIVE_FILE_NAME,
    DEFAULT_ARCHIVE_MIME_TYPE,
)
from src.eml import fetchers
from src.eml.connection import ReadConnection
from src.eml.constants import ConstantResolver
from src.eml.errors import BuildError, NotFoundError
from src.eml.pipeline import produce_eml

logger = logging.getLogger(__name__)

_MAX_ARCHIVE_SIZE_BYTES: int = 512 * 1024 * 1024  # 512 MB


class ArchiveStorage(Protocol):
    """Key/value store for submission archives."""

    def get(self, key: str) -> bytes | None:
        ...

    def put(self, key: str, data: bytes, mime_type: str) -> None:
        ...


class LocalArchiveStorage:
    """``ArchiveStorage`` backed by files under ``root``.

    Keys are relative paths; keys escaping ``root`` are rejected.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Invalid archive key '{key}': outside storage root")
        return path

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        if path.stat().st_size > _MAX_ARCHIVE_SIZE_BYTES:
            raise ValueError(f"Archive '{key}' exceeds {_MAX_ARCHIVE_SIZE_BYTES} bytes")
        return path.read_bytes()

    def put(self, key: str, data: bytes, mime_type: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
        logger.debug("Stored %s (%s, %d bytes)", key, mime_type, len(data))


def add_eml_to_archive(
    archive_bytes: bytes, eml_xml: str, file_name: str = DEFAULT_ARCHIVE_FILE_NAME
) -> bytes:
    """Return a copy of the zip archive with the EML document added.

    Any existing member with the same name is replaced; all other members
    are copied in their original order.

    Raises:
        zipfile.BadZipFile: If ``archive_bytes`` is not a zip archive.
    """
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as source, \
            zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            if info.filename == file_name:
                continue
            target.writestr(info, source.read(info.filename))
        target.writestr(file_name, eml_xml.encode("utf-8"))
    return out.getvalue()


async def publish_eml_to_archive(
    data_package_id: int,
    connection: ReadConnection,
    storage: ArchiveStorage,
    supplied_title: str | None = None,
    file_name: str = DEFAULT_ARCHIVE_FILE_NAME,
    constant_resolver: ConstantResolver | None = None,
) -> str:
    """Render a data package's EML and add it to its submission archive.

    Returns:
        The storage key the updated archive was written to.

    Raises:
        BuildError: If the identifier is missing or the submission has no
            output key.
        NotFoundError: If the submission or its archive cannot be found.
    """
    if not data_package_id:
        raise BuildError("Missing required body param data_package_id")

    submission = await fetchers.get_survey_occurrence_submission(data_package_id, connection)
    eml_xml = await produce_eml(
        data_package_id, connection, supplied_title, constant_resolver
    )

    if not submission.output_key:
        raise BuildError("No output key found for occurrence submission")
    key = submission.output_key

    archive_bytes = storage.get(key)
    if archive_bytes is None:
        raise NotFoundError("Failed to get archive file from storage")

    updated = add_eml_to_archive(archive_bytes, eml_xml, file_name)
    storage.put(key, updated, DEFAULT_ARCHIVE_MIME_TYPE)
    logger.info("Added %s to archive %s for data package %s", file_name, key, data_package_id)
    return key
