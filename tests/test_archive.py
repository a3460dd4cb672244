"""Tests for bundling EML into Darwin Core archives.

Covers member replacement and ordering, the local storage backend, and
the publish flow's failure modes (missing output key, missing archive).
"""

import asyncio
import io
import zipfile

import pytest

from conftest import CONSTANTS, FakeConnection
from src.eml.archive import (
    LocalArchiveStorage,
    add_eml_to_archive,
    publish_eml_to_archive,
)
from src.eml.errors import BuildError, NotFoundError

ARCHIVE_KEY = "p1/s1/output.zip"


def _zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def _members(archive: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


# ── add_eml_to_archive ──

class TestAddEmlToArchive:

    def test_appends_eml(self):
        archive = _zip({"occurrence.txt": b"id\n1\n", "meta.xml": b"<archive />"})
        members = _members(add_eml_to_archive(archive, "<eml />"))
        assert list(members) == ["occurrence.txt", "meta.xml", "eml.xml"]
        assert members["eml.xml"] == b"<eml />"
        assert members["occurrence.txt"] == b"id\n1\n"

    def test_replaces_existing_member(self):
        archive = _zip({"eml.xml": b"old", "occurrence.txt": b"rows"})
        members = _members(add_eml_to_archive(archive, "new"))
        assert list(members) == ["occurrence.txt", "eml.xml"]
        assert members["eml.xml"] == b"new"

    def test_custom_file_name(self):
        members = _members(add_eml_to_archive(_zip({}), "<eml />", "metadata/eml.xml"))
        assert list(members) == ["metadata/eml.xml"]

    def test_non_zip_rejected(self):
        with pytest.raises(zipfile.BadZipFile):
            add_eml_to_archive(b"not a zip", "<eml />")


# ── LocalArchiveStorage ──

class TestLocalArchiveStorage:

    def test_round_trip(self, tmp_path):
        storage = LocalArchiveStorage(tmp_path)
        storage.put(ARCHIVE_KEY, b"data", "application/zip")
        assert storage.get(ARCHIVE_KEY) == b"data"
        assert not (tmp_path / "p1" / "s1" / "output.zip.tmp").exists()

    def test_missing_key_is_none(self, tmp_path):
        assert LocalArchiveStorage(tmp_path).get("nope.zip") is None

    @pytest.mark.parametrize("key", ["../escape.zip", "/etc/passwd"])
    def test_key_outside_root_rejected(self, tmp_path, key):
        storage = LocalArchiveStorage(tmp_path / "root")
        with pytest.raises(ValueError, match="outside storage root"):
            storage.get(key)


# ── publish_eml_to_archive ──

class TestPublish:

    def test_adds_eml_under_output_key(self, connection, tmp_path):
        storage = LocalArchiveStorage(tmp_path)
        storage.put(ARCHIVE_KEY, _zip({"occurrence.txt": b"rows"}), "application/zip")

        key = asyncio.run(publish_eml_to_archive(1, connection, storage, "Moose 2021"))

        assert key == ARCHIVE_KEY
        members = _members(storage.get(ARCHIVE_KEY))
        assert list(members) == ["occurrence.txt", "eml.xml"]
        eml = members["eml.xml"].decode("utf-8")
        assert eml.startswith('<?xml version="1.0" encoding="UTF-8" standalone="yes"?>')
        assert "<title>Moose 2021</title>" in eml

    def test_missing_output_key(self, rows, tmp_path):
        rows["survey_occurrence_submission"][0]["output_key"] = None
        conn = FakeConnection(rows, dict(CONSTANTS))
        with pytest.raises(BuildError, match="No output key"):
            asyncio.run(publish_eml_to_archive(1, conn, LocalArchiveStorage(tmp_path)))

    def test_missing_archive(self, connection, tmp_path):
        with pytest.raises(NotFoundError, match="Failed to get archive file from storage"):
            asyncio.run(publish_eml_to_archive(1, connection, LocalArchiveStorage(tmp_path)))

    def test_missing_identifier(self, connection, tmp_path):
        with pytest.raises(BuildError):
            asyncio.run(publish_eml_to_archive(None, connection, LocalArchiveStorage(tmp_path)))
        assert connection.executed == []

    def test_non_distinct_submission_stops_before_storage(self, rows, tmp_path):
        rows["survey_occurrence_submission"].append({"occurrence_submission_id": 11, "survey_id": 2})
        conn = FakeConnection(rows, dict(CONSTANTS))
        with pytest.raises(NotFoundError, match="distinct"):
            asyncio.run(publish_eml_to_archive(1, conn, LocalArchiveStorage(tmp_path)))
        assert list(tmp_path.iterdir()) == []
