"""Tests for config loading, DSN precedence and the CLI run path."""

import argparse
import asyncio
import io
import json
import zipfile
from contextlib import asynccontextmanager

import pytest

from src import main as main_module
from src.config import (
    DEFAULT_CONSTANT_NAMES,
    DSN_ENV_VAR,
    get_constant_names,
    get_dsn,
    load_config,
)
from src.main import write_eml


class TestLoadConfig:

    def test_shipped_config_parses(self):
        config = load_config()
        assert config["eml"]["archive_file_name"] == "eml.xml"
        assert set(config["constants"]) == set(DEFAULT_CONSTANT_NAMES)

    def test_missing_file_falls_back_to_empty(self, tmp_path, caplog):
        with caplog.at_level("WARNING", logger="src.config"):
            assert load_config(tmp_path / "absent.json") == {}
        assert "No config file" in caplog.text

    def test_alternate_file(self, tmp_path):
        path = tmp_path / "alt.json"
        path.write_text(json.dumps({"database": {"dsn": "postgresql://file"}}), encoding="utf-8")
        assert load_config(path)["database"]["dsn"] == "postgresql://file"


class TestDsn:

    def test_environment_wins(self, monkeypatch):
        monkeypatch.setenv(DSN_ENV_VAR, "postgresql://env")
        assert get_dsn({"database": {"dsn": "postgresql://file"}}) == "postgresql://env"

    def test_file_used_without_environment(self, monkeypatch):
        monkeypatch.delenv(DSN_ENV_VAR, raising=False)
        assert get_dsn({"database": {"dsn": "postgresql://file"}}) == "postgresql://file"

    def test_absent_everywhere(self, monkeypatch):
        monkeypatch.delenv(DSN_ENV_VAR, raising=False)
        assert get_dsn({}) is None


class TestConstantNames:

    def test_defaults(self):
        assert get_constant_names({}) == DEFAULT_CONSTANT_NAMES

    def test_overrides_merge(self):
        names = get_constant_names({"constants": {"provider_url": "SIMS_PROVIDER_URL"}})
        assert names["provider_url"] == "SIMS_PROVIDER_URL"
        assert names["organization_name"] == "ORGANIZATION_NAME_FULL"

    def test_defaults_not_mutated(self):
        get_constant_names({"constants": {"provider_url": "X"}})
        assert DEFAULT_CONSTANT_NAMES["provider_url"] == "PROVIDER_URL"


class TestWriteEml:

    def test_writes_and_leaves_no_tmp(self, tmp_path):
        path = tmp_path / "nested" / "42.xml"
        write_eml("<eml />", path)
        assert path.read_text(encoding="utf-8") == "<eml />"
        assert not path.with_suffix(".tmp").exists()

    def test_overwrites_existing(self, tmp_path):
        path = tmp_path / "42.xml"
        path.write_text("old", encoding="utf-8")
        write_eml("new", path)
        assert path.read_text(encoding="utf-8") == "new"


# ── CLI run ──

def _args(tmp_path, **overrides) -> argparse.Namespace:
    values = {
        "data_package_id": 1,
        "title": None,
        "dsn": "postgresql://cli",
        "output": str(tmp_path / "out.xml"),
        "archive_dir": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestRun:

    @pytest.fixture
    def fake_connect(self, monkeypatch, connection):
        opened = []

        @asynccontextmanager
        async def _connect(dsn):
            opened.append(dsn)
            yield connection

        monkeypatch.setattr(main_module, "connect", _connect)
        return opened

    def test_writes_output_file(self, tmp_path, fake_connect):
        target = asyncio.run(main_module.run({}, _args(tmp_path, title="Moose 2021")))
        assert target == str(tmp_path / "out.xml")
        assert "<title>Moose 2021</title>" in (tmp_path / "out.xml").read_text(encoding="utf-8")
        assert fake_connect == ["postgresql://cli"]

    def test_cli_dsn_overrides_environment(self, tmp_path, fake_connect, monkeypatch):
        monkeypatch.setenv(DSN_ENV_VAR, "postgresql://env")
        asyncio.run(main_module.run({}, _args(tmp_path)))
        assert fake_connect == ["postgresql://cli"]

    def test_missing_dsn(self, tmp_path, fake_connect, monkeypatch):
        monkeypatch.delenv(DSN_ENV_VAR, raising=False)
        with pytest.raises(ValueError, match="No database DSN"):
            asyncio.run(main_module.run({}, _args(tmp_path, dsn=None)))
        assert fake_connect == []

    def test_configured_constant_names(self, tmp_path, fake_connect, connection):
        connection.constants["ALT_ORG"] = "Alt Org"
        config = {"constants": {"organization_name": "ALT_ORG"}}
        asyncio.run(main_module.run(config, _args(tmp_path)))
        xml = (tmp_path / "out.xml").read_text(encoding="utf-8")
        assert "<organizationName>Alt Org</organizationName>" in xml

    def test_archive_mode(self, tmp_path, fake_connect):
        archive_dir = tmp_path / "archives"
        key = "p1/s1/output.zip"
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("occurrence.txt", "rows")
        (archive_dir / "p1" / "s1").mkdir(parents=True)
        (archive_dir / key).write_bytes(buf.getvalue())

        target = asyncio.run(main_module.run({}, _args(tmp_path, archive_dir=str(archive_dir))))

        assert target == key
        with zipfile.ZipFile(archive_dir / key) as zf:
            assert zf.namelist() == ["occurrence.txt", "eml.xml"]
        assert not (tmp_path / "out.xml").exists()
