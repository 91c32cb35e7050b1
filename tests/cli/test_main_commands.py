"""Tests for the tormeta command-line interface."""

from __future__ import annotations

import json
import logging

import pytest
from click.testing import CliRunner

from tormeta import __version__
from tormeta.cli.main import cli
from tormeta.core.bencode import decode, encode, from_native, to_native

pytestmark = [pytest.mark.cli]


@pytest.fixture
def runner():
    return CliRunner()


def _write(path, native):
    path.write_bytes(encode(from_native(native)))
    return path


def _announce(path):
    return to_native(decode(path.read_bytes())[0])[b"announce"]


class TestGroup:
    """Top-level group options."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("show", "files", "dump", "announce"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_config(self, runner, tmp_path, torrent_file):
        config = tmp_path / "bad.toml"
        config.write_text("[codec]\nmax_depth = 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config), "show", str(torrent_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_verbose_enables_debug_logging(self, runner, torrent_file):
        result = runner.invoke(cli, ["-vv", "announce", "list", str(torrent_file)])
        assert result.exit_code == 0
        assert logging.getLogger("tormeta").level == logging.DEBUG


class TestShow:
    """The show command."""

    def test_single_file(self, runner, torrent_file):
        result = runner.invoke(cli, ["show", str(torrent_file)])

        assert result.exit_code == 0, result.output
        assert "test_file.txt" in result.output
        assert "12.1 KiB" in result.output
        assert "Announce URLs (2)" in result.output
        assert "udp://tracker.example.org:1337" in result.output

    def test_without_announce(self, runner, tmp_path):
        path = _write(tmp_path / "bare.torrent", {b"info": {b"name": b"x", b"length": 1}})

        result = runner.invoke(cli, ["show", str(path)])

        assert result.exit_code == 0, result.output
        assert "Announce URLs (0)" in result.output


class TestFiles:
    """The files command."""

    def test_multi_file(self, runner, multi_torrent_file):
        result = runner.invoke(cli, ["files", str(multi_torrent_file)])

        assert result.exit_code == 0, result.output
        assert "subdir/file2.txt" in result.output
        assert "1000 B" in result.output

    def test_schema_error(self, runner, tmp_path):
        path = _write(tmp_path / "noinfo.torrent", {b"announce": []})

        result = runner.invoke(cli, ["files", str(path)])

        assert result.exit_code == 1
        assert "Missing required field: info" in result.output

    def test_decode_error(self, runner, tmp_path):
        path = tmp_path / "broken.torrent"
        path.write_bytes(b"d8:announce5:abce")

        result = runner.invoke(cli, ["files", str(path)])

        assert result.exit_code == 1
        assert "String declares 5 bytes" in result.output


class TestDump:
    """The dump command."""

    def test_json_output(self, runner, torrent_file):
        result = runner.invoke(cli, ["dump", str(torrent_file)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["info"]["name"] == "test_file.txt"
        assert data["info"]["length"] == 12345
        assert data["announce"][1] == "udp://tracker.example.org:1337"

    def test_binary_values_as_hex(self, runner, tmp_path):
        path = _write(tmp_path / "bin.torrent", {b"pieces": b"\xff\xfe"})

        result = runner.invoke(cli, ["dump", str(path)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"pieces": {"hex": "fffe"}}

    def test_strict_flag_rejects_trailing_data(self, runner, tmp_path):
        path = tmp_path / "trailing.torrent"
        path.write_bytes(b"de" + b"junk")

        assert runner.invoke(cli, ["dump", str(path)]).exit_code == 0

        result = runner.invoke(cli, ["dump", "--strict", str(path)])
        assert result.exit_code == 1
        assert "trailing" in result.output

    def test_strict_from_environment(self, runner, tmp_path, monkeypatch):
        path = tmp_path / "trailing.torrent"
        path.write_bytes(b"de\n")
        monkeypatch.setenv("TORMETA_STRICT_DECODE", "true")

        result = runner.invoke(cli, ["dump", str(path)])

        assert result.exit_code == 1
        assert "trailing" in result.output


class TestAnnounce:
    """The announce command group."""

    def test_list(self, runner, torrent_file):
        result = runner.invoke(cli, ["announce", "list", str(torrent_file)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "http://tracker.example.com:6969/announce",
            "udp://tracker.example.org:1337",
        ]

    def test_add_in_place(self, runner, torrent_file):
        result = runner.invoke(
            cli, ["announce", "add", str(torrent_file), "http://new.example/announce"]
        )

        assert result.exit_code == 0, result.output
        assert "Added 1 URL(s)" in result.output
        assert _announce(torrent_file)[-1] == b"http://new.example/announce"
        assert len(_announce(torrent_file)) == 3

    def test_add_duplicate_leaves_file_untouched(self, runner, tmp_path):
        # Non-canonical key order would be rewritten by a re-encode
        path = tmp_path / "raw.torrent"
        raw = b"d4:infod4:name1:x6:lengthi1ee8:announcel8:http://aee"
        path.write_bytes(raw)

        result = runner.invoke(cli, ["announce", "add", str(path), "http://a"])

        assert result.exit_code == 0, result.output
        assert "already present" in result.output
        assert path.read_bytes() == raw

    def test_add_with_output(self, runner, torrent_file, tmp_path):
        original = torrent_file.read_bytes()
        output = tmp_path / "out.torrent"

        result = runner.invoke(
            cli,
            ["announce", "add", str(torrent_file), "http://x", "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert torrent_file.read_bytes() == original
        assert _announce(output)[-1] == b"http://x"

    def test_set(self, runner, torrent_file):
        result = runner.invoke(
            cli, ["announce", "set", str(torrent_file), "http://one", "http://two"]
        )

        assert result.exit_code == 0, result.output
        assert _announce(torrent_file) == [b"http://one", b"http://two"]

    def test_wrong_type(self, runner, tmp_path):
        path = _write(tmp_path / "string.torrent", {b"announce": b"http://single"})

        result = runner.invoke(cli, ["announce", "list", str(path)])

        assert result.exit_code == 1
        assert "announce" in result.output
