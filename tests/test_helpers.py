from __future__ import annotations

import os
import socket
import stat
from pathlib import Path

import pytest

from minecraft_colors.filesystem import (
    NEW_FILE_MODE,
    collect_file_stat,
    contains_symlink,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    safe_read,
    write_output,
)


@pytest.mark.parametrize("value", ["invalid", "0", "-5"])
def test_get_max_file_size_rejects_bad_env(monkeypatch, value):
    monkeypatch.setenv("MINECRAFT_COLORS_MAX_FILE_SIZE", value)
    with pytest.raises(ValueError):
        get_max_file_size()


@pytest.mark.parametrize("value", ["invalid", "0"])
def test_get_max_line_length_rejects_bad_env(monkeypatch, value):
    monkeypatch.setenv("MINECRAFT_COLORS_MAX_LINE_LENGTH", value)
    with pytest.raises(ValueError):
        get_max_line_length()


def test_limits_fall_back_to_default(monkeypatch):
    monkeypatch.delenv("MINECRAFT_COLORS_MAX_FILE_SIZE", raising=False)
    monkeypatch.setenv("MINECRAFT_COLORS_MAX_LINE_LENGTH", "42")

    assert get_max_file_size(default=123) == 123
    assert get_max_line_length(default=7) == 42


def test_normalize_filepath_returns_resolved_path(tmp_path: Path):
    target = tmp_path / "messages.yml"
    target.write_text("greeting: '&aHi'\n", encoding="utf-8")

    assert normalize_filepath(str(target), tmp_path.resolve()) == target.resolve()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.yml"), tmp_path)


def test_normalize_filepath_handles_oserror(monkeypatch, tmp_path: Path):
    target = tmp_path / "messages.yml"
    target.write_text("&cHi\n", encoding="utf-8")
    original_resolve = Path.resolve

    def _raise_oserror(self, strict=False):
        if self == target:
            raise OSError("resolve boom")
        return original_resolve(self, strict=strict)

    monkeypatch.setattr(Path, "resolve", _raise_oserror)
    with pytest.raises(ValueError, match="resolve boom"):
        normalize_filepath(str(target), tmp_path)


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder"
    folder.mkdir()
    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(folder), tmp_path)


def test_normalize_filepath_rejects_outside_base_dir(tmp_path: Path):
    base_dir = tmp_path / "project"
    base_dir.mkdir()
    outside = tmp_path / "elsewhere.txt"
    outside.write_text("&c\n", encoding="utf-8")

    with pytest.raises(ValueError, match="outside of the working directory"):
        normalize_filepath(str(outside), base_dir.resolve())


def test_normalize_filepath_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.yml"
    target.write_text("&c\n", encoding="utf-8")
    link = tmp_path / "alias.yml"
    os.symlink(target, link)

    with pytest.raises(ValueError, match="Symlinks"):
        normalize_filepath(str(link), tmp_path)


def test_contains_symlink_handles_oserror(monkeypatch, tmp_path: Path):
    probe = tmp_path / "probe.yml"
    probe.write_text("&c\n", encoding="utf-8")
    original_is_symlink = Path.is_symlink
    call_count = {"count": 0}

    def _flaky_is_symlink(self):
        if self == probe and call_count["count"] == 0:
            call_count["count"] += 1
            raise OSError("stat boom")
        return original_is_symlink(self)

    monkeypatch.setattr(Path, "is_symlink", _flaky_is_symlink)
    assert contains_symlink(probe) is False


def test_collect_file_stat_handles_missing_file(tmp_path: Path):
    with pytest.raises(IOError):
        collect_file_stat(tmp_path / "missing.yml")


def test_collect_file_stat_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.yml"
    target.write_text("&c\n", encoding="utf-8")
    link = tmp_path / "alias.yml"
    os.symlink(target, link)

    with pytest.raises(IOError, match="Symlinks"):
        collect_file_stat(link)


def test_collect_file_stat_rejects_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()
    with pytest.raises(IOError):
        collect_file_stat(directory)


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="Unix sockets not available")
def test_collect_file_stat_rejects_socket(tmp_path: Path):
    socket_path = tmp_path / "socket.yml"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(socket_path))
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create socket")
    finally:
        sock.close()

    with pytest.raises(IOError) as exc_info:
        collect_file_stat(socket_path)
    assert "is not a regular file" in str(exc_info.value)


@pytest.mark.parametrize("device_type", [stat.S_IFCHR, stat.S_IFBLK])
def test_collect_file_stat_rejects_mocked_device(tmp_path: Path, monkeypatch, device_type):
    """Devices are rejected using a mocked stat result."""
    device = tmp_path / "device.yml"
    device.write_text("&c\n", encoding="utf-8")
    original_stat = os.stat

    def mock_stat(path, *args, **kwargs):
        result = original_stat(path, *args, **kwargs)
        if str(path) == str(device):
            return os.stat_result((device_type | 0o666, *tuple(result)[1:]))
        return result

    monkeypatch.setattr(os, "stat", mock_stat)

    with pytest.raises(IOError) as exc_info:
        collect_file_stat(device)
    assert "is not a regular file" in str(exc_info.value)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "big.yml"
    target.write_text("x" * 20, encoding="utf-8")
    file_stat = collect_file_stat(target)

    enforce_file_size(file_stat, 20, target)
    with pytest.raises(IOError, match="maximum allowed size of 10 bytes"):
        enforce_file_size(file_stat, 10, target)


def test_safe_read_raises_for_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()

    with pytest.raises(IOError):
        safe_read(directory)


def test_write_output_creates_file(tmp_path: Path):
    target = tmp_path / "preview.svg"

    write_output(target, "<svg></svg>\n")

    assert target.read_text(encoding="utf-8") == "<svg></svg>\n"
    assert stat.S_IMODE(target.stat().st_mode) == NEW_FILE_MODE
    assert list(tmp_path.iterdir()) == [target]


def test_write_output_preserves_existing_mode(tmp_path: Path):
    target = tmp_path / "preview.svg"
    target.write_text("old", encoding="utf-8")
    os.chmod(target, 0o600)

    write_output(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_write_output_warns_when_ownership_cannot_be_kept(tmp_path: Path, monkeypatch):
    target = tmp_path / "preview.svg"
    target.write_text("old", encoding="utf-8")
    warnings = []

    def _deny_chown(*args):
        raise PermissionError("denied")

    monkeypatch.setattr(os, "chown", _deny_chown)
    write_output(target, "new", warn=warnings.append)

    assert target.read_text(encoding="utf-8") == "new"
    assert len(warnings) == 1
    assert "preview.svg" in warnings[0]


def test_write_output_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.svg"
    target.write_text("old", encoding="utf-8")
    link = tmp_path / "alias.svg"
    os.symlink(target, link)

    with pytest.raises(IOError, match="Symlinks"):
        write_output(link, "new")

    assert target.read_text(encoding="utf-8") == "old"


def test_write_output_missing_directory(tmp_path: Path):
    with pytest.raises(IOError, match="Error writing"):
        write_output(tmp_path / "missing" / "out.svg", "content")
