"""Filesystem helpers for minecraft-colors."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH

MAX_FILE_SIZE_ENV_VAR = "MINECRAFT_COLORS_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "MINECRAFT_COLORS_MAX_LINE_LENGTH"
NEW_FILE_MODE = 0o644


def _positive_int_from_env(name: str, default: int) -> int:
    env_value = os.environ.get(name)
    if env_value is None:
        return default

    try:
        value = int(env_value)
    except ValueError as error:
        error_message = f"Invalid value for {name}: {env_value} (expected positive integer)"
        raise ValueError(error_message) from error

    if value <= 0:
        error_message = f"{name} must be a positive integer, got {value}."
        raise ValueError(error_message)

    return value


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MINECRAFT_COLORS_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    return _positive_int_from_env(MAX_FILE_SIZE_ENV_VAR, default)


def get_max_line_length(default: int = DEFAULT_MAX_LINE_LENGTH) -> int:
    """Resolve the maximum allowed line length.

    Args:
        default: Fallback value in characters when the environment variable is
            unset.

    Returns:
        int: Maximum allowed line length in characters.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    return _positive_int_from_env(MAX_LINE_LENGTH_ENV_VAR, default)


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate an input filepath under a base directory.

    Args:
        raw_path: User-supplied path to a text file (absolute or relative).
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, is
            outside `base_dir`, or traverses a symlink.

    Examples:
        normalize_filepath("plugins/messages.yml", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("messages.yml")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def write_output(
    filepath: Path,
    content: str,
    warn: Callable[[str], None] | None = None,
):
    """Write rendered output to a file atomically.

    An existing target keeps its permissions and, when privileges allow, its
    ownership.

    Args:
        filepath: Destination path.
        content: Text to write.
        warn: Optional callback for emitting non-fatal warnings (e.g., ownership preservation).

    Returns:
        None.

    Raises:
        IOError: If the target is a symlink or not a regular file, or the
            file cannot be written.

    Examples:
        write_output(Path("preview.svg"), svg_text)
    """
    if contains_symlink(filepath):
        raise IOError(f"Symlinks are not supported: {filepath}.")

    existing_stat = collect_file_stat(filepath) if filepath.exists() else None

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)

            # Ensure the temporary file is flushed and synced before the swap
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

            if existing_stat is not None:
                os.chmod(tmp_file.name, stat.S_IMODE(existing_stat.st_mode))
                uid = getattr(existing_stat, "st_uid", None)
                gid = getattr(existing_stat, "st_gid", None)
                if uid is not None and gid is not None and hasattr(os, "chown"):
                    try:
                        os.chown(tmp_file.name, uid, gid)
                    except PermissionError:
                        if warn is not None:
                            warn(
                                f"Warning: Could not preserve file ownership for {filepath.name} "
                                "(requires elevated privileges)"
                            )
            else:
                os.chmod(tmp_file.name, NEW_FILE_MODE)

        # Replace the target with the temporary file (atomic operation)
        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                Path(temp_path).unlink(missing_ok=True)
            except OSError:
                pass
