"""Configuration loading and management."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH, SETTING_KEYS

logger = logging.getLogger(__name__)

VARIABLE_NAME_PATTERN = re.compile(r"^[a-z_]+$")


@dataclass
class ParserSettings:
    """Settings controlling which markup the scanner recognizes.

    Each flag gates one category of matches; a resolution call reads the
    settings and never mutates them.

    Attributes:
        legacy_enabled: Recognize ``&`` codes at all.
        legacy_colors: Recognize ``&0``-``&f`` color codes.
        legacy_formatting: Recognize ``&k``-``&o`` and ``&r`` format codes.
        legacy_hex_enabled: Recognize ``&#RRGGBB`` codes.
        mini_message_enabled: Recognize MiniMessage tags at all.
        mini_message_colors: Recognize color tags and color closes.
        mini_message_formatting: Recognize format tags and format closes.
        mini_message_gradients: Recognize ``<gradient:...>`` tags.
        custom_variables: Extra tag names mapped to markup values.
        highlight_in_backticks: Keep matches that sit inside backtick spans.
        stop_at_template_expressions: End legacy code scopes at ``${``.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed when highlighting documents.

    Examples:
        ParserSettings(legacy_enabled=False, custom_variables={"brand": "#ff8800"})
    """

    # Legacy codes
    legacy_enabled: bool = True
    legacy_colors: bool = True
    legacy_formatting: bool = True
    legacy_hex_enabled: bool = True

    # MiniMessage tags
    mini_message_enabled: bool = True
    mini_message_colors: bool = True
    mini_message_formatting: bool = True
    mini_message_gradients: bool = True
    custom_variables: dict[str, str] = field(default_factory=dict)

    # Scope heuristics
    highlight_in_backticks: bool = True
    stop_at_template_expressions: bool = False

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH


DEFAULT_SETTINGS = ParserSettings()

_BOOLEAN_FIELDS = tuple(
    setting.name for setting in fields(ParserSettings) if setting.type in ("bool", bool)
)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`legacy_enabled` must be a boolean")
    """


def load_config(search_path: Path) -> ParserSettings:
    """Load settings from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.minecraft-colors]`` table from `pyproject.toml` and the
    ``[minecraft-colors]`` or ``[tool.minecraft-colors]`` table from
    `.minecraft-colors.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        ParserSettings: Loaded settings with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("plugins/messages"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "minecraft-colors")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".minecraft-colors.toml",
            table_paths=[("minecraft-colors",), ("tool", "minecraft-colors")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return ParserSettings()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> ParserSettings | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.debug("Skipping unreadable config file %s: %s", config_file, error)
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        logger.debug("Loaded [%s] from %s", ".".join(table_path), config_file)
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ParserSettings:
    table_display = ".".join(table_path)

    if raw_config is None:
        return ParserSettings()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return ParserSettings()

    try:
        return ParserSettings(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def settings_from_mapping(values: Mapping[str, object]) -> ParserSettings:
    """Build settings from an editor-style key-value store.

    Keys use the dotted editor names (``minecraftColors.legacy.enabled``,
    ``minecraftColors.customVariables``...). Missing keys keep their defaults
    and unrelated keys are ignored.

    Args:
        values: Flat mapping of setting keys to values.

    Returns:
        ParserSettings: Normalized and validated settings.

    Raises:
        ConfigError: If a recognized key holds an invalid value.

    Examples:
        settings_from_mapping({"minecraftColors.legacy.enabled": False})
    """
    overrides = {
        attribute: values[key] for key, attribute in SETTING_KEYS.items() if key in values
    }
    config = apply_overrides(ParserSettings(), **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def normalize_config(config: ParserSettings) -> ParserSettings:
    custom_variables = config.custom_variables
    if isinstance(custom_variables, Mapping):
        custom_variables = {
            str(name).lower(): value for name, value in custom_variables.items()
        }
    return replace(config, custom_variables=custom_variables)


def validate_config(config: ParserSettings) -> None:
    """Validate a `ParserSettings` instance.

    Args:
        config: Settings to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a feature flag is not a boolean, custom variables are
            malformed, or numeric limits are not positive integers.

    Examples:
        validate_config(ParserSettings(mini_message_gradients=False))
    """
    config = normalize_config(config)

    for name in _BOOLEAN_FIELDS:
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    if not isinstance(config.custom_variables, Mapping):
        raise ConfigError("`custom_variables` must be a table of names to values")
    for name, value in config.custom_variables.items():
        if not VARIABLE_NAME_PATTERN.match(name):
            raise ConfigError(
                f"Invalid custom variable name {name!r} (letters and underscores only)"
            )
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Custom variable {name!r} must map to a non-empty string")

    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )
    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )


def apply_overrides(config: ParserSettings, **overrides: object) -> ParserSettings:
    """Apply override values to `ParserSettings`.

    Args:
        config: Base settings to update.
        overrides: Override values keyed by settings field name; values set to
            None are ignored. ``custom_variables`` overrides are merged into
            the existing variables.

    Returns:
        ParserSettings: New settings with the provided overrides applied. The
        original settings are returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `ParserSettings`.

    Examples:
        updated = apply_overrides(config, legacy_enabled=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    variables = changes.get("custom_variables")
    if isinstance(variables, Mapping) and isinstance(config.custom_variables, Mapping):
        changes["custom_variables"] = {**config.custom_variables, **variables}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ParserSettings:
    """Load, override, and validate settings.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by settings attributes; None values
            are ignored.

    Returns:
        ParserSettings: Validated settings ready for highlighting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), mini_message_gradients=False)
    """
    config = load_config(search_path)
    try:
        config = apply_overrides(config, **overrides)
    except TypeError as error:
        raise ConfigError(str(error)) from error
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
