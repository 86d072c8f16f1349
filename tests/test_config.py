from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from minecraft_colors.config import (
    ConfigError,
    ParserSettings,
    apply_overrides,
    build_config,
    load_config,
    settings_from_mapping,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".minecraft-colors.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_enabled = false
        legacy_hex_enabled = false
        mini_message_gradients = false
        highlight_in_backticks = false
        stop_at_template_expressions = true
        max_file_size = 1
        max_line_length = 2

        [tool.minecraft-colors.custom_variables]
        primary = "<#ff8800>"
        """,
    )

    config = load_config(tmp_path)

    assert config == ParserSettings(
        legacy_enabled=False,
        legacy_hex_enabled=False,
        mini_message_gradients=False,
        highlight_in_backticks=False,
        stop_at_template_expressions=True,
        custom_variables={"primary": "<#ff8800>"},
        max_file_size=1,
        max_line_length=2,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [minecraft-colors]
        mini_message_colors = false
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.mini_message_colors is False
    assert config.mini_message_formatting is True


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_formatting = false
        """,
    )

    assert load_config(tmp_path).legacy_formatting is False


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_colors = false
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.legacy_colors is False


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_colors = false
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.minecraft-colors]
        """,
    )

    config = load_config(child)

    assert config.legacy_colors is True


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [minecraft-colors]
        legacy_enabled = false
        """,
    )
    _write_pyproject(
        tmp_path,
        """
        [project]
        name = "plugin"
        """,
    )

    assert load_config(tmp_path).legacy_enabled is False


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    config = load_config(tmp_path)

    assert config == ParserSettings()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        mini_message_enabled = false
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.mini_message_enabled is False


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_enabled = true
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        minecraft-colors = "yes"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_custom_variable_names_are_lowercased(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors.custom_variables]
        Brand = "gold"
        """,
    )

    assert load_config(tmp_path).custom_variables == {"brand": "gold"}


def test_build_config_applies_overrides(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        legacy_enabled = false

        [tool.minecraft-colors.custom_variables]
        brand = "gold"
        """,
    )

    config = build_config(
        tmp_path,
        legacy_enabled=True,
        mini_message_enabled=None,
        custom_variables={"accent": "&d"},
    )

    assert config.legacy_enabled is True
    assert config.mini_message_enabled is True
    assert config.custom_variables == {"brand": "gold", "accent": "&d"}


def test_build_config_rejects_unknown_override(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, unknown_option=True)


def test_build_config_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.minecraft-colors]
        max_line_length = 0
        """,
    )

    with pytest.raises(ConfigError):
        build_config(tmp_path)


def test_apply_overrides_returns_same_config_without_changes():
    config = ParserSettings()

    assert apply_overrides(config, legacy_enabled=None) is config


def test_settings_from_mapping():
    config = settings_from_mapping(
        {
            "minecraftColors.legacy.enabled": False,
            "minecraftColors.miniMessage.gradients": False,
            "minecraftColors.customVariables": {"Primary": "#123456"},
            "minecraftColors.stopAtTemplateExpressions": True,
            "editor.fontSize": 14,
        }
    )

    assert config == ParserSettings(
        legacy_enabled=False,
        mini_message_gradients=False,
        custom_variables={"primary": "#123456"},
        stop_at_template_expressions=True,
    )


def test_settings_from_mapping_rejects_invalid_values():
    with pytest.raises(ConfigError):
        settings_from_mapping({"minecraftColors.highlightInBackticks": "yes"})


@pytest.mark.parametrize(
    "config",
    [
        ParserSettings(legacy_enabled="true"),  # type: ignore[arg-type]
        ParserSettings(mini_message_gradients=1),  # type: ignore[arg-type]
        ParserSettings(custom_variables=["brand"]),  # type: ignore[arg-type]
        ParserSettings(custom_variables={"bad-name": "gold"}),
        ParserSettings(custom_variables={"brand2": "gold"}),
        ParserSettings(custom_variables={"brand": ""}),
        ParserSettings(custom_variables={"brand": 5}),  # type: ignore[dict-item]
        ParserSettings(max_file_size=0),
        ParserSettings(max_line_length=-1),
    ],
)
def test_validate_config_rejects_invalid_values(config: ParserSettings):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        ParserSettings(max_file_size="big"),  # type: ignore[arg-type]
        ParserSettings(max_line_length="long"),  # type: ignore[arg-type]
        ParserSettings(max_line_length=True),
    ],
)
def test_validate_config_rejects_non_numeric_limits(config: ParserSettings):
    with pytest.raises(ConfigError):
        validate_config(config)
