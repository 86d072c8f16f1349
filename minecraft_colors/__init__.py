"""
minecraft-colors: highlighter for legacy color codes and MiniMessage tags.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    minecraft-colors messages.yml --format svg --line 3

Library Usage:
    from minecraft_colors import resolve, scan

    line = "&cHello <gradient:#ff0000:#0000ff>World</gradient>"
    segments = resolve(line, scan(line))
"""

__version__ = "0.1.0"

from .config import ConfigError, ParserSettings, build_config, load_config, settings_from_mapping
from .decorations import DecorationRegistry, render_options
from .exceptions import HighlightError, LineTooLongError
from .gradient import gradient_color, interpolate_color
from .highlight import HighlightFileError, highlight_document, highlight_file, highlight_lines
from .models import (
    FormatKind,
    GradientRange,
    LineRange,
    StyledRange,
    StyledSegment,
    StyleMatch,
    StyleState,
    TextStyle,
    parse_style_key,
    style_key,
)
from .preview import generate_preview_data_uri, generate_preview_svg, render_ansi
from .resolver import group_ranges, resolve, resolve_ranges
from .scanner import scan

__all__ = [
    # Core functionality
    "scan",
    "resolve",
    "resolve_ranges",
    "group_ranges",
    "gradient_color",
    "interpolate_color",
    # Document highlighting
    "highlight_lines",
    "highlight_document",
    "highlight_file",
    # Presentation
    "DecorationRegistry",
    "render_options",
    "generate_preview_svg",
    "generate_preview_data_uri",
    "render_ansi",
    # Data models
    "FormatKind",
    "GradientRange",
    "LineRange",
    "StyleMatch",
    "StyleState",
    "StyledRange",
    "StyledSegment",
    "TextStyle",
    "style_key",
    "parse_style_key",
    # Configuration
    "ParserSettings",
    "build_config",
    "load_config",
    "settings_from_mapping",
    # Exceptions
    "ConfigError",
    "HighlightError",
    "HighlightFileError",
    "LineTooLongError",
    # Version
    "__version__",
]
