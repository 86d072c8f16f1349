"""Constants used across the minecraft-colors package."""

from __future__ import annotations

from .models import FormatKind

# Legacy color codes (&0-&9, &a-&f)
LEGACY_COLORS: dict[str, str] = {
    "0": "#000000",  # black
    "1": "#0000AA",  # dark blue
    "2": "#00AA00",  # dark green
    "3": "#00AAAA",  # dark aqua
    "4": "#AA0000",  # dark red
    "5": "#AA00AA",  # dark purple
    "6": "#FFAA00",  # gold
    "7": "#AAAAAA",  # gray
    "8": "#555555",  # dark gray
    "9": "#5555FF",  # blue
    "a": "#55FF55",  # green
    "b": "#55FFFF",  # aqua
    "c": "#FF5555",  # red
    "d": "#FF55FF",  # light purple
    "e": "#FFFF55",  # yellow
    "f": "#FFFFFF",  # white
}

# Legacy formatting codes
LEGACY_FORMATS: dict[str, FormatKind] = {
    "k": FormatKind.OBFUSCATED,
    "l": FormatKind.BOLD,
    "m": FormatKind.STRIKETHROUGH,
    "n": FormatKind.UNDERLINE,
    "o": FormatKind.ITALIC,
    "r": FormatKind.RESET,
}

# MiniMessage named colors
MINI_MESSAGE_COLORS: dict[str, str] = {
    "black": "#000000",
    "dark_blue": "#0000AA",
    "dark_green": "#00AA00",
    "dark_aqua": "#00AAAA",
    "dark_red": "#AA0000",
    "dark_purple": "#AA00AA",
    "gold": "#FFAA00",
    "gray": "#AAAAAA",
    "grey": "#AAAAAA",
    "dark_gray": "#555555",
    "dark_grey": "#555555",
    "blue": "#5555FF",
    "green": "#55FF55",
    "aqua": "#55FFFF",
    "red": "#FF5555",
    "light_purple": "#FF55FF",
    "yellow": "#FFFF55",
    "white": "#FFFFFF",
}

# MiniMessage formatting tags, including short aliases
MINI_MESSAGE_FORMATS: dict[str, FormatKind] = {
    "bold": FormatKind.BOLD,
    "b": FormatKind.BOLD,
    "italic": FormatKind.ITALIC,
    "em": FormatKind.ITALIC,
    "i": FormatKind.ITALIC,
    "underlined": FormatKind.UNDERLINE,
    "u": FormatKind.UNDERLINE,
    "strikethrough": FormatKind.STRIKETHROUGH,
    "st": FormatKind.STRIKETHROUGH,
    "obfuscated": FormatKind.OBFUSCATED,
    "obf": FormatKind.OBFUSCATED,
    "reset": FormatKind.RESET,
}

GRADIENT_TAG = "gradient"
CLOSE_COLOR = "close"

# Editor key-value store keys mapped to `ParserSettings` fields
SETTING_KEYS: dict[str, str] = {
    "minecraftColors.legacy.enabled": "legacy_enabled",
    "minecraftColors.legacy.colors": "legacy_colors",
    "minecraftColors.legacy.formatting": "legacy_formatting",
    "minecraftColors.legacyHex.enabled": "legacy_hex_enabled",
    "minecraftColors.miniMessage.enabled": "mini_message_enabled",
    "minecraftColors.miniMessage.colors": "mini_message_colors",
    "minecraftColors.miniMessage.formatting": "mini_message_formatting",
    "minecraftColors.miniMessage.gradients": "mini_message_gradients",
    "minecraftColors.customVariables": "custom_variables",
    "minecraftColors.highlightInBackticks": "highlight_in_backticks",
    "minecraftColors.stopAtTemplateExpressions": "stop_at_template_expressions",
}

# Limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_LINE_LENGTH = 10_000

# Preview rendering
PREVIEW_CHAR_WIDTH = 9
PREVIEW_CHAR_HEIGHT = 16
PREVIEW_PADDING = 8
PREVIEW_FONT_SIZE = 14
PREVIEW_BACKGROUND = "#1e1e1e"
PREVIEW_DEFAULT_COLOR = "#d4d4d4"
OBFUSCATED_GLYPHS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
