"""Presentation-side cache of rendering resources keyed by style key."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

from .models import TextStyle, parse_style_key
from .preview import text_decoration

logger = logging.getLogger(__name__)

T = TypeVar("T")


def render_options(style: TextStyle) -> dict[str, str]:
    """Decoration options for a host editor.

    Args:
        style: Resolved style.

    Returns:
        dict[str, str]: ``color``, ``fontWeight``, ``fontStyle`` and
            ``textDecoration`` entries; unset properties are omitted.

    Examples:
        render_options(TextStyle("#FF5555", bold=True))
        # {"color": "#FF5555", "fontWeight": "bold"}
    """
    options = {}
    if style.color:
        options["color"] = style.color
    if style.bold:
        options["fontWeight"] = "bold"
    if style.italic:
        options["fontStyle"] = "italic"
    decoration = text_decoration(style)
    if decoration:
        options["textDecoration"] = decoration
    return options


class DecorationRegistry(Generic[T]):
    """Cache of rendering resources, one per canonical style key.

    The registry belongs to the presentation layer that creates it; the
    scanning and resolving functions never touch it.

    Args:
        factory: Builds the resource for a style.
        dispose: Optional callback releasing a resource.

    Examples:
        registry = DecorationRegistry(render_options)
        options = registry.get_or_create(TextStyle("#FF5555").key)
    """

    def __init__(
        self,
        factory: Callable[[TextStyle], T],
        dispose: Callable[[T], None] | None = None,
    ):
        self._factory = factory
        self._dispose = dispose
        self._resources: dict[str, T] = {}

    def get_or_create(self, key: str) -> T:
        if key not in self._resources:
            self._resources[key] = self._factory(parse_style_key(key))
            logger.debug("Created decoration for %s", key)
        return self._resources[key]

    def get(self, key: str) -> T | None:
        return self._resources.get(key)

    def keys(self) -> list[str]:
        return list(self._resources)

    def stale_keys(self, active_keys: Iterable[str]) -> list[str]:
        """Cached keys not present in `active_keys`; their decorations should be cleared."""
        active = set(active_keys)
        return [key for key in self._resources if key not in active]

    def dispose_all(self) -> None:
        if self._dispose is not None:
            for resource in self._resources.values():
                self._dispose(resource)
        logger.debug("Disposed %d decorations", len(self._resources))
        self._resources.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._resources

    def __len__(self) -> int:
        return len(self._resources)
