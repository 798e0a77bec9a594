"""Theme system: palettes, Textual theme builders, and the theme ring."""

from __future__ import annotations

import logging
from typing import Protocol

from textual.theme import Theme as TextualTheme

from calchub.config import KeyValueStorage, dump_theme, parse_theme
from calchub.models import THEME_KEY, THEME_NAMES

logger = logging.getLogger(__name__)

DARK_THEME: dict[str, str] = {
    "background": "#272822",
    "panel": "#1e1e1e",
    "panel_alt": "#3e3d32",
    "text": "#f8f8f2",
    "muted": "#75715e",
    "accent": "#66d9ef",
    "accent_alt": "#e6db74",
    "green": "#a6e22e",
    "yellow": "#e6db74",
    "orange": "#fd971f",
    "pink": "#f92672",
    "purple": "#ae81ff",
    "highlight": "#49483e",
    "highlight_focus": "#5a5950",
}

LIGHT_THEME: dict[str, str] = {
    "background": "#fafafa",
    "panel": "#f0f0f0",
    "panel_alt": "#e0e0e0",
    "text": "#383a42",
    "muted": "#a0a1a7",
    "accent": "#4078f2",
    "accent_alt": "#c18401",
    "green": "#50a14f",
    "yellow": "#c18401",
    "orange": "#986801",
    "pink": "#e45649",
    "purple": "#a626a4",
    "highlight": "#d9dce3",
    "highlight_focus": "#c8ccd4",
}

CYBER_THEME: dict[str, str] = {
    "background": "#0d0221",
    "panel": "#120331",
    "panel_alt": "#241b47",
    "text": "#e0e0ff",
    "muted": "#6b5b95",
    "accent": "#00f0ff",
    "accent_alt": "#ff2a6d",
    "green": "#05ffa1",
    "yellow": "#f9f871",
    "orange": "#ff9e00",
    "pink": "#ff2a6d",
    "purple": "#b967ff",
    "highlight": "#2d1b69",
    "highlight_focus": "#3d2b79",
}

THEMES: dict[str, dict[str, str]] = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
    "cyber": CYBER_THEME,
}

# Live palette used for Rich markup; swapped in place on theme change
THEME_COLORS = DARK_THEME.copy()


def _build_textual_theme(name: str, colors: dict[str, str]) -> TextualTheme:
    """Convert an app color dict to a Textual Theme with custom CSS variables.

    Maps the palette to $th-* CSS variables used by the TCSS in ui_constants.
    Also sets primary/background/foreground for Textual's built-in widget styling.
    """
    variables = {
        "th-background": colors["background"],
        "th-panel": colors["panel"],
        "th-panel-alt": colors["panel_alt"],
        "th-highlight": colors["highlight"],
        "th-highlight-focus": colors["highlight_focus"],
        "th-accent": colors["accent"],
        "th-accent-alt": colors["accent_alt"],
        "th-muted": colors["muted"],
        "th-text": colors["text"],
        "th-green": colors["green"],
        "th-orange": colors["orange"],
        "th-purple": colors["purple"],
    }
    return TextualTheme(
        name=f"calchub-{name}",
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        warning=colors["orange"],
        error=colors["pink"],
        success=colors["green"],
        dark=name != "light",
        variables=variables,
    )


TEXTUAL_THEMES: dict[str, TextualTheme] = {
    name: _build_textual_theme(name, colors) for name, colors in THEMES.items()
}


def next_theme(name: str) -> str:
    """Return the successor of ``name`` in the ring dark → light → cyber → dark."""
    idx = THEME_NAMES.index(name)
    return THEME_NAMES[(idx + 1) % len(THEME_NAMES)]


class ThemeDisplay(Protocol):
    """Presentation context that shows exactly one theme at a time."""

    def apply_theme(self, name: str) -> None: ...

    def remove_theme(self, name: str) -> None: ...


class ThemeState:
    """Cyclic theme selection with write-through persistence.

    Every transition persists the new theme and swaps the display attribute:
    the previous theme is removed before the new one is applied.
    """

    __slots__ = ("_current", "_display", "_storage")

    def __init__(self, storage: KeyValueStorage, display: ThemeDisplay | None = None) -> None:
        self._storage = storage
        self._current = parse_theme(storage.get(THEME_KEY))
        self._display: ThemeDisplay | None = None
        if display is not None:
            self.attach_display(display)

    @property
    def current(self) -> str:
        return self._current

    def attach_display(self, display: ThemeDisplay) -> None:
        """Bind a display and show the current theme on it."""
        self._display = display
        for name in THEME_NAMES:
            if name != self._current:
                display.remove_theme(name)
        display.apply_theme(self._current)

    def detach_display(self) -> None:
        self._display = None

    def set_theme(self, name: str) -> str:
        """Jump straight to ``name``. Raises ValueError for unknown themes."""
        if name not in THEME_NAMES:
            raise ValueError(f"Unknown theme {name!r}; expected one of {', '.join(THEME_NAMES)}")
        previous = self._current
        self._current = name
        if not self._storage.set(THEME_KEY, dump_theme(name)):
            logger.warning("Theme %s kept in memory only; storage write failed", name)
        if self._display is not None:
            if previous != name:
                self._display.remove_theme(previous)
            self._display.apply_theme(name)
        logger.debug("Theme changed %s -> %s", previous, name)
        return name

    def cycle_theme(self) -> str:
        """Advance to the next theme in the ring and return it."""
        return self.set_theme(next_theme(self._current))


__all__ = [
    "CYBER_THEME",
    "DARK_THEME",
    "LIGHT_THEME",
    "TEXTUAL_THEMES",
    "THEMES",
    "THEME_COLORS",
    "ThemeDisplay",
    "ThemeState",
    "next_theme",
]
