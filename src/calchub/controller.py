"""Global keyboard shortcuts: search overlay state and the key/action table.

The table maps a key combo plus a guard predicate to a named action. The
Textual app generates its bindings from ``KEY_RULES`` and asks the
controller whether a binding may fire, so a guarded key (``t`` inside a text
field) falls through to the focused widget untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from calchub.themes import ThemeState

logger = logging.getLogger(__name__)


class SearchOverlay:
    """Open/closed state and query text of the search overlay.

    ``on_open`` and ``on_close`` fire only on actual state changes, so a
    second open (or close) is a no-op.
    """

    def __init__(
        self,
        on_open: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.is_open = False
        self.query = ""
        self.on_open = on_open
        self.on_close = on_close

    def open(self) -> bool:
        """Show the overlay, keeping any query already set. Returns True if it opened."""
        if self.is_open:
            return False
        self.is_open = True
        if self.on_open is not None:
            self.on_open()
        return True

    def close(self) -> bool:
        """Hide the overlay and clear the query. Returns True if it closed."""
        if not self.is_open:
            return False
        self.is_open = False
        self.query = ""
        if self.on_close is not None:
            self.on_close()
        return True

    def toggle(self) -> bool:
        """Flip the overlay and return the new open state."""
        if self.is_open:
            self.close()
        else:
            self.open()
        return self.is_open

    def set_query(self, query: str) -> None:
        self.query = query


@dataclass(frozen=True, slots=True)
class KeyContext:
    """Snapshot of what a key press happened in."""

    key: str
    in_text_entry: bool = False
    search_open: bool = False


def _always(ctx: KeyContext) -> bool:
    return True


def _search_is_open(ctx: KeyContext) -> bool:
    return ctx.search_open


def _not_typing(ctx: KeyContext) -> bool:
    return not ctx.in_text_entry


@dataclass(frozen=True, slots=True)
class KeyRule:
    """One row of the shortcut table: keys, action name, and the guard."""

    keys: tuple[str, ...]
    action: str
    description: str
    guard: Callable[[KeyContext], bool] = _always
    priority: bool = False


KEY_RULES: tuple[KeyRule, ...] = (
    KeyRule(("ctrl+k", "super+k"), "toggle_search", "Search", priority=True),
    KeyRule(("escape",), "close_search", "Close search", guard=_search_is_open, priority=True),
    KeyRule(("t",), "cycle_theme", "Theme", guard=_not_typing, priority=True),
)


class InteractionController:
    """Dispatch key contexts to overlay and theme actions through ``KEY_RULES``."""

    def __init__(
        self,
        overlay: SearchOverlay,
        theme: ThemeState,
        rules: tuple[KeyRule, ...] = KEY_RULES,
    ) -> None:
        self.overlay = overlay
        self.theme = theme
        self.rules = rules
        self._installed = False
        self._actions: dict[str, Callable[[], object]] = {
            "toggle_search": overlay.toggle,
            "close_search": overlay.close,
            "cycle_theme": theme.cycle_theme,
        }

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        """Start handling keys. Must be paired with ``uninstall()``."""
        if self._installed:
            raise RuntimeError("InteractionController is already installed")
        self._installed = True

    def uninstall(self) -> None:
        """Stop handling keys. Closing also discards any pending query."""
        if not self._installed:
            return
        self._installed = False
        self.overlay.close()

    def context(self, key: str, *, in_text_entry: bool = False) -> KeyContext:
        return KeyContext(key=key, in_text_entry=in_text_entry, search_open=self.overlay.is_open)

    def resolve(self, ctx: KeyContext) -> KeyRule | None:
        """Return the rule that fires for ``ctx``, or None if the key is left alone."""
        if not self._installed:
            return None
        for rule in self.rules:
            if ctx.key in rule.keys and rule.guard(ctx):
                return rule
        return None

    def handle(self, ctx: KeyContext) -> bool:
        """Run the action bound to ``ctx``. Returns True if the key was consumed."""
        rule = self.resolve(ctx)
        if rule is None:
            return False
        logger.debug("Key %s -> %s", ctx.key, rule.action)
        self._actions[rule.action]()
        return True


__all__ = [
    "KEY_RULES",
    "InteractionController",
    "KeyContext",
    "KeyRule",
    "SearchOverlay",
]
