"""Internal UI constants for the CalcHub app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

from calchub.controller import KEY_RULES

APP_CSS = """
Screen {
    background: $th-background;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    min-width: 28;
    max-width: 40;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#left-pane:focus-within {
    border: tall $th-accent;
}

#right-pane {
    width: 3fr;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#right-pane:focus-within {
    border: tall $th-accent;
}

#sections-header,
#list-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent;
    text-style: bold;
}

#list-description {
    padding: 0 1;
    color: $th-muted;
}

#section-list,
#calculator-list {
    height: 1fr;
    background: $th-panel;
    border: none;
}

#section-list > .option-list--option-highlighted,
#calculator-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#section-list:focus > .option-list--option-highlighted,
#calculator-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#status-bar {
    height: 1;
    padding: 0 1;
    background: $th-panel-alt;
    color: $th-muted;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit"),
    Binding("f", "toggle_favorite", "Favorite"),
    Binding("ctrl+r", "clear_recent", "Clear Recent", show=False),
]

# Global shortcuts come from the controller's table so guards stay in one place
SHORTCUT_BINDINGS: list[BindingType] = [
    Binding(
        key,
        f"shortcut('{key}')",
        rule.description,
        show=key == rule.keys[0] and rule.action != "close_search",
        priority=rule.priority,
    )
    for rule in KEY_RULES
    for key in rule.keys
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "SHORTCUT_BINDINGS",
]
