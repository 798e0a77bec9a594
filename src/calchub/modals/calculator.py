"""Calculator detail modal."""

from __future__ import annotations

from collections.abc import Callable

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from calchub.models import Calculator
from calchub.search import KEYWORD_SEPARATOR
from calchub.themes import THEME_COLORS
from calchub.widgets.listing import FAVORITE_ICON, NOT_FAVORITE_ICON, escape_rich_text


class CalculatorModal(ModalScreen[None]):
    """Shows a calculator's catalog entry with a favorite toggle."""

    BINDINGS = [
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("escape", "close", "Close"),
    ]

    DEFAULT_CSS = """
    CalculatorModal {
        align: center middle;
    }

    #calculator-dialog {
        width: 64;
        height: auto;
        background: $th-background;
        border: tall $th-accent;
        padding: 1 2;
    }

    #calculator-title {
        text-style: bold;
        color: $th-accent;
    }

    #calculator-category,
    #calculator-keywords {
        color: $th-muted;
    }

    #calculator-body {
        margin: 1 0;
        padding: 1 2;
        background: $th-panel;
        text-align: center;
    }

    #calculator-buttons {
        height: auto;
        align: right middle;
    }

    #calculator-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(
        self,
        calculator: Calculator,
        *,
        is_favorite: bool = False,
        toggle_favorite: Callable[[str], bool] | None = None,
    ) -> None:
        super().__init__()
        self.calculator = calculator
        self.is_favorite = is_favorite
        self._toggle_favorite = toggle_favorite

    def _title_markup(self) -> str:
        if self.is_favorite:
            star = f"[{THEME_COLORS['yellow']}]{FAVORITE_ICON}[/]"
        else:
            star = f"[{THEME_COLORS['muted']}]{NOT_FAVORITE_ICON}[/]"
        return f"{star} {escape_rich_text(self.calculator.title)}"

    def compose(self) -> ComposeResult:
        calc = self.calculator
        with Vertical(id="calculator-dialog"):
            yield Label(self._title_markup(), id="calculator-title")
            yield Label(
                f"{escape_rich_text(calc.category_title)} · {calc.complexity}",
                id="calculator-category",
            )
            yield Static(escape_rich_text(calc.description), id="calculator-description")
            yield Static(
                "Calculator coming soon\n[dim]This calculator is under development.[/]",
                id="calculator-body",
            )
            yield Label(
                "Keywords: " + escape_rich_text(KEYWORD_SEPARATOR.join(calc.keywords)),
                id="calculator-keywords",
            )
            with Horizontal(id="calculator-buttons"):
                yield Button("Favorite (f)", variant="default", id="calculator-favorite")
                yield Button("Close (Esc)", variant="primary", id="calculator-close")

    def action_toggle_favorite(self) -> None:
        if self._toggle_favorite is None:
            return
        self.is_favorite = self._toggle_favorite(self.calculator.id)
        self.query_one("#calculator-title", Label).update(self._title_markup())

    def action_close(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#calculator-favorite")
    def on_favorite_pressed(self) -> None:
        self.action_toggle_favorite()

    @on(Button.Pressed, "#calculator-close")
    def on_close_pressed(self) -> None:
        self.action_close()
