"""Search overlay modal: fuzzy calculator search as you type."""

from __future__ import annotations

import logging
from collections.abc import Callable

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from calchub.action_messages import build_no_results_message
from calchub.controller import SearchOverlay
from calchub.models import SearchResult
from calchub.search import SearchIndex
from calchub.themes import THEME_COLORS
from calchub.widgets.listing import escape_rich_text, render_search_result

logger = logging.getLogger(__name__)


def _never_favorite(calculator_id: str) -> bool:
    return False


class SearchModal(ModalScreen[str | None]):
    """Search box plus ranked results. Dismisses with the chosen calculator id.

    The query lives on the shared ``SearchOverlay`` so closing from anywhere
    (Escape, Ctrl+K, selecting a result) clears it the same way.
    """

    BINDINGS = [
        Binding("down", "cursor_down", "Next", show=False),
        Binding("up", "cursor_up", "Previous", show=False),
    ]

    DEFAULT_CSS = """
    SearchModal {
        align: center top;
    }

    SearchModal > Vertical {
        width: 72;
        max-height: 30;
        margin-top: 3;
        background: $th-panel;
        border: thick $th-accent;
        padding: 1 2;
    }

    SearchModal #search-input {
        margin-bottom: 1;
    }

    SearchModal #search-results {
        height: auto;
        max-height: 20;
    }

    SearchModal #search-footer {
        color: $th-muted;
        margin-top: 1;
    }
    """

    def __init__(
        self,
        index: SearchIndex,
        overlay: SearchOverlay,
        is_favorite: Callable[[str], bool] = _never_favorite,
    ) -> None:
        super().__init__()
        self._index = index
        self._overlay = overlay
        self._is_favorite = is_favorite
        self._results: list[SearchResult] = []

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"[bold {THEME_COLORS['accent']}]Search calculators[/]")
            yield Input(
                value=self._overlay.query,
                placeholder="Search calculators, e.g. EMI, BMI, subnet...",
                id="search-input",
            )
            yield OptionList(id="search-results")
            yield Static("Open: Enter  Close: Esc / Ctrl+K", id="search-footer")

    def on_mount(self) -> None:
        self._populate_results(self._overlay.query)
        self.query_one("#search-input", Input).focus()

    @property
    def results(self) -> list[SearchResult]:
        return list(self._results)

    @on(Input.Changed, "#search-input")
    def _on_search_changed(self, event: Input.Changed) -> None:
        self._overlay.set_query(event.value)
        self._populate_results(event.value)

    def _populate_results(self, query: str) -> None:
        option_list = self.query_one("#search-results", OptionList)
        option_list.clear_options()
        self._results = self._index.search(query)

        if not self._results:
            if query.strip():
                message = escape_rich_text(build_no_results_message(query.strip()))
            else:
                message = "Start typing to search..."
            option_list.add_option(Option(f"[dim]{message}[/]", disabled=True))
            return

        for result in self._results:
            calc_id = result.calculator.id
            markup = render_search_result(result, favorite=self._is_favorite(calc_id))
            option_list.add_option(Option(markup, id=calc_id))
        option_list.highlighted = 0

    def action_cursor_down(self) -> None:
        self.query_one("#search-results", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#search-results", OptionList).action_cursor_up()

    @on(Input.Submitted, "#search-input")
    def _on_query_submitted(self) -> None:
        idx = self.query_one("#search-results", OptionList).highlighted
        if idx is not None and 0 <= idx < len(self._results):
            self.dismiss(self._results[idx].calculator.id)

    @on(OptionList.OptionSelected, "#search-results")
    def _on_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_id is not None:
            self.dismiss(str(event.option_id))
