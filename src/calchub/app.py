"""CalcHub TUI - browse, search, and favorite calculators.

Key bindings:
    Ctrl+k  - Toggle search overlay (fuzzy matching)
    Escape  - Close search overlay (clears the query)
    t       - Cycle theme (dark -> light -> cyber), ignored while typing
    f       - Toggle favorite on the highlighted calculator
    Ctrl+r  - Clear recently opened calculators
    Enter   - Open highlighted calculator
    q       - Quit
"""

from __future__ import annotations

import logging

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Label, OptionList, TextArea
from textual.widgets.option_list import Option, OptionDoesNotExist

from calchub.action_messages import build_favorite_notification, build_theme_notification
from calchub.catalog import DEFAULT_CATALOG, Catalog
from calchub.config import KeyValueStorage, MemoryStorage
from calchub.controller import InteractionController, SearchOverlay
from calchub.modals import CalculatorModal, SearchModal
from calchub.models import Calculator
from calchub.personalization import PersonalizationStore
from calchub.search import SearchIndex
from calchub.themes import TEXTUAL_THEMES, THEME_COLORS, THEMES, ThemeState
from calchub.ui_constants import APP_BINDINGS, APP_CSS, SHORTCUT_BINDINGS
from calchub.widgets.listing import (
    escape_rich_text,
    render_calculator_option,
    render_category_option,
    render_section_option,
)

logger = logging.getLogger(__name__)

FAVORITES_SECTION = "__favorites__"
RECENT_SECTION = "__recent__"


class AppThemeDisplay:
    """Shows a theme on the app: palette, Textual theme, and a ``theme-<name>`` class."""

    def __init__(self, app: CalcHub) -> None:
        self._app = app

    def activate(self, name: str) -> None:
        """Swap the Rich palette and Textual theme without touching the DOM."""
        THEME_COLORS.clear()
        THEME_COLORS.update(THEMES[name])
        try:
            self._app.theme = TEXTUAL_THEMES[name].name
        except Exception as e:
            logger.debug("Skipping theme activation in current context: %s", e, exc_info=True)

    def apply_theme(self, name: str) -> None:
        self.activate(name)
        self._app.add_class(f"theme-{name}")
        self._app._on_theme_applied(name)

    def remove_theme(self, name: str) -> None:
        self._app.remove_class(f"theme-{name}")


class CalcHub(App):
    """A TUI application to find, favorite, and revisit calculators."""

    TITLE = "CalcHub"

    CSS = APP_CSS

    BINDINGS = [*APP_BINDINGS, *SHORTCUT_BINDINGS]

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        storage: KeyValueStorage | None = None,
        *,
        initial_query: str = "",
        initial_theme: str | None = None,
    ) -> None:
        super().__init__()
        # Register all Textual themes so $th-* CSS variables resolve before compose()
        for textual_theme in TEXTUAL_THEMES.values():
            self.register_theme(textual_theme)
        self._catalog = catalog
        self._index = SearchIndex.build(catalog)
        self._storage: KeyValueStorage = storage if storage is not None else MemoryStorage()
        self._personalization = PersonalizationStore.load(self._storage)
        self._theme_state = ThemeState(self._storage)
        self._overlay = SearchOverlay(on_open=self._show_search, on_close=self._hide_search)
        self._controller = InteractionController(self._overlay, self._theme_state)
        self._search_screen: SearchModal | None = None
        self._initial_query = initial_query
        self._mounted = False

        self._section_id = FAVORITES_SECTION if self._personalization.favorites else ""
        if not self._section_id and catalog.list_categories():
            self._section_id = catalog.list_categories()[0].id
        self._visible: list[Calculator] = []

        if initial_theme is not None:
            self._theme_state.set_theme(initial_theme)
        self._theme_display = AppThemeDisplay(self)
        self._theme_display.activate(self._theme_state.current)
        self.sub_title = f"{len(catalog)} calculators at your fingertips"

    # ========================================================================
    # Public state (used by tests and the CLI)
    # ========================================================================

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def personalization(self) -> PersonalizationStore:
        return self._personalization

    @property
    def theme_state(self) -> ThemeState:
        return self._theme_state

    @property
    def overlay(self) -> SearchOverlay:
        return self._overlay

    @property
    def controller(self) -> InteractionController:
        return self._controller

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="left-pane"):
                yield Label(" Sections", id="sections-header")
                yield OptionList(id="section-list")
            with Vertical(id="right-pane"):
                yield Label("", id="list-header")
                yield Label("", id="list-description")
                yield OptionList(id="calculator-list")
        yield Label("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self._theme_state.attach_display(self._theme_display)
        self._mounted = True
        self._controller.install()
        self._refresh_sections()
        self._refresh_calculator_list()
        self._update_status_bar()
        self._main_screen.query_one("#calculator-list", OptionList).focus()
        if self._initial_query:
            self._overlay.set_query(self._initial_query)
            self._overlay.open()

    def on_unmount(self) -> None:
        self._mounted = False
        self._controller.uninstall()
        self._theme_state.detach_display()

    @property
    def _main_screen(self) -> Screen:
        """The base screen holding the lists, even while a modal is on top."""
        return self.screen_stack[0]

    # ========================================================================
    # Global shortcuts
    # ========================================================================

    def _focus_in_text_entry(self) -> bool:
        return isinstance(self.focused, (Input, TextArea))

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Let guarded shortcuts fall through to the focused widget."""
        if action == "shortcut":
            key = str(parameters[0]) if parameters else ""
            ctx = self._controller.context(key, in_text_entry=self._focus_in_text_entry())
            return self._controller.resolve(ctx) is not None
        if action == "toggle_favorite":
            return not self._focus_in_text_entry()
        return True

    def action_shortcut(self, key: str) -> None:
        ctx = self._controller.context(key, in_text_entry=self._focus_in_text_entry())
        self._controller.handle(ctx)

    def _show_search(self) -> None:
        if not self._mounted:
            return
        self._search_screen = SearchModal(
            self._index, self._overlay, is_favorite=self._personalization.is_favorite
        )
        self.push_screen(self._search_screen, self._on_search_dismissed)

    def _hide_search(self) -> None:
        screen = self._search_screen
        self._search_screen = None
        if screen is not None and self._mounted:
            screen.dismiss(None)

    def _on_search_dismissed(self, calculator_id: str | None) -> None:
        self._search_screen = None
        self._overlay.close()
        if calculator_id:
            self.call_after_refresh(self.open_calculator, calculator_id)

    def _on_theme_applied(self, name: str) -> None:
        if not self._mounted:
            return
        self._refresh_sections()
        self._refresh_calculator_list()
        self._update_status_bar()
        self.notify(build_theme_notification(name), title="Theme")

    # ========================================================================
    # Sections and calculator list
    # ========================================================================

    def _section_calculators(self, section_id: str) -> list[Calculator]:
        if section_id == FAVORITES_SECTION:
            return self._catalog.resolve_ids(self._personalization.favorites)
        if section_id == RECENT_SECTION:
            return self._catalog.resolve_ids(self._personalization.recent)
        category = self._catalog.get_category(section_id)
        return list(category.calculators) if category else []

    def _refresh_sections(self) -> None:
        section_list = self._main_screen.query_one("#section-list", OptionList)
        section_list.clear_options()
        section_list.add_option(
            Option(
                render_section_option(
                    "Favorites",
                    len(self._section_calculators(FAVORITES_SECTION)),
                    "★",
                    THEME_COLORS["yellow"],
                ),
                id=FAVORITES_SECTION,
            )
        )
        section_list.add_option(
            Option(
                render_section_option(
                    "Recent",
                    len(self._section_calculators(RECENT_SECTION)),
                    "◷",
                    THEME_COLORS["accent"],
                ),
                id=RECENT_SECTION,
            )
        )
        for category in self._catalog.list_categories():
            section_list.add_option(Option(render_category_option(category), id=category.id))
        try:
            section_list.highlighted = section_list.get_option_index(self._section_id)
        except OptionDoesNotExist:
            section_list.highlighted = 0

    def _refresh_calculator_list(self) -> None:
        option_list = self._main_screen.query_one("#calculator-list", OptionList)
        previous = option_list.highlighted
        option_list.clear_options()
        self._visible = self._section_calculators(self._section_id)

        header, description = self._section_labels(self._section_id)
        screen = self._main_screen
        screen.query_one("#list-header", Label).update(f" {escape_rich_text(header)}")
        screen.query_one("#list-description", Label).update(escape_rich_text(description))

        if not self._visible:
            option_list.add_option(Option(self._empty_section_message(), disabled=True))
            return
        for calc in self._visible:
            markup = render_calculator_option(
                calc,
                favorite=self._personalization.is_favorite(calc.id),
                show_category=self._section_id in (FAVORITES_SECTION, RECENT_SECTION),
            )
            option_list.add_option(Option(markup, id=calc.id))
        if previous is not None:
            option_list.highlighted = min(previous, len(self._visible) - 1)
        else:
            option_list.highlighted = 0

    def _section_labels(self, section_id: str) -> tuple[str, str]:
        if section_id == FAVORITES_SECTION:
            return "Favorites", "Calculators you starred with f"
        if section_id == RECENT_SECTION:
            return "Recent", "Recently opened, newest first"
        category = self._catalog.get_category(section_id)
        if category is None:
            return "", ""
        return category.title, category.description

    def _empty_section_message(self) -> str:
        if self._section_id == FAVORITES_SECTION:
            return "[dim]No favorites yet.[/]\n[dim]Try: press [bold]f[/bold] on a calculator.[/]"
        if self._section_id == RECENT_SECTION:
            return "[dim]Nothing opened yet.[/]\n[dim]Try: press [bold]Enter[/bold] on one.[/]"
        return "[dim]No calculators in this category.[/]"

    def _update_status_bar(self) -> None:
        status = (
            f"{self._theme_state.current} theme · "
            f"{len(self._section_calculators(FAVORITES_SECTION))} favorites · "
            f"{len(self._section_calculators(RECENT_SECTION))} recent · "
            "Ctrl+k search · t theme · f favorite"
        )
        self._main_screen.query_one("#status-bar", Label).update(status)

    @on(OptionList.OptionHighlighted, "#section-list")
    def on_section_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        if event.option_id is None or event.option_id == self._section_id:
            return
        self._section_id = event.option_id
        self._main_screen.query_one("#calculator-list", OptionList).highlighted = None
        self._refresh_calculator_list()

    @on(OptionList.OptionSelected, "#section-list")
    def on_section_selected(self) -> None:
        self._main_screen.query_one("#calculator-list", OptionList).focus()

    @on(OptionList.OptionSelected, "#calculator-list")
    def on_calculator_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_id is not None:
            self.open_calculator(event.option_id)

    # ========================================================================
    # Actions
    # ========================================================================

    def _get_current_calculator(self) -> Calculator | None:
        idx = self._main_screen.query_one("#calculator-list", OptionList).highlighted
        if idx is None or not 0 <= idx < len(self._visible):
            return None
        return self._visible[idx]

    def open_calculator(self, calculator_id: str) -> None:
        """Show a calculator and record it as recently opened."""
        calc = self._catalog.get_calculator(calculator_id)
        if calc is None:
            logger.debug("Ignoring unknown calculator id %r", calculator_id)
            self.notify("Calculator not found", title="Open", severity="warning")
            return
        self._personalization.add_to_recent(calc.id)
        self._refresh_sections()
        self._refresh_calculator_list()
        self._update_status_bar()
        self.push_screen(
            CalculatorModal(
                calc,
                is_favorite=self._personalization.is_favorite(calc.id),
                toggle_favorite=self.toggle_favorite,
            )
        )

    def toggle_favorite(self, calculator_id: str) -> bool:
        """Flip a calculator's favorite flag, refresh lists, and notify."""
        now_favorite = self._personalization.toggle_favorite(calculator_id)
        calc = self._catalog.get_calculator(calculator_id)
        title = calc.title if calc is not None else calculator_id
        self._refresh_sections()
        self._refresh_calculator_list()
        self._update_status_bar()
        self.notify(build_favorite_notification(title, now_favorite), title="Favorites")
        return now_favorite

    def action_toggle_favorite(self) -> None:
        calc = self._get_current_calculator()
        if calc is None:
            self.notify("No calculator selected", title="Favorites", severity="warning")
            return
        self.toggle_favorite(calc.id)

    def action_clear_recent(self) -> None:
        self._personalization.clear_recent()
        self._refresh_sections()
        self._refresh_calculator_list()
        self._update_status_bar()
        self.notify("Recent list cleared", title="Recent")


__all__ = [
    "FAVORITES_SECTION",
    "RECENT_SECTION",
    "AppThemeDisplay",
    "CalcHub",
]
