"""Pilot tests for the CalcHub app: global shortcuts, sections, and persistence."""

from __future__ import annotations

import json

import pytest
from textual.widgets import Input, Label, OptionList, TextArea

from calchub.app import FAVORITES_SECTION, RECENT_SECTION, CalcHub
from calchub.modals import CalculatorModal, SearchModal
from calchub.models import FAVORITES_KEY, RECENT_KEY, THEME_KEY
from calchub.themes import CYBER_THEME, LIGHT_THEME, THEME_COLORS


def _calculator_ids(app: CalcHub) -> list[str | None]:
    option_list = app.query_one("#calculator-list", OptionList)
    return [option_list.get_option_at_index(i).id for i in range(option_list.option_count)]


# ============================================================================
# Search overlay shortcuts
# ============================================================================


@pytest.mark.asyncio
async def test_ctrl_k_toggles_search(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        assert app.overlay.is_open
        assert isinstance(app.screen, SearchModal)

        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        assert not app.overlay.is_open
        assert not isinstance(app.screen, SearchModal)


@pytest.mark.asyncio
async def test_escape_closes_search_and_clears_query(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        await pilot.press(*"roi")
        await pilot.pause(0.05)
        assert app.overlay.query == "roi"

        await pilot.press("escape")
        await pilot.pause(0.05)
        assert not app.overlay.is_open
        assert app.overlay.query == ""
        assert not isinstance(app.screen, SearchModal)

        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        assert app.screen.query_one("#search-input", Input).value == ""


@pytest.mark.asyncio
async def test_escape_without_search_does_nothing_on_main_screen(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.press("escape")
        await pilot.pause(0.05)
        assert not app.overlay.is_open
        assert app.theme_state.current == "dark"


@pytest.mark.asyncio
async def test_selecting_a_search_result_opens_calculator(small_catalog, memory_storage):
    storage = memory_storage()
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        await pilot.press(*"bmi")
        await pilot.pause(0.05)
        await pilot.press("enter")
        await pilot.pause(0.1)

        assert isinstance(app.screen, CalculatorModal)
        assert app.screen.calculator.id == "bmi"
        assert not app.overlay.is_open
        assert app.overlay.query == ""
        assert app.personalization.recent == ("bmi",)
        assert json.loads(storage.data[RECENT_KEY]) == ["bmi"]


@pytest.mark.asyncio
async def test_initial_query_opens_search(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage(), initial_query="emi")
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert app.overlay.is_open
        assert isinstance(app.screen, SearchModal)
        assert app.screen.query_one("#search-input", Input).value == "emi"
        assert app.screen.results[0].calculator.id == "loan_emi"


# ============================================================================
# Theme shortcut
# ============================================================================


@pytest.mark.asyncio
async def test_t_cycles_theme_and_persists(small_catalog, memory_storage):
    storage = memory_storage()
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        assert app.has_class("theme-dark")

        await pilot.press("t")
        await pilot.pause(0.05)
        assert app.theme_state.current == "light"
        assert app.theme == "calchub-light"
        assert app.has_class("theme-light")
        assert not app.has_class("theme-dark")
        assert THEME_COLORS == LIGHT_THEME
        assert storage.data[THEME_KEY] == '"light"'

        await pilot.press("t")
        await pilot.press("t")
        await pilot.pause(0.05)
        assert app.theme_state.current == "dark"
        assert app.has_class("theme-dark")
        assert not app.has_class("theme-light")
        assert not app.has_class("theme-cyber")


@pytest.mark.asyncio
async def test_t_in_search_input_types_instead_of_cycling(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.press("ctrl+k")
        await pilot.pause(0.05)
        await pilot.press("t")
        await pilot.pause(0.05)

        assert app.theme_state.current == "dark"
        assert app.screen.query_one("#search-input", Input).value == "t"
        assert app.overlay.query == "t"


@pytest.mark.asyncio
async def test_t_in_text_area_types_instead_of_cycling(small_catalog, memory_storage):
    storage = memory_storage()
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        notes = TextArea(id="notes")
        await app.screen.mount(notes)
        notes.focus()
        await pilot.pause(0.05)
        await pilot.press("t")
        await pilot.pause(0.05)

        assert notes.text == "t"
        assert app.theme_state.current == "dark"
        assert THEME_KEY not in storage.data


@pytest.mark.asyncio
async def test_t_cycles_theme_inside_calculator_modal(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        app.open_calculator("tip")
        await pilot.pause(0.05)
        await pilot.press("t")
        await pilot.pause(0.05)
        assert isinstance(app.screen, CalculatorModal)
        assert app.theme_state.current == "light"


@pytest.mark.asyncio
async def test_persisted_and_initial_theme(small_catalog, memory_storage):
    storage = memory_storage({THEME_KEY: '"light"'})
    app = CalcHub(small_catalog, storage, initial_theme="cyber")
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert app.theme_state.current == "cyber"
        assert app.has_class("theme-cyber")
        assert not app.has_class("theme-light")
        assert THEME_COLORS == CYBER_THEME
        assert storage.data[THEME_KEY] == '"cyber"'


# ============================================================================
# Favorites, recents, and sections
# ============================================================================


@pytest.mark.asyncio
async def test_starts_on_first_category_without_favorites(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert _calculator_ids(app) == ["loan_emi", "tip", "roi"]
        header = app.query_one("#list-header", Label)
        assert "Finance" in str(header.content)


@pytest.mark.asyncio
async def test_f_toggles_favorite_on_highlighted_calculator(small_catalog, memory_storage):
    storage = memory_storage()
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        await pilot.press("down")
        await pilot.press("f")
        await pilot.pause(0.05)
        assert app.personalization.favorites == ("tip",)
        assert json.loads(storage.data[FAVORITES_KEY]) == ["tip"]

        await pilot.press("f")
        await pilot.pause(0.05)
        assert app.personalization.favorites == ()


@pytest.mark.asyncio
async def test_enter_opens_calculator_and_records_recent(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.press("enter")
        await pilot.pause(0.05)
        assert isinstance(app.screen, CalculatorModal)
        assert app.screen.calculator.id == "loan_emi"

        await pilot.press("f")
        await pilot.pause(0.05)
        assert app.personalization.is_favorite("loan_emi")

        await pilot.press("escape")
        await pilot.pause(0.05)
        assert not isinstance(app.screen, CalculatorModal)
        assert app.personalization.recent == ("loan_emi",)


@pytest.mark.asyncio
async def test_recent_section_lists_most_recent_first(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        for calc_id in ("tip", "hash", "bmi", "tip"):
            app.open_calculator(calc_id)
            await pilot.pause(0.05)
            app.pop_screen()
            await pilot.pause(0.05)

        section_list = app.query_one("#section-list", OptionList)
        section_list.highlighted = section_list.get_option_index(RECENT_SECTION)
        await pilot.pause(0.05)
        assert _calculator_ids(app) == ["tip", "bmi", "hash"]

        await pilot.press("ctrl+r")
        await pilot.pause(0.05)
        assert app.personalization.recent == ()
        assert _calculator_ids(app) == [None]


@pytest.mark.asyncio
async def test_stale_persisted_ids_are_skipped(small_catalog, memory_storage):
    storage = memory_storage(
        {
            FAVORITES_KEY: '["retired_calc", "water"]',
            RECENT_KEY: '["gone", "subnet", "also_gone"]',
        }
    )
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        # Favorites exist, so the app starts on the favorites section
        assert _calculator_ids(app) == ["water"]
        section_list = app.query_one("#section-list", OptionList)
        assert section_list.highlighted == section_list.get_option_index(FAVORITES_SECTION)

        section_list.highlighted = section_list.get_option_index(RECENT_SECTION)
        await pilot.pause(0.05)
        assert _calculator_ids(app) == ["subnet"]
        status = str(app.query_one("#status-bar", Label).content)
        assert "1 favorites" in status
        assert "1 recent" in status


@pytest.mark.asyncio
async def test_corrupt_storage_still_starts(small_catalog, memory_storage):
    storage = memory_storage(
        {FAVORITES_KEY: "{not json", RECENT_KEY: '["tip"]', THEME_KEY: "???"}
    )
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert app.personalization.favorites == ()
        assert app.personalization.recent == ("tip",)
        assert app.theme_state.current == "dark"


@pytest.mark.asyncio
async def test_deeply_nested_storage_still_starts(small_catalog, memory_storage):
    nested = "[" * 100_000
    storage = memory_storage({FAVORITES_KEY: nested, RECENT_KEY: nested, THEME_KEY: nested})
    app = CalcHub(small_catalog, storage)
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert app.personalization.favorites == ()
        assert app.personalization.recent == ()
        assert app.theme_state.current == "dark"


@pytest.mark.asyncio
async def test_unknown_calculator_id_notifies(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        app.open_calculator("nope")
        await pilot.pause(0.05)
        assert not isinstance(app.screen, CalculatorModal)
        assert app.personalization.recent == ()


# ============================================================================
# Lifecycle
# ============================================================================


@pytest.mark.asyncio
async def test_controller_installed_while_running_and_removed_on_exit(
    small_catalog, memory_storage
):
    app = CalcHub(small_catalog, memory_storage())
    async with app.run_test() as pilot:
        await pilot.pause(0.05)
        assert app.controller.installed

    assert not app.controller.installed
    assert not app.overlay.is_open
