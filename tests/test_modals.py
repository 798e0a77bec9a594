"""Pilot tests for the search and calculator modals."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from textual.widgets import Button, Input, Label, OptionList, Static

from calchub.app import CalcHub
from calchub.controller import SearchOverlay
from calchub.modals import CalculatorModal, SearchModal
from calchub.search import SearchIndex
from calchub.widgets import FAVORITE_ICON, NOT_FAVORITE_ICON


async def _open_modal(app: CalcHub, pilot, modal, callback=None) -> None:
    app.push_screen(modal, callback)
    await pilot.pause(0.05)


def _label_text(widget: Label | Static) -> str:
    return str(widget.content)


# ============================================================================
# SearchModal
# ============================================================================


@pytest.mark.asyncio
async def test_search_modal_ranks_results_as_you_type(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    overlay = SearchOverlay()
    modal = SearchModal(SearchIndex.build(small_catalog), overlay)

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        assert isinstance(app.focused, Input)

        await pilot.press(*"subnet")
        await pilot.pause(0.05)

        assert overlay.query == "subnet"
        assert modal.results[0].calculator.id == "subnet"
        option_list = modal.query_one("#search-results", OptionList)
        assert option_list.get_option_at_index(0).id == "subnet"
        assert option_list.highlighted == 0


@pytest.mark.asyncio
async def test_search_modal_starts_from_overlay_query(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    overlay = SearchOverlay()
    overlay.set_query("water")
    modal = SearchModal(SearchIndex.build(small_catalog), overlay)

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        assert modal.query_one("#search-input", Input).value == "water"
        assert [r.calculator.id for r in modal.results][:1] == ["water"]


@pytest.mark.asyncio
async def test_search_modal_empty_states(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = SearchModal(SearchIndex.build(small_catalog), SearchOverlay())

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        option_list = modal.query_one("#search-results", OptionList)
        assert option_list.option_count == 1
        assert option_list.get_option_at_index(0).disabled
        assert "Start typing" in str(option_list.get_option_at_index(0).prompt)

        await pilot.press(*"zzzzzzzz")
        await pilot.pause(0.05)
        assert modal.results == []
        assert "No calculators found" in str(option_list.get_option_at_index(0).prompt)


@pytest.mark.asyncio
async def test_search_modal_enter_dismisses_with_highlighted_id(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = SearchModal(SearchIndex.build(small_catalog), SearchOverlay())
    chosen: list[str | None] = []

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal, chosen.append)
        await pilot.press(*"hash")
        await pilot.press("enter")
        await pilot.pause(0.05)

    assert chosen == ["hash"]


@pytest.mark.asyncio
async def test_search_modal_arrow_keys_move_highlight(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = SearchModal(SearchIndex.build(small_catalog), SearchOverlay())

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        await pilot.press(*"calculator")
        await pilot.pause(0.05)
        assert len(modal.results) > 1
        option_list = modal.query_one("#search-results", OptionList)
        assert option_list.highlighted == 0
        await pilot.press("down")
        assert option_list.highlighted == 1
        await pilot.press("up")
        assert option_list.highlighted == 0


@pytest.mark.asyncio
async def test_search_modal_enter_without_results_stays_open(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = SearchModal(SearchIndex.build(small_catalog), SearchOverlay())
    callback = MagicMock()

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal, callback)
        await pilot.press("enter")
        await pilot.pause(0.05)
        assert app.screen is modal

    callback.assert_not_called()


@pytest.mark.asyncio
async def test_search_modal_marks_favorites(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = SearchModal(
        SearchIndex.build(small_catalog), SearchOverlay(), is_favorite=lambda cid: cid == "tip"
    )

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        await pilot.press(*"tip")
        await pilot.pause(0.05)
        option_list = modal.query_one("#search-results", OptionList)
        assert FAVORITE_ICON in str(option_list.get_option_at_index(0).prompt)


# ============================================================================
# CalculatorModal
# ============================================================================


@pytest.mark.asyncio
async def test_calculator_modal_shows_entry(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    calc = small_catalog.get_calculator("subnet")
    modal = CalculatorModal(calc)

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        assert "Subnet Calculator" in _label_text(modal.query_one("#calculator-title", Label))
        assert NOT_FAVORITE_ICON in _label_text(modal.query_one("#calculator-title", Label))
        assert "Developer Tools" in _label_text(modal.query_one("#calculator-category", Label))
        assert "coming soon" in _label_text(modal.query_one("#calculator-body", Static))
        assert "cidr" in _label_text(modal.query_one("#calculator-keywords", Label))


@pytest.mark.asyncio
async def test_calculator_modal_favorite_key_and_button(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    calc = small_catalog.get_calculator("tip")
    toggle = MagicMock(side_effect=[True, False])
    modal = CalculatorModal(calc, toggle_favorite=toggle)

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        await pilot.press("f")
        assert modal.is_favorite is True
        assert FAVORITE_ICON in _label_text(modal.query_one("#calculator-title", Label))

        modal.query_one("#calculator-favorite", Button).press()
        await pilot.pause(0.05)
        assert modal.is_favorite is False

    assert toggle.call_count == 2
    toggle.assert_called_with("tip")


@pytest.mark.asyncio
async def test_calculator_modal_without_toggle_is_read_only(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())
    modal = CalculatorModal(small_catalog.get_calculator("roi"), is_favorite=True)

    async with app.run_test() as pilot:
        await _open_modal(app, pilot, modal)
        await pilot.press("f")
        assert modal.is_favorite is True


@pytest.mark.asyncio
async def test_calculator_modal_escape_and_close_button(small_catalog, memory_storage):
    app = CalcHub(small_catalog, memory_storage())

    async with app.run_test() as pilot:
        first = CalculatorModal(small_catalog.get_calculator("roi"))
        await _open_modal(app, pilot, first)
        await pilot.press("escape")
        await pilot.pause(0.05)
        assert app.screen is not first

        second = CalculatorModal(small_catalog.get_calculator("bmi"))
        await _open_modal(app, pilot, second)
        second.query_one("#calculator-close", Button).press()
        await pilot.pause(0.05)
        assert app.screen is not second
