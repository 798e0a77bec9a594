"""Modal dialogs for the CalcHub TUI.

Import modals from this package: ``from calchub.modals import SearchModal``
"""

# calculator.py: calculator detail view
from calchub.modals.calculator import CalculatorModal

# search.py: search overlay
from calchub.modals.search import SearchModal

__all__ = [
    "CalculatorModal",
    "SearchModal",
]
