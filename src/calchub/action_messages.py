"""UI-facing copy builders for errors and notifications."""

from __future__ import annotations


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_favorite_notification(title: str, is_favorite: bool) -> str:
    """Build notification text after a favorite toggle."""
    if is_favorite:
        return f"Added {title} to favorites"
    return f"Removed {title} from favorites"


def build_theme_notification(theme_name: str) -> str:
    return f"Theme: {theme_name} (press t to cycle)"


def build_no_results_message(query: str) -> str:
    """Build the empty-state copy for a search with no hits."""
    return (
        f'No calculators found for "{query}".\n'
        "Try: a shorter term, or a keyword like emi, bmi, subnet."
    )


__all__ = [
    "build_actionable_error",
    "build_favorite_notification",
    "build_next_step_hint",
    "build_no_results_message",
    "build_theme_notification",
]
