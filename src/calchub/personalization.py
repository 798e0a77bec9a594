"""Favorites and recently-opened calculators, persisted per user."""

from __future__ import annotations

import logging

from calchub.config import KeyValueStorage, dump_id_list, parse_id_list
from calchub.models import FAVORITES_KEY, MAX_RECENT, RECENT_KEY

logger = logging.getLogger(__name__)


class PersonalizationStore:
    """Owns the favorites set and the bounded recency list.

    Favorites and recents live in separate storage slots, so corruption in
    one never affects the other. Every mutation is written through to
    storage before returning; a failed write is logged and the in-memory
    state stays authoritative for the session.

    Ids are not validated against the catalog. Consumers resolve them with
    ``Catalog.resolve_ids`` which skips stale entries.
    """

    __slots__ = ("_favorites", "_recent", "_storage")

    def __init__(
        self,
        storage: KeyValueStorage,
        favorites: list[str] | None = None,
        recent: list[str] | None = None,
    ) -> None:
        self._storage = storage
        # dict keys: O(1) membership with insertion order for display
        self._favorites: dict[str, None] = dict.fromkeys(favorites or [])
        self._recent: list[str] = list(dict.fromkeys(recent or []))[:MAX_RECENT]

    @classmethod
    def load(cls, storage: KeyValueStorage) -> PersonalizationStore:
        """Load both slots from storage, defaulting each to empty on any failure."""
        favorites = parse_id_list(storage.get(FAVORITES_KEY), slot=FAVORITES_KEY)
        recent = parse_id_list(storage.get(RECENT_KEY), limit=MAX_RECENT, slot=RECENT_KEY)
        logger.debug("Loaded %d favorites and %d recents", len(favorites), len(recent))
        return cls(storage, favorites=favorites, recent=recent)

    @property
    def favorites(self) -> tuple[str, ...]:
        return tuple(self._favorites)

    @property
    def recent(self) -> tuple[str, ...]:
        """Recently opened ids, most recent first."""
        return tuple(self._recent)

    def is_favorite(self, calculator_id: str) -> bool:
        return calculator_id in self._favorites

    def toggle_favorite(self, calculator_id: str) -> bool:
        """Flip favorite membership and persist. Returns the new membership."""
        if calculator_id in self._favorites:
            del self._favorites[calculator_id]
            now_favorite = False
        else:
            self._favorites[calculator_id] = None
            now_favorite = True
        self._persist_favorites()
        return now_favorite

    def add_to_recent(self, calculator_id: str) -> None:
        """Move or insert an id at the front of the recency list and persist."""
        self._recent = [calculator_id] + [cid for cid in self._recent if cid != calculator_id]
        del self._recent[MAX_RECENT:]
        self._persist_recent()

    def clear_recent(self) -> None:
        self._recent = []
        self._persist_recent()

    def _persist_favorites(self) -> None:
        if not self._storage.set(FAVORITES_KEY, dump_id_list(self.favorites)):
            logger.warning("Favorites kept in memory only; storage write failed")

    def _persist_recent(self) -> None:
        if not self._storage.set(RECENT_KEY, dump_id_list(self._recent)):
            logger.warning("Recent list kept in memory only; storage write failed")


__all__ = ["PersonalizationStore"]
