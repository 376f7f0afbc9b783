"""
ItemSelector -- catalog search, low-stock view and movement history reads.

Backs the movement form's item picker (substring search on code or
description, capped result list), the header's below-minimum badge, the
item history panel and the dashboard's recent-movements list.
"""

from stock_kernel.domain.models import HistoryEntry, StockItem
from stock_kernel.selectors.base import BaseSelector
from stock_kernel.store import EntityStore

DEFAULT_SEARCH_LIMIT = 5


class ItemSelector(BaseSelector):

    def __init__(self, store: EntityStore, search_limit: int = DEFAULT_SEARCH_LIMIT):
        super().__init__(store)
        self._search_limit = search_limit

    def search(self, query: str, limit: int | None = None) -> tuple[StockItem, ...]:
        """Items whose code or description contains ``query`` (any case), catalog order."""
        if not query:
            return ()
        cap = self._search_limit if limit is None else limit
        matches = [i for i in self._snapshot().stock_items if i.matches(query)]
        return tuple(matches[:cap])

    def below_minimum(self) -> tuple[StockItem, ...]:
        return tuple(i for i in self._snapshot().stock_items if i.is_below_minimum)

    def below_minimum_count(self) -> int:
        return len(self.below_minimum())

    def history(self, item_id: str) -> tuple[HistoryEntry, ...]:
        return self.store.history_for(item_id)

    def default_supplier(self, item_id: str) -> str:
        """First supplier listed on the item, pre-selected on the entry form."""
        item = self.store.find_stock_item(item_id)
        return item.default_supplier if item is not None else ""

    def recent_movements(self, limit: int = 10) -> tuple[tuple[StockItem, HistoryEntry], ...]:
        """(item, entry) pairs across all items, newest first."""
        snapshot = self._snapshot()
        pairs = [
            (item, entry)
            for item in snapshot.stock_items
            for entry in snapshot.history.get(item.id, ())
        ]
        # Stable sort keeps per-item newest-first order on equal dates.
        pairs.sort(key=lambda pair: pair[1].date, reverse=True)
        return tuple(pairs[:limit])
