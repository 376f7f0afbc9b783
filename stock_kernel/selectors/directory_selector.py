"""
DirectorySelector -- user and supplier list filtering.

Search is a case-insensitive substring match, the same rule the control
page's filter boxes apply.
"""

from stock_kernel.domain.models import Supplier, User
from stock_kernel.selectors.base import BaseSelector


def _contains(needle: str, *haystack: str) -> bool:
    return any(needle in value.lower() for value in haystack)


class DirectorySelector(BaseSelector):

    def search_users(self, query: str) -> tuple[User, ...]:
        users = self._snapshot().users
        if not query:
            return users
        needle = query.lower()
        return tuple(u for u in users if _contains(needle, u.name, u.email))

    def search_suppliers(self, query: str) -> tuple[Supplier, ...]:
        suppliers = self._snapshot().suppliers
        if not query:
            return suppliers
        needle = query.lower()
        return tuple(
            s for s in suppliers if _contains(needle, s.name, s.contact, s.email)
        )

    def current_administrator(self) -> User | None:
        """The user shown as logged in: first one with the Administrator profile."""
        return next((u for u in self._snapshot().users if u.is_administrator), None)
