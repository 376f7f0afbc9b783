"""
Module: stock_kernel.selectors.base
Responsibility: Base class for read-only query selectors over the entity
    store.  Selectors are the "Q" side next to the services' writes.
Architecture position: Kernel > Selectors.  May import from store and
    domain.  MUST NOT import from services.

Invariants enforced:
    - Read-only access: selectors never open a store transaction.
    - Each query reads one committed snapshot, so its result is internally
      consistent even while writers run.
"""

from abc import ABC

from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.store import EntityStore


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept the store from the caller, read committed
        snapshots, and return tuples of frozen records.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def _snapshot(self) -> StoreSnapshot:
        return self.store.snapshot()
