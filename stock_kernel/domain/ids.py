"""
Id generation -- injectable identity source for new records.

Responsibility:
    Supplies ids for created users, suppliers, history entries and audit
    logs. Like ``Clock``, the generator is injected so tests can assert on
    exact ids.

Architecture position:
    Kernel > Domain.  ``UuidGenerator`` is the production source;
    ``SequentialIdGenerator`` is deterministic and thread-safe.
"""

import itertools
import threading
from abc import ABC, abstractmethod
from uuid import uuid4


class IdGenerator(ABC):
    """Abstract id source. Ids are opaque strings, unique per generator."""

    @abstractmethod
    def next_id(self) -> str:
        """Return a fresh id."""
        ...


class UuidGenerator(IdGenerator):
    """Production generator backed by random UUIDs."""

    def next_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator(IdGenerator):
    """
    Deterministic generator returning ``f"{prefix}{n}"`` for n = start, start+1, ...

    Guarantees:
        Ids are unique and strictly ordered even under concurrent callers.
    """

    def __init__(self, prefix: str = "", start: int = 1):
        self._prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{self._prefix}{n}"
