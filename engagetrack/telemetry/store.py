"""Row store protocol and an in-memory implementation."""

import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Protocol


Row = Dict[str, Any]
ChangeCallback = Callable[[str, Row], None]


class Store(Protocol):
    """Protocol for the persistence collaborator."""

    def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return the stored copy."""
        ...

    def select(self, table: str, **filters: Any) -> List[Row]:
        """Rows whose columns equal every filter, in insertion order."""
        ...

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Call back on every insert into a table. Returns an unsubscribe."""
        ...


class InMemoryStore:
    """Thread-safe dictionary-backed store with insert notifications."""

    def __init__(self):
        self._tables: Dict[str, List[Row]] = defaultdict(list)
        self._listeners: Dict[str, List[ChangeCallback]] = defaultdict(list)
        self._lock = threading.Lock()

    def insert(self, table: str, row: Row) -> Row:
        stored = dict(row)
        with self._lock:
            self._tables[table].append(stored)
            listeners = list(self._listeners[table])
        for callback in listeners:
            callback(table, dict(stored))
        return dict(stored)

    def select(self, table: str, **filters: Any) -> List[Row]:
        with self._lock:
            rows = list(self._tables.get(table, []))
        return [
            dict(row) for row in rows
            if all(row.get(key) == value for key, value in filters.items())
        ]

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        with self._lock:
            self._listeners[table].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners[table]:
                    self._listeners[table].remove(callback)

        return unsubscribe

    def __len__(self) -> int:
        with self._lock:
            return sum(len(rows) for rows in self._tables.values())
