"""Central point that keeps derived data in step with changes to the database tables."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

from .database import (
    EVENT_RELATIONS_TABLE,
    EVENT_ROLES_TABLE,
    EVENT_TYPES_TABLE,
    EVENTS_TABLE,
    NAME_ORIGINS_TABLE,
    NAMES_TABLE,
    PEOPLE_TABLE,
)

__all__ = ["DataManager", "ALL_TABLES", "initialize", "reset", "get"]

_log = logging.getLogger(__name__)

ALL_TABLES: FrozenSet[str] = frozenset(
    {
        PEOPLE_TABLE,
        NAMES_TABLE,
        NAME_ORIGINS_TABLE,
        EVENTS_TABLE,
        EVENT_ROLES_TABLE,
        EVENT_TYPES_TABLE,
        EVENT_RELATIONS_TABLE,
    }
)

_IDLE = object()

Updater = Callable[[str], Any]


@dataclass(frozen=True, eq=False)
class _Subscription:
    tables: FrozenSet[str]
    updater: Updater
    source: Any


class DataManager:
    """Tells listeners when a table changed, so they can reload their data.

    A change is only propagated while no other change is being propagated,
    which prevents update loops. The listener that caused a change is not
    told about it.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection
        self._subscriptions: List[_Subscription] = []
        self._updating_source: Any = _IDLE

    @property
    def is_updating(self) -> bool:
        """True while a change is being propagated."""
        return self._updating_source is not _IDLE

    def subscribe(
        self, tables: Iterable[str], updater: Updater, source: Optional[Any] = None
    ) -> Callable[[], None]:
        """Call ``updater(table)`` whenever one of ``tables`` changes.

        ``source`` identifies the listener; changes sent by that same source
        are not passed back to it. Returns a function that unsubscribes.
        """
        subscription = _Subscription(frozenset(tables), updater, source)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def notify_changed(self, table: str, source: Optional[Any] = None) -> bool:
        """Announce that ``table`` changed because of ``source``.

        Returns True if the change was propagated, False if it was ignored
        because another change is already being propagated.
        """
        if self.is_updating:
            _log.debug("Already updating; ignoring change of %s", table)
            return False

        _log.debug("Change of table %s triggered by %r", table, source)
        self._updating_source = source
        try:
            for subscription in list(self._subscriptions):
                if table in subscription.tables and subscription.source is not source:
                    subscription.updater(table)
        finally:
            self._updating_source = _IDLE
        return True


_instance: Optional[DataManager] = None


def initialize(connection: sqlite3.Connection) -> DataManager:
    """Create the shared DataManager; raises RuntimeError if one exists."""
    global _instance
    if _instance is not None:
        raise RuntimeError("DataManager is already initialised")
    _instance = DataManager(connection)
    return _instance


def reset() -> None:
    """Drop the shared DataManager; raises RuntimeError if there is none."""
    global _instance
    if _instance is None:
        raise RuntimeError("DataManager is not initialised")
    _instance = None


def get() -> DataManager:
    """Return the shared DataManager; raises RuntimeError if there is none."""
    if _instance is None:
        raise RuntimeError("DataManager is not initialised")
    return _instance