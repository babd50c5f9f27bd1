"""Events: looking up built-in types and roles, adding events, birth and death events."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .database import (
    EVENT_RELATIONS_TABLE,
    EVENT_ROLES_TABLE,
    EVENT_TYPES_TABLE,
    EVENTS_TABLE,
    DatabaseError,
    IntegerPrimaryKey,
)
from .vocabulary import (
    EventRole,
    EventType,
    birth_events_in_order,
    death_events_in_order,
)

__all__ = [
    "NewEventInformation",
    "PersonEvent",
    "event_type_id",
    "event_role_id",
    "default_role_id",
    "add_event_to_person",
    "birth_events",
    "death_events",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewEventInformation:
    """Identifiers of a freshly added event and how it links to its person."""

    event_id: IntegerPrimaryKey
    role_id: IntegerPrimaryKey
    type_id: IntegerPrimaryKey


@dataclass(frozen=True)
class PersonEvent:
    """One event in which a person takes the primary role."""

    id: IntegerPrimaryKey
    type_id: IntegerPrimaryKey
    type: str
    date: Optional[str]
    name: Optional[str]
    note: Optional[str]


def _lookup_id(connection: sqlite3.Connection, table: str, column: str, value: str) -> IntegerPrimaryKey:
    row = connection.execute(f"SELECT id FROM {table} WHERE {column} = ?", (value,)).fetchone()
    if row is None:
        raise LookupError(f"no row in {table} with {column} {value!r}")
    return int(row[0])


def event_type_id(connection: sqlite3.Connection, event_type: EventType) -> IntegerPrimaryKey:
    """Return the id of the built-in event type in the database.

    Raises LookupError if the type is not in the database.
    """
    return _lookup_id(connection, EVENT_TYPES_TABLE, "type", event_type.value)


def event_role_id(connection: sqlite3.Connection, role: EventRole) -> IntegerPrimaryKey:
    """Return the id of the built-in event role in the database.

    Raises LookupError if the role is not in the database.
    """
    return _lookup_id(connection, EVENT_ROLES_TABLE, "role", role.value)


def default_role_id(connection: sqlite3.Connection) -> IntegerPrimaryKey:
    """Return the id of the role a person gets in events added to them."""
    return event_role_id(connection, EventRole.PRIMARY)


def add_event_to_person(
    connection: sqlite3.Connection, event_type: EventType, person: IntegerPrimaryKey
) -> NewEventInformation:
    """Add a new event of ``event_type`` with ``person`` linked as primary.

    Both rows are written in one transaction; on failure it is rolled back
    and DatabaseError is raised.
    """
    type_id = event_type_id(connection, event_type)
    role_id = default_role_id(connection)

    try:
        connection.execute("BEGIN")
    except sqlite3.Error as error:
        raise DatabaseError(f"Could not get transaction on database: {error}") from error

    try:
        cursor = connection.execute(f"INSERT INTO {EVENTS_TABLE} (type_id) VALUES (?)", (type_id,))
        event_id = cursor.lastrowid
        if event_id is None:
            raise DatabaseError("Could not get last inserted ID.")
        connection.execute(
            f"INSERT INTO {EVENT_RELATIONS_TABLE} (event_id, person_id, role_id) VALUES (?, ?, ?)",
            (event_id, person, role_id),
        )
        connection.execute("COMMIT")
    except (sqlite3.Error, DatabaseError) as error:
        _log.warning("Could not add event to person %s: %s", person, error)
        try:
            connection.execute("ROLLBACK")
        except sqlite3.Error as rollback_error:
            raise DatabaseError(
                f"Could not add event ({error}); additionally, could not revert transaction: {rollback_error}"
            ) from error
        if isinstance(error, DatabaseError):
            raise
        raise DatabaseError(f"Could not add event to person {person}: {error}") from error

    return NewEventInformation(event_id=int(event_id), role_id=role_id, type_id=type_id)


def _primary_events(
    connection: sqlite3.Connection,
    person: IntegerPrimaryKey,
    types: Sequence[EventType],
    require_date: bool,
) -> List[PersonEvent]:
    type_values = [event_type.value for event_type in types]
    placeholders = ", ".join("?" for _ in type_values)
    ordering = ", ".join("event_types.type = ? DESC" for _ in type_values)
    date_filter = "AND LENGTH(events.date) != 0" if require_date else ""
    query = f"""
SELECT events.id, events.type_id, event_types.type, events.date, events.name, events.note
FROM events
       LEFT JOIN event_types ON event_types.id = events.type_id
       LEFT JOIN event_relations ON events.id = event_relations.event_id
       LEFT JOIN event_roles ON event_roles.id = event_relations.role_id
WHERE event_roles.role = ?
  AND event_types.type IN ({placeholders})
  AND event_relations.person_id = ?
  {date_filter}
ORDER BY {ordering}
"""
    parameters: List[Any] = [EventRole.PRIMARY.value, *type_values, person, *type_values]
    try:
        rows = connection.execute(query, parameters).fetchall()
    except sqlite3.Error as error:
        raise DatabaseError(f"Could not query events of person {person}: {error}") from error
    return [PersonEvent(*row) for row in rows]


def birth_events(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> List[PersonEvent]:
    """Birth-like events of ``person`` that have a date, most relevant type first."""
    return _primary_events(connection, person, birth_events_in_order(), require_date=True)


def death_events(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> List[PersonEvent]:
    """Death-like events of ``person``, most relevant type first."""
    return _primary_events(connection, person, death_events_in_order(), require_date=False)