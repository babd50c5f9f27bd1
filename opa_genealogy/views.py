"""Read-only views on people, their names and their events."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .database import DatabaseError, IntegerPrimaryKey
from .names import construct_display_name
from .vocabulary import EventType

__all__ = [
    "PrimaryName",
    "PersonDetails",
    "PersonEventRow",
    "sexes",
    "primary_names",
    "person_details",
    "names_for_person",
    "events_for_person",
    "events_by_role",
    "birth_event_for_person",
]

_SEXES_QUERY = "SELECT DISTINCT sex FROM people"

_PRIMARY_NAMES_QUERY = """
SELECT people.id, names.titles, names.given_names, names.prefix, names.surname, people.root
FROM people
       LEFT JOIN names ON people.id = names.person_id
WHERE names.sort = (SELECT MIN(n2.sort) FROM names AS n2 WHERE n2.person_id = people.id) OR names.sort IS NULL
"""

_PERSON_DETAILS_QUERY = """
SELECT people.id, names.titles, names.given_names, names.prefix, names.surname, people.root, people.sex
FROM people
       LEFT JOIN names ON people.id = names.person_id
WHERE (names.sort = (SELECT MIN(n2.sort) FROM names AS n2 WHERE n2.person_id = people.id) OR names.sort IS NULL)
  AND people.id = :id
"""

_PERSON_NAMES_QUERY = """
SELECT names.id, names.sort, names.titles, names.given_names, names.prefix, names.surname,
       name_origins.origin
FROM names
       LEFT JOIN name_origins ON names.origin_id = name_origins.id
WHERE names.person_id = :id
ORDER BY names.sort ASC
"""

_PERSON_EVENTS_QUERY = """
SELECT er.role, et.type, events.date, events.name, events.id, er.id
FROM events
       LEFT JOIN event_types AS et ON events.type_id = et.id
       LEFT JOIN event_relations AS erel ON events.id = erel.event_id
       LEFT JOIN event_roles AS er ON er.id = erel.role_id
WHERE erel.person_id = :id
ORDER BY events.date ASC
"""

_NAME_COLUMNS = ("id", "sort", "titles", "given_names", "prefix", "surname", "origin")


@dataclass(frozen=True)
class PrimaryName:
    """A person with the parts of their first-sorted name."""

    id: IntegerPrimaryKey
    titles: Optional[str]
    given_names: Optional[str]
    prefix: Optional[str]
    surname: Optional[str]
    root: Any

    @property
    def display_name(self) -> str:
        return construct_display_name(self.titles, self.given_names, self.prefix, self.surname)


@dataclass(frozen=True)
class PersonDetails:
    """The details shown for a single person."""

    id: IntegerPrimaryKey
    titles: Optional[str]
    given_names: Optional[str]
    prefix: Optional[str]
    surname: Optional[str]
    root: Any
    sex: Optional[str]

    @property
    def display_name(self) -> str:
        return construct_display_name(self.titles, self.given_names, self.prefix, self.surname)


@dataclass(frozen=True)
class PersonEventRow:
    """An event a person takes part in, with the role they have in it."""

    role: Optional[str]
    type: Optional[str]
    date: Optional[str]
    name: Optional[str]
    id: IntegerPrimaryKey
    role_id: Optional[IntegerPrimaryKey]


def _fetch(connection: sqlite3.Connection, query: str, parameters: Optional[dict] = None) -> List[tuple]:
    try:
        return connection.execute(query, parameters or {}).fetchall()
    except sqlite3.Error as error:
        raise DatabaseError(f"Could not run query: {error}") from error


def sexes(connection: sqlite3.Connection) -> List[Optional[str]]:
    """The distinct sexes stored for people."""
    return [row[0] for row in _fetch(connection, _SEXES_QUERY)]


def primary_names(connection: sqlite3.Connection) -> List[PrimaryName]:
    """Every person with their primary name; people without names are included."""
    return [PrimaryName(*row) for row in _fetch(connection, _PRIMARY_NAMES_QUERY)]


def person_details(connection: sqlite3.Connection, person_id: IntegerPrimaryKey) -> Optional[PersonDetails]:
    """The details of one person, or None if there is no such person."""
    rows = _fetch(connection, _PERSON_DETAILS_QUERY, {"id": person_id})
    return PersonDetails(*rows[0]) if rows else None


def names_for_person(connection: sqlite3.Connection, person_id: IntegerPrimaryKey) -> List[Dict[str, Any]]:
    """All names of a person in sort order.

    Each name is a dict with the keys id, sort, titles, given_names, prefix,
    surname and origin.
    """
    rows = _fetch(connection, _PERSON_NAMES_QUERY, {"id": person_id})
    return [dict(zip(_NAME_COLUMNS, row)) for row in rows]


def events_for_person(connection: sqlite3.Connection, person_id: IntegerPrimaryKey) -> List[PersonEventRow]:
    """All events a person takes part in, in any role, ordered by date."""
    return [PersonEventRow(*row) for row in _fetch(connection, _PERSON_EVENTS_QUERY, {"id": person_id})]


def events_by_role(
    connection: sqlite3.Connection, person_id: IntegerPrimaryKey
) -> Dict[Optional[str], List[PersonEventRow]]:
    """The events of a person grouped under their role, roles in order of first appearance."""
    groups: Dict[Optional[str], List[PersonEventRow]] = {}
    for event in events_for_person(connection, person_id):
        groups.setdefault(event.role, []).append(event)
    return groups


def birth_event_for_person(
    connection: sqlite3.Connection, person_id: IntegerPrimaryKey
) -> List[PersonEventRow]:
    """The birth events a person takes part in."""
    birth = EventType.BIRTH.value
    return [event for event in events_for_person(connection, person_id) if event.type == birth]