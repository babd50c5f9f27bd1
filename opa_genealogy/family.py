"""Family trees, ancestors and parents of a person."""

from __future__ import annotations

import sqlite3
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .database import DatabaseError, IntegerPrimaryKey
from .names import construct_display_name
from .vocabulary import EventType, relationship_starting_events

__all__ = [
    "OTHER_CHILDREN_LABEL",
    "FamilyRow",
    "FamilyGroup",
    "FamilyTree",
    "AncestorRow",
    "ParentRow",
    "query_family_rows",
    "build_family_tree",
    "family_tree",
    "ancestors",
    "parents",
]

OTHER_CHILDREN_LABEL = "Children with no other parent"

# Births of the children of a person (paired with each other parent of the
# child) and the marriages of those other parents. For birth rows the second
# column holds the event id, as the family view has always shown it.
_FAMILY_SQL = """
WITH own_parent_events AS (
    SELECT rel.event_id
    FROM event_relations AS rel
    JOIN event_roles AS r ON r.id = rel.role_id
    WHERE rel.person_id = :person AND r.role IN ('Father', 'Mother')
),
other_parents AS (
    SELECT DISTINCT co.person_id AS partner_id, kid.person_id AS child_id
    FROM event_relations AS co
    JOIN event_roles AS co_role ON co_role.id = co.role_id
    JOIN event_relations AS kid ON kid.event_id = co.event_id
    WHERE co.event_id IN (SELECT event_id FROM own_parent_events)
      AND co_role.role IN ('Father', 'Mother')
      AND co.person_id != :person
),
first_names AS (
    SELECT n.person_id, n.titles, n.given_names, n.prefix, n.surname
    FROM names AS n
    WHERE n.sort = (SELECT MIN(m.sort) FROM names AS m WHERE m.person_id = n.person_id)
),
births(event_type, event_type_id, person_id, partner_id, event_id, event_date) AS (
    SELECT et.type, ev.id, kid.person_id, op.partner_id, ev.id, ev.date
    FROM events AS ev
    JOIN event_types AS et ON et.id = ev.type_id AND et.type = 'Birth'
    JOIN event_relations AS kid ON kid.event_id = ev.id
    JOIN event_roles AS kid_role ON kid_role.id = kid.role_id AND kid_role.role = 'Primary'
    LEFT JOIN other_parents AS op ON op.child_id = kid.person_id
    WHERE ev.id IN (SELECT event_id FROM own_parent_events)
),
marriages(event_type, event_type_id, person_id, partner_id, event_id, event_date) AS (
    SELECT et.type, ev.type_id, rel.person_id, NULL, ev.id, ev.date
    FROM events AS ev
    JOIN event_types AS et ON et.id = ev.type_id AND et.type = 'Marriage'
    JOIN event_relations AS rel ON rel.event_id = ev.id
    JOIN event_roles AS rel_role ON rel_role.id = rel.role_id
    WHERE rel.person_id IN (SELECT partner_id FROM other_parents)
)
SELECT f.event_type, f.event_type_id, f.person_id, f.partner_id, f.event_id, f.event_date,
       fn.titles, fn.given_names, fn.prefix, fn.surname
FROM (SELECT * FROM births UNION ALL SELECT * FROM marriages) AS f
JOIN first_names AS fn ON fn.person_id = f.person_id
ORDER BY f.event_type, f.event_date
"""

# Every primary participant of an event, with the fathers and mothers
# linked to that same event.
_PARENT_LINKS_SQL = """
SELECT kid.person_id, kid.event_id, rel.person_id, r.role
FROM event_relations AS kid
JOIN event_roles AS kid_role ON kid_role.id = kid.role_id AND kid_role.role = 'Primary'
LEFT JOIN event_relations AS rel
    ON rel.event_id = kid.event_id
   AND rel.role_id IN (SELECT id FROM event_roles WHERE role IN ('Father', 'Mother'))
LEFT JOIN event_roles AS r ON r.id = rel.role_id
ORDER BY kid.person_id, kid.event_id, rel.person_id
"""

_FIRST_NAMES_SQL = """
SELECT n.person_id, n.titles, n.given_names, n.prefix, n.surname
FROM names AS n
WHERE n.sort = (SELECT MIN(m.sort) FROM names AS m WHERE m.person_id = n.person_id)
ORDER BY n.person_id, n.id
"""

_PARENTS_SQL = """
SELECT rel.person_id, rel.role_id, r.role,
       n.titles, n.given_names, n.prefix, n.surname
FROM event_relations AS own
JOIN event_roles AS own_role ON own_role.id = own.role_id AND own_role.role = 'Primary'
JOIN event_relations AS rel ON rel.event_id = own.event_id
JOIN event_roles AS r ON r.id = rel.role_id AND r.role IN ('Father', 'Mother')
JOIN names AS n
    ON n.person_id = rel.person_id
   AND n.sort = (SELECT MIN(m.sort) FROM names AS m WHERE m.person_id = rel.person_id)
WHERE own.person_id = :person
ORDER BY rel.person_id
"""

_NameParts = Tuple[Optional[str], Optional[str], Optional[str], Optional[str]]
_ParentPair = Tuple[Optional[IntegerPrimaryKey], Optional[IntegerPrimaryKey]]


@dataclass(frozen=True)
class FamilyRow:
    """A birth of a child or a relationship of a partner of the person."""

    event_type: str
    event_type_id: Optional[IntegerPrimaryKey]
    person_id: IntegerPrimaryKey
    partner_id: Optional[IntegerPrimaryKey]
    event_id: IntegerPrimaryKey
    date: Optional[str]
    titles: Optional[str]
    given_names: Optional[str]
    prefix: Optional[str]
    surname: Optional[str]

    @property
    def display_name(self) -> str:
        return construct_display_name(self.titles, self.given_names, self.prefix, self.surname)


@dataclass(frozen=True)
class FamilyGroup:
    """A partner relationship with the children from it.

    Children without another known parent are gathered in a group without
    a relationship.
    """

    relationship: Optional[FamilyRow]
    children: Tuple[FamilyRow, ...]

    @property
    def is_other_children(self) -> bool:
        return self.relationship is None

    @property
    def person_id(self) -> Optional[IntegerPrimaryKey]:
        return None if self.relationship is None else self.relationship.person_id

    @property
    def label(self) -> str:
        if self.relationship is None:
            return OTHER_CHILDREN_LABEL
        return self.relationship.event_type


@dataclass(frozen=True)
class FamilyTree:
    """All partners of a person, each with their children."""

    groups: Tuple[FamilyGroup, ...]

    def row_count(self) -> int:
        return len(self.groups)

    def has_bastard_children(self) -> bool:
        return any(group.is_other_children for group in self.groups)

    def __iter__(self) -> Iterator[FamilyGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class AncestorRow:
    """One ancestor (or the person itself) with their parents."""

    child_id: IntegerPrimaryKey
    father_id: Optional[IntegerPrimaryKey]
    mother_id: Optional[IntegerPrimaryKey]
    visited: str
    level: int
    titles: Optional[str]
    given_names: Optional[str]
    prefix: Optional[str]
    surname: Optional[str]

    @property
    def display_name(self) -> str:
        return construct_display_name(self.titles, self.given_names, self.prefix, self.surname)


@dataclass(frozen=True)
class ParentRow:
    """A parent of a person and the role they have in the birth."""

    person_id: IntegerPrimaryKey
    role_id: IntegerPrimaryKey
    role: str
    titles: Optional[str]
    given_names: Optional[str]
    prefix: Optional[str]
    surname: Optional[str]

    @property
    def display_name(self) -> str:
        return construct_display_name(self.titles, self.given_names, self.prefix, self.surname)


def _fetch(connection: sqlite3.Connection, query: str, parameters: dict) -> List[tuple]:
    try:
        return connection.execute(query, parameters).fetchall()
    except sqlite3.Error as error:
        raise DatabaseError(f"Could not run query: {error}") from error


def query_family_rows(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> List[FamilyRow]:
    """Births of the children and relationships of the partners of ``person``."""
    return [FamilyRow(*row) for row in _fetch(connection, _FAMILY_SQL, {"person": person})]


def build_family_tree(rows: Sequence[FamilyRow]) -> FamilyTree:
    """Group the births in ``rows`` under the relationship with their other parent.

    Groups follow the order of their relationship rows; children without
    another parent come last. Raises ValueError if a child's other parent
    has no relationship row.
    """
    relationship_types = {event_type.value for event_type in relationship_starting_events()}
    relationship_rows: Dict[IntegerPrimaryKey, int] = {}
    for position, row in enumerate(rows):
        if row.event_type in relationship_types:
            relationship_rows[row.person_id] = position

    mapping: Dict[Optional[int], List[FamilyRow]] = {}
    for row in rows:
        if row.event_type != EventType.BIRTH.value:
            continue
        if row.partner_id is None:
            key: Optional[int] = None
        elif row.partner_id in relationship_rows:
            key = relationship_rows[row.partner_id]
        else:
            raise ValueError(
                f"child {row.person_id} has other parent {row.partner_id} without a relationship"
            )
        mapping.setdefault(key, []).append(row)

    ordered_keys = sorted(mapping, key=lambda key: (key is None, key or 0))
    groups = tuple(
        FamilyGroup(
            relationship=None if key is None else rows[key],
            children=tuple(mapping[key]),
        )
        for key in ordered_keys
    )
    return FamilyTree(groups=groups)


def family_tree(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> FamilyTree:
    """The partners and children of ``person`` as a tree of families."""
    return build_family_tree(query_family_rows(connection, person))


def _first_names(connection: sqlite3.Connection) -> Dict[IntegerPrimaryKey, _NameParts]:
    names: Dict[IntegerPrimaryKey, _NameParts] = {}
    for person_id, *parts in _fetch(connection, _FIRST_NAMES_SQL, {}):
        names.setdefault(person_id, tuple(parts))  # type: ignore[arg-type]
    return names


def _parent_links(connection: sqlite3.Connection) -> Dict[IntegerPrimaryKey, _ParentPair]:
    """Map every primary participant of an event to their father and mother.

    When a person is primary in several events, the first event that names
    a parent is used.
    """
    per_event: Dict[IntegerPrimaryKey, Dict[IntegerPrimaryKey, List[Optional[IntegerPrimaryKey]]]] = {}
    for child, event, parent, role in _fetch(connection, _PARENT_LINKS_SQL, {}):
        pair = per_event.setdefault(child, {}).setdefault(event, [None, None])
        if role == "Father" and pair[0] is None:
            pair[0] = parent
        elif role == "Mother" and pair[1] is None:
            pair[1] = parent

    links: Dict[IntegerPrimaryKey, _ParentPair] = {}
    for child, events in per_event.items():
        pairs = list(events.values())
        chosen = next((pair for pair in pairs if pair[0] is not None or pair[1] is not None), pairs[0])
        links[child] = (chosen[0], chosen[1])
    return links


def ancestors(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> List[AncestorRow]:
    """All ancestors of ``person``, the person included, by generation."""
    links = _parent_links(connection)
    names = _first_names(connection)

    found: Dict[IntegerPrimaryKey, Tuple[_ParentPair, str, int]] = {
        person: (links.get(person, (None, None)), str(person), 1)
    }
    queue = deque([person])
    while queue:
        (father, mother), path, level = found[queue.popleft()]
        for parent in (father, mother):
            if parent is None or parent in found or parent not in links:
                continue
            found[parent] = (links[parent], f"{path},{parent}", level + 1)
            queue.append(parent)

    empty: _NameParts = (None, None, None, None)
    rows = [
        AncestorRow(child, father, mother, path, level, *names.get(child, empty))
        for child, ((father, mother), path, level) in found.items()
    ]
    rows.sort(key=lambda row: (row.level, row.child_id))
    return rows


def parents(connection: sqlite3.Connection, person: IntegerPrimaryKey) -> List[ParentRow]:
    """The fathers and mothers of ``person``, ordered by their id."""
    return [ParentRow(*row) for row in _fetch(connection, _PARENTS_SQL, {"person": person})]