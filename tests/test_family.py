import pytest

from opa_genealogy.database import MEMORY, close_database, open_database
from opa_genealogy.family import (
    OTHER_CHILDREN_LABEL,
    FamilyRow,
    ancestors,
    build_family_tree,
    family_tree,
    parents,
    query_family_rows,
)
from opa_genealogy.vocabulary import EventRole, EventType

SCHEMA = """
CREATE TABLE people (id INTEGER PRIMARY KEY AUTOINCREMENT, root BOOLEAN NOT NULL DEFAULT FALSE, sex TEXT);
CREATE TABLE name_origins (id INTEGER PRIMARY KEY AUTOINCREMENT, origin TEXT NOT NULL UNIQUE,
  builtin BOOLEAN NOT NULL DEFAULT FALSE);
CREATE TABLE names (id INTEGER PRIMARY KEY AUTOINCREMENT, person_id INTEGER NOT NULL REFERENCES people(id),
  sort INTEGER NOT NULL, titles TEXT, given_names TEXT, prefix TEXT, surname TEXT, note TEXT,
  origin_id INTEGER REFERENCES name_origins(id));
CREATE TABLE event_types (id INTEGER PRIMARY KEY AUTOINCREMENT, type TEXT NOT NULL UNIQUE,
  builtin BOOLEAN NOT NULL DEFAULT FALSE);
CREATE TABLE event_roles (id INTEGER PRIMARY KEY AUTOINCREMENT, role TEXT NOT NULL UNIQUE,
  builtin BOOLEAN NOT NULL DEFAULT FALSE);
CREATE TABLE events (id INTEGER PRIMARY KEY AUTOINCREMENT, type_id INTEGER NOT NULL REFERENCES event_types(id),
  date TEXT, name TEXT, note TEXT);
CREATE TABLE event_relations (event_id INTEGER NOT NULL REFERENCES events(id),
  person_id INTEGER NOT NULL REFERENCES people(id), role_id INTEGER NOT NULL REFERENCES event_roles(id),
  PRIMARY KEY (event_id, person_id, role_id));
"""

INIT = (
    "INSERT INTO event_types (type, builtin) VALUES "
    + ", ".join(f"('{event_type.value}', TRUE)" for event_type in EventType)
    + ";\nINSERT INTO event_roles (role, builtin) VALUES "
    + ", ".join(f"('{role.value}', TRUE)" for role in EventRole)
    + ";"
)


@pytest.fixture
def connection():
    conn = open_database(MEMORY, SCHEMA, INIT)
    yield conn
    close_database(conn)


def insert_query(conn, query, parameters=()):
    return conn.execute(query, parameters).lastrowid


def select_query(conn, query, parameters=()):
    row = conn.execute(query, parameters).fetchone()
    assert row is not None
    return row[0]


def type_id(conn, name):
    return select_query(conn, "SELECT id FROM event_types WHERE type = ?", (name,))


def role_id(conn, name):
    return select_query(conn, "SELECT id FROM event_roles WHERE role = ?", (name,))


def add_person(conn, first_name, last_name, sex):
    person_id = insert_query(conn, "INSERT INTO people (root, sex) VALUES (TRUE, ?)", (sex,))
    conn.execute(
        "INSERT INTO names (person_id, sort, given_names, surname) VALUES (?, 1, ?, ?)",
        (person_id, first_name, last_name),
    )
    return person_id


def link(conn, event_id, person_id, role):
    conn.execute(
        "INSERT INTO event_relations (event_id, person_id, role_id) VALUES (?, ?, ?)",
        (event_id, person_id, role_id(conn, role)),
    )


def add_event(conn, event_type):
    return insert_query(conn, "INSERT INTO events (type_id) VALUES (?)", (type_id(conn, event_type),))


def add_parent_and_child(conn):
    father_id = add_person(conn, "Bob", "Bober", "Male")
    mother_id = add_person(conn, "Alice", "English", "Female")

    marriage_event = add_event(conn, "Marriage")
    link(conn, marriage_event, father_id, "Primary")
    link(conn, marriage_event, mother_id, "Partner")

    child_id = add_person(conn, "Child", "Bober", "Female")
    birth_event = add_event(conn, "Birth")
    link(conn, birth_event, child_id, "Primary")
    link(conn, birth_event, father_id, "Father")
    link(conn, birth_event, mother_id, "Mother")


def add_bastard_child(conn):
    bastard_child_id = add_person(conn, "Bastard", "Bober", "Female")
    birth_event = add_event(conn, "Birth")
    link(conn, birth_event, 1, "Father")
    link(conn, birth_event, bastard_child_id, "Primary")


@pytest.fixture
def family_connection(connection):
    add_parent_and_child(connection)
    return connection


def test_default_case_basics(family_connection):
    tree = family_tree(family_connection, 1)
    assert tree.row_count() == 1
    assert tree.groups[0].person_id == 2
    assert len(tree.groups[0].children) == 1
    assert tree.has_bastard_children() is False


def test_default_case_child_and_relationship(family_connection):
    tree = family_tree(family_connection, 1)
    group = tree.groups[0]
    assert group.label == "Marriage"
    assert group.relationship.display_name == "Alice English"
    assert group.children[0].person_id == 3
    assert group.children[0].display_name == "Child Bober"
    assert group.children[0].partner_id == 2


def test_default_case_rows(family_connection):
    rows = query_family_rows(family_connection, 1)
    assert [row.event_type for row in rows] == ["Birth", "Marriage"]
    assert [row.person_id for row in rows] == [3, 2]


def test_bastard_case_basics(family_connection):
    add_bastard_child(family_connection)
    tree = family_tree(family_connection, 1)
    assert tree.row_count() == 2
    assert tree.groups[0].person_id == 2
    assert tree.groups[1].label == OTHER_CHILDREN_LABEL
    assert tree.groups[1].is_other_children is True
    assert len(tree.groups[0].children) == 1
    assert len(tree.groups[1].children) == 1
    assert tree.groups[1].children[0].person_id == 4
    assert tree.has_bastard_children() is True


def test_mother_sees_same_family(family_connection):
    tree = family_tree(family_connection, 2)
    assert tree.row_count() == 1
    assert tree.groups[0].person_id == 1
    assert [child.person_id for child in tree.groups[0].children] == [3]


def test_person_without_children_has_empty_tree(family_connection):
    tree = family_tree(family_connection, 3)
    assert tree.row_count() == 0
    assert list(tree) == []


def _row(event_type, person_id, partner_id=None, event_id=1):
    return FamilyRow(event_type, None, person_id, partner_id, event_id, None, None, "Given", None, "Surname")


def test_build_family_tree_orders_groups_by_relationship_row():
    rows = [
        _row("Birth", 10, partner_id=21),
        _row("Birth", 11, partner_id=20),
        _row("Birth", 12),
        _row("Marriage", 20),
        _row("Marriage", 21),
        _row("Marriage", 22),
    ]
    tree = build_family_tree(rows)
    assert [group.person_id for group in tree] == [20, 21, None]
    assert [[child.person_id for child in group.children] for group in tree] == [[11], [10], [12]]


def test_build_family_tree_rejects_partner_without_relationship():
    with pytest.raises(ValueError):
        build_family_tree([_row("Birth", 10, partner_id=99)])


def test_build_family_tree_of_nothing():
    assert build_family_tree([]).row_count() == 0


@pytest.fixture
def seeded_connection(connection):
    for number in range(1, 10):
        add_person(connection, f"P{number}", "Test", "Male" if number % 2 else "Female")
    parentage = {1: (3, 4), 2: (3, 4), 3: (5, 6), 4: (7, 8), 5: (None, None),
                 6: (9, None), 7: (9, None), 8: (None, None), 9: (None, None)}
    for child, (father, mother) in parentage.items():
        birth = add_event(connection, "Birth")
        link(connection, birth, child, "Primary")
        if father is not None:
            link(connection, birth, father, "Father")
        if mother is not None:
            link(connection, birth, mother, "Mother")
    assert select_query(connection, "SELECT COUNT(*) FROM people") == 9
    return connection


EXPECTED_ANCESTORS_OF_CHILD = [
    (3, 5, 6), (4, 7, 8), (5, None, None), (6, 9, None), (7, 9, None), (8, None, None), (9, None, None),
]


def _triples(rows):
    return [(row.child_id, row.father_id, row.mother_id) for row in rows]


def test_root_person_gets_all_ancestors(seeded_connection):
    rows = ancestors(seeded_connection, 1)
    assert len(rows) == 8
    assert _triples(rows) == [(1, 3, 4)] + EXPECTED_ANCESTORS_OF_CHILD


def test_sibling_gets_all_ancestors(seeded_connection):
    rows = ancestors(seeded_connection, 2)
    assert len(rows) == 8
    assert _triples(rows) == [(2, 3, 4)] + EXPECTED_ANCESTORS_OF_CHILD


def test_parent_gets_less_ancestors(seeded_connection):
    rows = ancestors(seeded_connection, 3)
    assert _triples(rows) == [(3, 5, 6), (5, None, None), (6, 9, None), (9, None, None)]


def test_grand_parent_gets_no_ancestors(seeded_connection):
    rows = ancestors(seeded_connection, 5)
    assert _triples(rows) == [(5, None, None)]


def test_ancestor_levels_and_names(seeded_connection):
    rows = ancestors(seeded_connection, 1)
    assert [row.level for row in rows] == [1, 2, 2, 3, 3, 3, 3, 4]
    assert rows[0].visited == "1"
    assert rows[1].visited == "1,3"
    assert rows[0].display_name == "P1 Test"


def test_person_without_events_is_own_only_ancestor(connection):
    rows = ancestors(connection, 42)
    assert _triples(rows) == [(42, None, None)]


def test_root_has_parents(seeded_connection):
    rows = parents(seeded_connection, 1)
    assert [(row.person_id, row.role) for row in rows] == [(3, "Father"), (4, "Mother")]


def test_sibling_has_same_parents(seeded_connection):
    rows = parents(seeded_connection, 2)
    assert [(row.person_id, row.role) for row in rows] == [(3, "Father"), (4, "Mother")]


def test_parent_has_parents(seeded_connection):
    rows = parents(seeded_connection, 3)
    assert [(row.person_id, row.role) for row in rows] == [(5, "Father"), (6, "Mother")]


def test_grand_parents_have_parents(seeded_connection):
    rows = parents(seeded_connection, 6)
    assert [(row.person_id, row.role) for row in rows] == [(9, "Father")]
    assert rows[0].display_name == "P9 Test"


def test_person_without_parents(seeded_connection):
    assert parents(seeded_connection, 9) == []