# opa_genealogy

A small genealogy data layer on top of SQLite. It works with people, their
names, events (births, deaths, marriages and so on) and the roles people play
in those events. From these it works out family trees, parents and ancestors.
The package uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `opa_genealogy.database`

- `open_database(file, schema, init=None, seed=None)` opens a connection in
  autocommit mode and turns on foreign keys. A new database, which includes any
  `":memory:"` database (`MEMORY`), gets the `schema` script. After that it gets
  `init` if that is given, and then `seed` if that is given too. `seed` only runs
  when `init` has run. A file that already exists is opened without running any
  script.
- `execute_script(connection, script)` splits a script on `;` and runs each
  non-empty statement. Comments are not supported. A statement that starts with
  `--`, or one that fails, raises `DatabaseError`.
- `close_database(connection)` closes the connection.
- `has_active_transaction(connection)` tells whether the connection is inside
  a transaction. It returns `False` for a closed connection.
- The module also holds the table names `PEOPLE_TABLE`, `NAMES_TABLE`,
  `NAME_ORIGINS_TABLE`, `EVENTS_TABLE`, `EVENT_ROLES_TABLE`,
  `EVENT_TYPES_TABLE` and `EVENT_RELATIONS_TABLE`.

### `opa_genealogy.vocabulary`

- The enums `EventRole`, `EventType`, `NameOrigin` and `Sex`. Each member's
  value is the text stored in the database (for example `"AdoptiveParent"`).
  Its `label` is the display text (`"Adoptive parent"`).
- `is_valid_enum(enum_type, value)` and `enum_from_string(enum_type, value)`
  convert database text to members. The second raises `ValueError` for an
  unknown value.
- `to_display_string(enum_type, value)` returns the label. Values that are not
  in the vocabulary come back unchanged, and `None` comes back as `""`.
- `parent_roles()`, `relationship_starting_events()`, `birth_events_in_order()`
  and `death_events_in_order()` return the groupings of roles and types.
- `sex_to_icon(sex)` returns `♂`, `♀` or `?` for a sex in the vocabulary, and
  `⚥` for anything else.

### `opa_genealogy.names`

- `construct_display_name(titles, given_names, prefix, surname)` joins the
  non-empty parts with single spaces.
- `display_name_for_row(row, columns)` does the same for a row, with the
  positions given by a `NameColumns`. Negative positions raise `ValueError`.
  Positions outside the row raise `IndexError`.

### `opa_genealogy.events`

- `event_type_id`, `event_role_id` and `default_role_id` look up the ids of
  built-in types and roles. The default role is `Primary`. A missing entry
  raises `LookupError`.
- `add_event_to_person(connection, event_type, person)` inserts an event and
  links the person to it as primary, in one transaction. It returns a
  `NewEventInformation` (`event_id`, `role_id`, `type_id`). On failure it rolls
  back and raises `DatabaseError`.
- `birth_events(connection, person)` lists the person's Birth and Baptism events
  that have a non-empty date. `death_events(connection, person)` lists the
  person's Death and Funeral events. Both take only events where the person is
  primary, give them as `PersonEvent` rows and put the most relevant type first.

### `opa_genealogy.family`

- `family_tree(connection, person)` returns a `FamilyTree` of `FamilyGroup`s.
  Each group holds a partner's marriage row (`relationship`) and the births of
  the children the person has with that partner (`children`). Children with no
  other known parent go into a last group that has no relationship, with the
  label `OTHER_CHILDREN_LABEL`. `FamilyTree.row_count()` gives the number of
  groups. `FamilyTree.has_bastard_children()` tells whether that last group
  exists.
- `query_family_rows` and `build_family_tree` are the two steps behind
  `family_tree`. `build_family_tree` raises `ValueError` when a child's other
  parent has no relationship row.
- `ancestors(connection, person)` returns `AncestorRow`s for the person and all
  their ancestors, ordered by generation (`level`, starting at 1) and then by
  id. Each row has the father and mother ids and the path of ids (`visited`).
- `parents(connection, person)` returns a `ParentRow` for each father and mother
  of the person, ordered by id.
- Rows have a `display_name` property built from the person's first-sorted
  name.

### `opa_genealogy.views`

These are read-only queries for display:

- `sexes`: the distinct sexes stored.
- `primary_names`: every person with the first-sorted name, as `PrimaryName`
  rows. People without a name are included.
- `person_details`: a `PersonDetails` row, or `None` when the person does not
  exist.
- `names_for_person`: all of a person's names in sort order, as dicts.
- `events_for_person`: every event a person takes part in, in any role, ordered
  by date, as `PersonEventRow`s.
- `events_by_role`: the same events, grouped by role.
- `birth_event_for_person`: only the Birth events from that list.

### `opa_genealogy.data_manager`

`DataManager` passes on table-change announcements to its subscribers.

- `subscribe(tables, updater, source=None)` registers `updater(table)` for the
  given tables. It returns a function that unsubscribes.
- `notify_changed(table, source=None)` calls every subscriber that listens to
  `table`, except the one registered with the same `source`. A change announced
  while another change is being passed on is ignored, and the call returns
  `False`.

`initialize(connection)`, `get()` and `reset()` manage one shared instance. Each
raises `RuntimeError` when used in the wrong state.

## Database layout

The queries expect these tables and columns:

- `people(id, root, sex)`
- `names(id, person_id, sort, titles, given_names, prefix, surname, origin_id)`
- `name_origins(id, origin)`
- `events(id, type_id, date, name, note)`
- `event_types(id, type)`
- `event_roles(id, role)`
- `event_relations(event_id, person_id, role_id)`

Event types and roles are looked up by their vocabulary text, for example
`'Birth'`, `'Marriage'`, `'Primary'`, `'Father'` and `'Mother'`.

## Example

```python
from opa_genealogy.database import open_database
from opa_genealogy.events import add_event_to_person
from opa_genealogy.family import ancestors
from opa_genealogy.vocabulary import EventRole, EventType

schema = """
CREATE TABLE people (id INTEGER PRIMARY KEY, root BOOLEAN, sex TEXT);
CREATE TABLE name_origins (id INTEGER PRIMARY KEY, origin TEXT);
CREATE TABLE names (id INTEGER PRIMARY KEY, person_id INTEGER REFERENCES people(id),
    sort INTEGER, titles TEXT, given_names TEXT, prefix TEXT, surname TEXT, note TEXT,
    origin_id INTEGER REFERENCES name_origins(id));
CREATE TABLE event_types (id INTEGER PRIMARY KEY, type TEXT);
CREATE TABLE event_roles (id INTEGER PRIMARY KEY, role TEXT);
CREATE TABLE events (id INTEGER PRIMARY KEY, type_id INTEGER REFERENCES event_types(id),
    date TEXT, name TEXT, note TEXT);
CREATE TABLE event_relations (event_id INTEGER REFERENCES events(id),
    person_id INTEGER REFERENCES people(id), role_id INTEGER REFERENCES event_roles(id))
"""
types = ", ".join(f"('{t.value}')" for t in EventType)
roles = ", ".join(f"('{r.value}')" for r in EventRole)
init = f"INSERT INTO event_types (type) VALUES {types}; INSERT INTO event_roles (role) VALUES {roles}"

connection = open_database(":memory:", schema=schema, init=init)
connection.execute("INSERT INTO people (root, sex) VALUES (1, 'Female')")
connection.execute("INSERT INTO names (person_id, sort, given_names, surname) VALUES (1, 1, 'Alice', 'English')")
info = add_event_to_person(connection, EventType.BIRTH, 1)
for row in ancestors(connection, 1):
    print(row.level, row.display_name)
```

## What this package does not do

- It ships no schema, built-in data or sample data scripts. You pass those to
  `open_database`, and existing databases are never migrated.
- It has no command-line program and no screens for viewing or editing data.
  Changes are written with your own SQL or with `add_event_to_person`.
- `DataManager` does not watch the database itself. Changes reach subscribers
  only when they are announced with `notify_changed`.