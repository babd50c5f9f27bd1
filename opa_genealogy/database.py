"""Opening, initialising and inspecting the SQLite database."""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional, Union

__all__ = [
    "DatabaseError",
    "IntegerPrimaryKey",
    "PEOPLE_TABLE",
    "NAMES_TABLE",
    "NAME_ORIGINS_TABLE",
    "EVENTS_TABLE",
    "EVENT_ROLES_TABLE",
    "EVENT_TYPES_TABLE",
    "EVENT_RELATIONS_TABLE",
    "MEMORY",
    "execute_script",
    "open_database",
    "close_database",
    "has_active_transaction",
]

IntegerPrimaryKey = int

PEOPLE_TABLE = "people"
NAMES_TABLE = "names"
NAME_ORIGINS_TABLE = "name_origins"
EVENTS_TABLE = "events"
EVENT_ROLES_TABLE = "event_roles"
EVENT_TYPES_TABLE = "event_types"
EVENT_RELATIONS_TABLE = "event_relations"

MEMORY = ":memory:"

_log = logging.getLogger(__name__)
_sql_log = logging.getLogger("opa.sql")


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a script fails."""


def execute_script(connection: sqlite3.Connection, script: str) -> None:
    """Run every ';'-separated statement of ``script`` on ``connection``.

    Comments are not supported; a statement starting with ``--`` raises
    :class:`DatabaseError`, as does any statement that fails.
    """
    for raw_command in script.split(";"):
        command = raw_command.replace("\n", " ").strip()
        if not command:
            continue
        if command.startswith("--"):
            raise DatabaseError("Comments are not supported in database scripts.")
        _log.debug("Executing %s", command)
        try:
            connection.execute(command)
        except sqlite3.Error as error:
            raise DatabaseError(f"Error running SQL statement {command!r}: {error}") from error


def open_database(
    file: Union[str, os.PathLike],
    schema: str,
    init: Optional[str] = None,
    seed: Optional[str] = None,
) -> sqlite3.Connection:
    """Open (and, if new, create) the database at ``file``.

    A new database gets ``schema`` run on it, then ``init`` (the built-in
    data) if given, then ``seed`` (sample data) if given and ``init`` was run.
    An existing file is opened as is. Foreign keys are always enabled.
    """
    name = os.fspath(file)
    if name == MEMORY:
        existing = False
    else:
        existing = Path(name).exists()
        _log.debug("Looking at file at %s", Path(name).resolve())

    try:
        connection = sqlite3.connect(name, isolation_level=None)
    except sqlite3.Error as error:
        raise DatabaseError(f"Error occurred opening the database {name}: {error}") from error

    connection.set_trace_callback(_sql_log.debug)

    try:
        connection.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as error:
        connection.close()
        raise DatabaseError(f"Could not enable foreign keys: {error}") from error

    if existing:
        _log.debug("Skipping initialization, as it exists already.")
        return connection

    try:
        _log.debug("Running database creation script...")
        execute_script(connection, schema)

        if init is None:
            _log.debug("Not initialising database.")
            return connection
        _log.debug("Adding built-in data")
        execute_script(connection, init)

        if seed is None:
            _log.debug("Not seeding database.")
            return connection
        _log.debug("Seeding with sample data")
        execute_script(connection, seed)
    except DatabaseError:
        connection.close()
        raise

    return connection


def close_database(connection: sqlite3.Connection) -> None:
    """Close the database connection."""
    connection.close()


def has_active_transaction(connection: sqlite3.Connection) -> bool:
    """Return True if the connection is currently inside a transaction."""
    try:
        return connection.in_transaction
    except sqlite3.ProgrammingError:
        return False