"""Genealogy data layer on SQLite: people, names, events, families and ancestors."""

__version__ = "0.1.0"
__all__ = ["database", "vocabulary", "names", "events", "family", "data_manager", "views"]