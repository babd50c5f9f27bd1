"""Composing display names from their parts."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional, Sequence

__all__ = ["NameColumns", "construct_display_name", "display_name_for_row"]


def construct_display_name(
    titles: Optional[str],
    given_names: Optional[str],
    prefix: Optional[str],
    surname: Optional[str],
) -> str:
    """Join the non-empty name parts with single spaces."""
    parts = (titles, given_names, prefix, surname)
    return " ".join(part for part in parts if part)


@dataclass(frozen=True)
class NameColumns:
    """Positions of the name parts within a row."""

    titles: int
    given_names: int
    prefix: int
    surname: int

    def __post_init__(self) -> None:
        for field in fields(self):
            if getattr(self, field.name) < 0:
                raise ValueError(f"column {field.name} must not be negative")


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def display_name_for_row(row: Sequence[Any], columns: NameColumns) -> str:
    """Return the display name composed from the name columns of ``row``.

    Raises IndexError if a column lies outside the row.
    """
    for field in fields(columns):
        position = getattr(columns, field.name)
        if position >= len(row):
            raise IndexError(f"column {field.name} ({position}) is outside a row of {len(row)} values")
    return construct_display_name(
        _as_text(row[columns.titles]),
        _as_text(row[columns.given_names]),
        _as_text(row[columns.prefix]),
        _as_text(row[columns.surname]),
    )