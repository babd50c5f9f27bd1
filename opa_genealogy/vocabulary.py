"""Built-in vocabularies: event roles, event types, name origins and sexes.

Each member's value is the string stored in the database; ``label`` is the
human-readable text.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Type, TypeVar, Union

__all__ = [
    "EventRole",
    "EventType",
    "NameOrigin",
    "Sex",
    "is_valid_enum",
    "enum_from_string",
    "to_display_string",
    "parent_roles",
    "relationship_starting_events",
    "birth_events_in_order",
    "death_events_in_order",
    "sex_to_icon",
]


class _DatabaseEnum(Enum):
    """An enum whose value is its database string, with a display label."""

    def __new__(cls, database_value: str, label: str):
        member = object.__new__(cls)
        member._value_ = database_value
        member.label = label
        return member


class EventRole(_DatabaseEnum):
    """The role a person plays in an event."""

    PRIMARY = ("Primary", "Primary")
    PARTNER = ("Partner", "Partner")
    WITNESS = ("Witness", "Witness")
    MOTHER = ("Mother", "Mother")
    FATHER = ("Father", "Father")
    ADOPTIVE_PARENT = ("AdoptiveParent", "Adoptive parent")
    STEPPARENT = ("Stepparent", "Stepparent")
    FOSTER_PARENT = ("FosterParent", "Foster parent")
    SURROGATE_MOTHER = ("SurrogateMother", "Surrogate mother")
    GENETIC_DONOR = ("GeneticDonor", "Genetic donor")
    RECOGNIZED_PARENT = ("RecognizedParent", "Recognized parent")


class EventType(_DatabaseEnum):
    """The kind of an event."""

    BIRTH = ("Birth", "Birth")
    DEATH = ("Death", "Death")
    MARRIAGE = ("Marriage", "Marriage")
    DIVORCE = ("Divorce", "Divorce")
    BAPTISM = ("Baptism", "Baptism")
    FUNERAL = ("Funeral", "Funeral")


class NameOrigin(_DatabaseEnum):
    """Where a name comes from."""

    UNKNOWN = ("Unknown", "Unknown")
    INHERITED = ("Inherited", "Inherited")
    PATRILINEAL = ("Patrilineal", "Patrilineal")
    MATRILINEAL = ("Matrilineal", "Matrilineal")
    TAKEN = ("Taken", "Taken")
    PATRONYMIC = ("Patronymic", "Patronymic")
    MATRONYMIC = ("Matronymic", "Matronymic")
    LOCATION = ("Location", "Location")
    OCCUPATION = ("Occupation", "Occupation")


class Sex(_DatabaseEnum):
    """The sex of a person."""

    MALE = ("Male", "Male")
    FEMALE = ("Female", "Female")
    UNKNOWN = ("Unknown", "Unknown")


E = TypeVar("E", bound=_DatabaseEnum)


def is_valid_enum(enum_type: Type[E], value: Optional[str]) -> bool:
    """Return True if ``value`` is the database string of a member of ``enum_type``."""
    return any(member.value == value for member in enum_type)


def enum_from_string(enum_type: Type[E], value: str) -> E:
    """Return the member of ``enum_type`` stored as ``value``.

    Raises ValueError if there is no such member.
    """
    for member in enum_type:
        if member.value == value:
            return member
    raise ValueError(f"{value!r} is not a valid {enum_type.__name__}")


def to_display_string(enum_type: Type[E], value: Optional[str]) -> str:
    """Return the display label for a database value.

    Values that are not part of the vocabulary (user-defined ones) are
    returned unchanged.
    """
    if is_valid_enum(enum_type, value):
        return enum_from_string(enum_type, value).label
    return "" if value is None else str(value)


def parent_roles() -> List[EventRole]:
    """Roles that make someone a parent of the primary person of a birth."""
    return [
        EventRole.MOTHER,
        EventRole.FATHER,
        EventRole.ADOPTIVE_PARENT,
        EventRole.STEPPARENT,
        EventRole.FOSTER_PARENT,
        EventRole.SURROGATE_MOTHER,
        EventRole.GENETIC_DONOR,
        EventRole.RECOGNIZED_PARENT,
    ]


def relationship_starting_events() -> List[EventType]:
    """Event types that start a relationship which can lead to a family."""
    return [EventType.MARRIAGE]


def birth_events_in_order() -> List[EventType]:
    """Birth-like event types, in the order they should be considered."""
    return [EventType.BIRTH, EventType.BAPTISM]


def death_events_in_order() -> List[EventType]:
    """Death-like event types, in the order they should be considered."""
    return [EventType.DEATH, EventType.FUNERAL]


def sex_to_icon(sex: Union[Sex, str, None]) -> str:
    """Return a symbol for a sex; values outside the vocabulary get '⚥'."""
    if isinstance(sex, Sex):
        member = sex
    elif is_valid_enum(Sex, sex):
        member = enum_from_string(Sex, sex)
    else:
        return "⚥"

    if member is Sex.MALE:
        return "♂"
    if member is Sex.FEMALE:
        return "♀"
    return "?"