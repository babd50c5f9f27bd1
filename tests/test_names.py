import pytest

from opa_genealogy.names import NameColumns, construct_display_name, display_name_for_row


def test_all_parts_are_joined_in_order():
    assert construct_display_name("Dr.", "Jan Pieter", "van", "Dijk") == "Dr. Jan Pieter van Dijk"


def test_empty_parts_are_skipped():
    assert construct_display_name("", "Alice", "", "English") == "Alice English"
    assert construct_display_name(None, "Bob", None, None) == "Bob"


def test_no_parts_gives_empty_name():
    assert construct_display_name("", "", "", "") == ""
    assert construct_display_name(None, None, None, None) == ""


@pytest.mark.parametrize(
    "parts",
    [
        ("a", "b", "c", "d"),
        ("", "b", "", "d"),
        ("a", "", "", ""),
    ],
)
def test_name_has_no_stray_spaces(parts):
    result = construct_display_name(*parts)
    assert result == result.strip()
    assert "  " not in result
    assert result.split(" ") == [part for part in parts if part] or result == ""


def test_display_name_for_row_uses_columns():
    row = (7, "Bob", "ter", "Bober", "Sir")
    columns = NameColumns(titles=4, given_names=1, prefix=2, surname=3)
    assert display_name_for_row(row, columns) == "Sir Bob ter Bober"


def test_display_name_for_row_handles_nulls_and_numbers():
    row = [None, "Alice", None, 12]
    columns = NameColumns(titles=0, given_names=1, prefix=2, surname=3)
    assert display_name_for_row(row, columns) == "Alice 12"


def test_negative_column_is_rejected():
    with pytest.raises(ValueError):
        NameColumns(titles=-1, given_names=1, prefix=2, surname=3)


def test_column_outside_row_is_rejected():
    columns = NameColumns(titles=0, given_names=1, prefix=2, surname=9)
    with pytest.raises(IndexError):
        display_name_for_row(("Dr.", "Alice", "van"), columns)