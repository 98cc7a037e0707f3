from __future__ import annotations

import pytest

from lineage.core import NameList
from lineage.genealogy import Person, base_name, full_name, normalize_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Eddard Stark ", "eddard stark"),
        ("Robb Stark, First of his name", "robb stark first of his name"),
        ("NED", "ned"),
        (None, None),
    ],
)
def test_normalize_name(raw: str | None, expected: str | None) -> None:
    assert normalize_name(raw) == expected


def test_full_name() -> None:
    assert full_name("Aegon Targaryen", "Third") == "Aegon Targaryen, Third of his name"
    assert full_name("Arya Stark", None) == "Arya Stark"
    assert full_name("Arya Stark", "") == "Arya Stark"


def test_base_name() -> None:
    assert base_name("aegon targaryen third of his name") == "aegon targaryen"
    assert base_name("arya stark") == "arya stark"
    assert base_name("first of his name") == "first of his name"


def test_keys() -> None:
    person = Person(name="Eddard Stark", nickname="Ned")
    assert person.key == "eddard stark"
    assert person.nickname_key == "ned"
    assert Person(name="Arya Stark").nickname_key is None


def test_details_fill_missing_fields() -> None:
    person = Person(name="eddard stark", title="Lord of Winterfell")
    details = dict(person.details())
    assert details["Name"] == "eddard stark"
    assert details["Title"] == "Lord of Winterfell"
    assert details["Fate"] == "N/A"
    assert details["Children"] == "None"

    person.children.append("robb stark")
    person.children.append("arya stark")
    assert dict(person.details())["Children"] == "robb stark, arya stark"


def test_update_from_copies_non_empty_fields() -> None:
    person = Person(name="arya stark", fate="Unknown")
    incoming = Person(name="arya stark", nickname="arry", children=NameList())
    person.update_from(incoming)
    assert person.nickname == "arry"
    assert person.fate == "Unknown"
    assert person.children.is_empty()

    person.update_from(Person(name="arya stark", children=NameList(["x"])))
    assert person.children.to_list() == ["x"]


def test_to_dict_lists_children() -> None:
    person = Person(name="rickard stark", children=NameList(["eddard stark"]))
    data = person.to_dict()
    assert data["children"] == ["eddard stark"]
    assert data["name"] == "rickard stark"
    assert data["house"] is None
