"""JSON ingestion: parse genealogy documents and feed them into a FamilyTree."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from lineage.contracts.error import BadInputError, IOErrorEnvelope
from lineage.core.lists import NameList

from .person import Person, full_name, normalize_name
from .tree import FamilyTree

logger = logging.getLogger(__name__)

FIELD_TITLE = "Held title"
FIELD_NICKNAME = "Known throughout as"
FIELD_BORN_TO = "Born to"
FIELD_FATHER_TO = "Father to"
FIELD_FATE = "Fate"
FIELD_ORDINAL = "Of his name"
FIELD_WED_TO = "Wed to"
FIELD_EYES = "Of eyes"
FIELD_HAIR = "Of hair"
FIELD_NOTES = "Notes"

_SIMPLE_FIELDS: Dict[str, str] = {
    FIELD_TITLE: "title",
    FIELD_FATE: "fate",
    FIELD_ORDINAL: "of_his_name",
    FIELD_WED_TO: "wed_to",
    FIELD_EYES: "eyes",
    FIELD_HAIR: "hair",
    FIELD_NOTES: "notes",
}


@dataclass
class LoadReport:
    seen: int = 0
    added: int = 0
    skipped: List[str] = field(default_factory=list)


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema_resource = resources.files("lineage.contracts") / "genealogy_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        schema = json.load(stream)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_document(document: Any) -> None:
    """Raise :class:`BadInputError` describing the first schema violation."""

    errors = sorted(_validator().iter_errors(document), key=lambda err: list(err.absolute_path))
    if errors:
        first = errors[0]
        raise BadInputError(
            f"Invalid genealogy document at {first.json_path}: {first.message}",
            hint=f"{len(errors)} schema violation(s) found",
        )


def _single_pair(obj: Any, where: str) -> tuple[str, Any]:
    if not isinstance(obj, dict) or len(obj) != 1:
        raise BadInputError(f"{where} must be an object with exactly one key")
    return next(iter(obj.items()))


def parse_person(name: str, details: List[Any], house: Optional[str] = None) -> Person:
    """Build a :class:`Person` from one ``{name: [detail, ...]}`` entry."""

    if not isinstance(details, list):
        raise BadInputError(f"details for {name!r} must be a list")
    values: Dict[str, Optional[str]] = {}
    father: Optional[str] = None
    mother: Optional[str] = None
    nickname: Optional[str] = None
    children = NameList()

    for detail in details:
        label, value = _single_pair(detail, f"detail of {name!r}")
        if label == FIELD_BORN_TO:
            if father is None:
                father = value
            else:
                mother = value
        elif label == FIELD_FATHER_TO:
            if not isinstance(value, list):
                raise BadInputError(f"{FIELD_FATHER_TO!r} of {name!r} must be a list of names")
            for child in value:
                child_key = normalize_name(child)
                if child_key and child_key not in children:
                    children.append(child_key)
        elif label == FIELD_NICKNAME:
            nickname = value
        elif label in _SIMPLE_FIELDS:
            values[_SIMPLE_FIELDS[label]] = value

    display = normalize_name(full_name(name, values.get("of_his_name")))
    if not display:
        raise BadInputError("person name must not be empty")
    return Person(
        name=display,
        nickname=normalize_name(nickname) if nickname else None,
        father=father,
        mother=mother,
        house=house,
        children=children,
        **values,
    )


def load_document(document: Any, tree: FamilyTree, *, validate: bool = True) -> LoadReport:
    if validate:
        validate_document(document)
    if not isinstance(document, dict):
        raise BadInputError("genealogy document must be an object of houses")

    report = LoadReport()
    for house, members in document.items():
        if not isinstance(members, list):
            raise BadInputError(f"house {house!r} must map to a list of people")
        for entry in members:
            name, details = _single_pair(entry, f"member of house {house!r}")
            person = parse_person(name, details, house=house)
            report.seen += 1
            if tree.add_person(person):
                report.added += 1
            else:
                report.skipped.append(person.name)
        logger.debug("Loaded house %s (%d members)", house, len(members))
    logger.info(
        "Loaded %d people (%d skipped as duplicates)", report.added, len(report.skipped)
    )
    return report


def load_genealogy(text: str, tree: FamilyTree, *, validate: bool = True) -> LoadReport:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BadInputError(f"Invalid JSON: {exc}") from exc
    return load_document(document, tree, validate=validate)


def load_genealogy_file(
    path: str | Path,
    tree: FamilyTree,
    *,
    validate: bool = True,
    max_bytes: int = 0,
) -> LoadReport:
    source = Path(path)
    try:
        size = source.stat().st_size
    except FileNotFoundError as exc:
        raise IOErrorEnvelope(f"Genealogy file not found: {source}") from exc
    if max_bytes and size > max_bytes:
        raise BadInputError(
            f"Genealogy file {source} is {size} bytes (limit {max_bytes})",
            hint="Raise loader.max_bytes or set it to 0 to disable the guard",
        )
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOErrorEnvelope(f"Cannot read {source}: {exc}") from exc
    logger.info("Loading genealogy from %s", source)
    return load_genealogy(text, tree, validate=validate)


__all__ = [
    "LoadReport",
    "load_document",
    "load_genealogy",
    "load_genealogy_file",
    "parse_person",
    "validate_document",
]
