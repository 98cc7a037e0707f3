"""Genealogy records, family tree queries and JSON ingestion."""

from .loader import LoadReport, load_document, load_genealogy, load_genealogy_file, parse_person
from .person import Person, base_name, full_name, normalize_name
from .tree import FamilyTree

__all__ = [
    "FamilyTree",
    "LoadReport",
    "Person",
    "base_name",
    "full_name",
    "load_document",
    "load_genealogy",
    "load_genealogy_file",
    "normalize_name",
    "parse_person",
]
