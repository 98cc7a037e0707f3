"""Person records indexed by the family tree."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from lineage.core.lists import NameList

MISSING = "N/A"


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Canonical index form: trimmed, commas dropped, lower-cased."""

    if name is None:
        return None
    return name.strip().replace(",", "").lower()


def full_name(name: str, of_his_name: Optional[str]) -> str:
    if not of_his_name:
        return name
    return f"{name}, {of_his_name} of his name"


def base_name(name: str) -> str:
    """Strip a trailing ``<ordinal> of his name`` suffix from a normalised name."""

    parts = name.split()
    if len(parts) > 4 and parts[-3:] == ["of", "his", "name"]:
        return " ".join(parts[:-4])
    return name


@dataclass(eq=False)
class Person:
    name: str
    title: Optional[str] = None
    nickname: Optional[str] = None
    father: Optional[str] = None
    mother: Optional[str] = None
    fate: Optional[str] = None
    of_his_name: Optional[str] = None
    wed_to: Optional[str] = None
    eyes: Optional[str] = None
    hair: Optional[str] = None
    notes: Optional[str] = None
    house: Optional[str] = None
    children: NameList = field(default_factory=NameList)

    @property
    def key(self) -> str:
        key = normalize_name(self.name)
        assert key is not None
        return key

    @property
    def nickname_key(self) -> Optional[str]:
        return normalize_name(self.nickname) if self.nickname else None

    def update_from(self, other: "Person") -> None:
        """Copy every non-empty field of ``other`` onto this record."""

        for f in fields(self):
            incoming = getattr(other, f.name)
            if f.name == "children":
                if incoming is not None and len(incoming) > 0:
                    self.children = incoming
            elif incoming:
                setattr(self, f.name, incoming)

    def details(self) -> List[Tuple[str, str]]:
        children = ", ".join(self.children) if len(self.children) else "None"
        return [
            ("Name", self.name),
            ("Title", self.title or MISSING),
            ("Nickname", self.nickname or MISSING),
            ("Father", self.father or MISSING),
            ("Mother", self.mother or MISSING),
            ("Fate", self.fate or MISSING),
            ("Of his name", self.of_his_name or MISSING),
            ("Wed to", self.wed_to or MISSING),
            ("Eye color", self.eyes or MISSING),
            ("Hair color", self.hair or MISSING),
            ("Notes", self.notes or MISSING),
            ("Children", children),
        ]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        data["children"] = self.children.to_list()
        return data


__all__ = ["MISSING", "Person", "base_name", "full_name", "normalize_name"]
