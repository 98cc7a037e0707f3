"""Pydantic models for the lookup service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from lineage.genealogy import Person


class PersonModel(BaseModel):
    """Public view of one indexed person."""

    name: str = Field(..., description="Normalised full name (index key).")
    title: str | None = None
    nickname: str | None = None
    father: str | None = None
    mother: str | None = None
    fate: str | None = None
    of_his_name: str | None = None
    wed_to: str | None = None
    eyes: str | None = None
    hair: str | None = None
    notes: str | None = None
    house: str | None = None
    children: list[str] = Field(default_factory=list)

    @classmethod
    def from_person(cls, person: Person) -> "PersonModel":
        return cls(**person.to_dict())


class PersonListResponse(BaseModel):
    query: str
    people: list[PersonModel]


class AncestorsResponse(BaseModel):
    name: str
    ancestors: list[str]


class GenerationResponse(BaseModel):
    generation: int = Field(..., ge=1)
    members: list[str]


class StatsResponse(BaseModel):
    keys: int
    people: int
    capacity: int
    load_factor: float
    current_load_factor: float
    max_chain_length: int

    @classmethod
    def from_stats(cls, stats: dict[str, Any]) -> "StatsResponse":
        return cls(**stats)
