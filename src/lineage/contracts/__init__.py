"""Contract helpers for the lineage genealogy index."""

from .error import (
    BadInputError,
    EmptyStructureError,
    EnvelopeError,
    ErrorEnvelope,
    Exit,
    InvariantError,
    IOErrorEnvelope,
    NotFoundError,
    PolicyError,
    die,
    guard_cli,
)

__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "PolicyError",
    "EmptyStructureError",
    "IOErrorEnvelope",
    "NotFoundError",
    "guard_cli",
    "die",
]
