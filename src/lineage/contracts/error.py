"""Failure taxonomy for the lineage index and its CLI error envelope.

Every failure the index reports on purpose is an :class:`EnvelopeError`
subclass. Each subclass carries its own envelope label, exit code and a
default hint, so :func:`guard_cli` only has to render what the exception
already knows about itself.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, ClassVar, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    """Process exit codes of the ``lineage`` command."""

    OK = 0
    BAD_INPUT = 2
    INVARIANT = 3
    POLICY = 4
    IO = 5
    NOT_FOUND = 6


@dataclass(slots=True)
class ErrorEnvelope:
    """One JSON line written to stderr when a command fails."""

    error: str
    detail: str
    code: int
    hint: str | None = None

    def to_json(self) -> str:
        payload: dict[str, Any] = {"error": self.error, "detail": self.detail, "code": self.code}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


def die(envelope: ErrorEnvelope) -> NoReturn:
    """Write ``envelope`` to stderr and exit with its code."""

    sys.stderr.write(envelope.to_json() + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(envelope.code)


class EnvelopeError(Exception):
    """Base class for failures rendered as an :class:`ErrorEnvelope`."""

    kind: ClassVar[str] = "Policy"
    exit_code: ClassVar[Exit] = Exit.POLICY
    default_hint: ClassVar[str | None] = None

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint if hint is not None else self.default_hint

    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(
            error=self.kind, detail=str(self), code=int(self.exit_code), hint=self.hint
        )


class BadInputError(EnvelopeError):
    """None keys, malformed documents, bad table arguments, flags or config."""

    kind = "BadInput"
    exit_code = Exit.BAD_INPUT


class InvariantError(EnvelopeError):
    """A table or tree audit found a broken invariant."""

    kind = "Invariant"
    exit_code = Exit.INVARIANT
    default_hint = "Run 'lineage verify --verbose' and report the listed problems"


class PolicyError(EnvelopeError):
    """An operation the index does not support."""


class EmptyStructureError(PolicyError):
    """Front removal from an empty bucket, list or queue."""

    kind = "EmptyStructure"
    default_hint = "Check is_empty() before removing from the front"


class IOErrorEnvelope(EnvelopeError):  # noqa: N818 - named after the envelope kind
    """A genealogy file that is missing or unreadable."""

    kind = "IO"
    exit_code = Exit.IO
    default_hint = "Check the --data path or LINEAGE_DATA"


class NotFoundError(EnvelopeError):
    """A person name that is not in the index."""

    kind = "NotFound"
    exit_code = Exit.NOT_FOUND
    default_hint = "Names match case-insensitively; try the 'matches' command"


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Turn envelope errors raised by a CLI handler into a stderr envelope and exit code."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            die(exc.envelope())
        except Exception as exc:  # noqa: BLE001 - last-resort envelope
            logger.exception("Unhandled CLI exception")
            die(ErrorEnvelope("Unhandled", f"{type(exc).__name__}: {exc}", int(Exit.POLICY)))

    return _wrapped


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
