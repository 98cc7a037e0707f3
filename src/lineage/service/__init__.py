"""Read-only lookup service over a loaded family tree."""

from .api import create_app
from .models import (
    AncestorsResponse,
    GenerationResponse,
    PersonListResponse,
    PersonModel,
    StatsResponse,
)

__all__ = [
    "create_app",
    "AncestorsResponse",
    "GenerationResponse",
    "PersonListResponse",
    "PersonModel",
    "StatsResponse",
]
