"""Genealogy index built on a chained hash table."""

from . import config, contracts, core, genealogy

__all__ = [
    "config",
    "contracts",
    "core",
    "genealogy",
]
