from .bucket import Bucket, Entry
from .lists import LinkedQueue, NameList, NameSet
from .table import DEFAULT_CAPACITY, DEFAULT_LOAD_FACTOR, HashTable, slot_index, stable_hash

__all__ = [
    "Bucket",
    "Entry",
    "HashTable",
    "LinkedQueue",
    "NameList",
    "NameSet",
    "DEFAULT_CAPACITY",
    "DEFAULT_LOAD_FACTOR",
    "slot_index",
    "stable_hash",
]
