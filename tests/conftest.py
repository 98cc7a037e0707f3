import json
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

from lineage.genealogy import FamilyTree, load_document  # noqa: E402

STARK_DOCUMENT: dict[str, Any] = {
    "House Stark": [
        {
            "Rickard Stark": [
                {"Of his name": "First"},
                {"Held title": "Lord of Winterfell"},
                {"Born to": "Edwyle Stark"},
                {"Father to": ["Eddard Stark", "Brandon Stark", "Benjen Stark"]},
            ]
        },
        {
            "Eddard Stark": [
                {"Held title": "Lord of Winterfell"},
                {"Known throughout as": "Ned"},
                {"Born to": "Rickard Stark"},
                {"Born to": "Lyarra Stark"},
                {"Father to": ["Robb Stark", "Sansa Stark", "Arya Stark"]},
                {"Wed to": "Catelyn Tully"},
                {"Of eyes": "Grey"},
                {"Fate": "Beheaded"},
            ]
        },
        {"Brandon Stark": [{"Born to": "Rickard Stark"}, {"Fate": "Strangled"}]},
        {
            "Robb Stark": [
                {"Of his name": "First"},
                {"Held title": "King in the North"},
                {"Known throughout as": "The Young Wolf"},
                {"Born to": "Eddard Stark"},
                {"Born to": "Catelyn Tully"},
            ]
        },
        {"Arya Stark": [{"Born to": "Eddard Stark"}, {"Born to": "Catelyn Tully"}]},
        {"Sansa Stark": [{"Born to": "Ned"}, {"Held title": "Lady of Winterfell"}]},
    ]
}


@pytest.fixture
def stark_document() -> dict[str, Any]:
    return json.loads(json.dumps(STARK_DOCUMENT))


@pytest.fixture
def stark_tree(stark_document: dict[str, Any]) -> FamilyTree:
    tree = FamilyTree()
    load_document(stark_document, tree)
    return tree


@pytest.fixture
def stark_file(tmp_path: Path, stark_document: dict[str, Any]) -> Path:
    path = tmp_path / "stark.json"
    path.write_text(json.dumps(stark_document), encoding="utf-8")
    return path
