"""
Pytest configuration and shared fixtures for the quiz backend tests.
"""
import json
from pathlib import Path

import pytest

from quizlite.domain.models import QuizConfig
from quizlite.infra.clients.config_store import JsonConfigStore

SAMPLE_CONFIG_PATH = Path(__file__).resolve().parents[1] / "data" / "quiz.json"


# ============================================================================
# Fixtures: quiz documents
# ============================================================================

@pytest.fixture
def scenario_document() -> dict:
    """One combo over undertone+tone and one undertone rule that overlaps it."""
    return {
        "questions": [
            {
                "id": "tonefaces",
                "title": "Find your tone",
                "layout": "tone-faces",
                "stops": ["Light", "Medium", "Deep"],
                "options": [
                    {"value": "f1", "label": "Face 1", "group": 0},
                    {"value": "f2", "label": "Face 2", "group": 1},
                    {"value": "f3", "label": "Face 3", "group": 2},
                ],
            },
            {
                "id": "undertone",
                "title": "Undertone",
                "layout": "undertone",
                "options": [
                    {"value": "warm", "label": "Warm"},
                    {"value": "cool", "label": "Cool"},
                ],
            },
        ],
        "combos": [{"when": {"undertone": "warm", "tone": "tone_light"}, "recommend": ["shade-a"]}],
        "rules": [{"questionId": "undertone", "value": "warm", "recommend": ["shade-b"]}],
    }


@pytest.fixture
def scenario_config(scenario_document) -> QuizConfig:
    return QuizConfig.from_dict(scenario_document)


@pytest.fixture
def sample_document() -> dict:
    """The shipped data/quiz.json."""
    return json.loads(SAMPLE_CONFIG_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def sample_config(sample_document) -> QuizConfig:
    return QuizConfig.from_dict(sample_document)


@pytest.fixture
def config_path(tmp_path, scenario_document) -> Path:
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps(scenario_document), encoding="utf-8")
    return path


@pytest.fixture
def store(config_path) -> JsonConfigStore:
    return JsonConfigStore(config_path)


# ============================================================================
# Fixtures: fakes
# ============================================================================

class FakeCatalog:
    """In-memory catalog. Handles in `failing` raise, unknown handles are not found."""

    def __init__(self, products=None, failing=()):
        self.products = products or {}
        self.failing = set(failing)
        self.calls = []

    def fetch_by_handle(self, handle):
        from quizlite.domain.errors import CatalogLookupError

        self.calls.append(handle)
        if handle in self.failing:
            raise CatalogLookupError(handle, "connection reset")
        return self.products.get(handle)


@pytest.fixture
def fake_catalog_factory():
    return FakeCatalog
