from fastapi.testclient import TestClient
import copy
import pytest

from exampin.app import create_app
from exampin.config import Settings


SAMPLE_EXAM = {
    "title": "Quiz",
    "questions": [
        {
            "type": "mc",
            "text": "2+2?",
            "options": [{"text": "3", "correct": False}, {"text": "4", "correct": True}],
        }
    ],
}


def make_settings(backend: str, tmp_path, **overrides) -> Settings:
    if backend == "database":
        base = dict(storage_backend="database", database_url=f"sqlite+aiosqlite:///{tmp_path / 'exampin.db'}")
    else:
        base = dict(storage_backend="file", data_dir=str(tmp_path / "data"))
    base.update(overrides)
    return Settings(**base)


@pytest.fixture(params=["file", "database"])
def backend(request):
    return request.param


@pytest.fixture
def client(backend, tmp_path):
    app = create_app(make_settings(backend, tmp_path))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sample_exam():
    return copy.deepcopy(SAMPLE_EXAM)


@pytest.fixture
def published(client, sample_exam):
    res = client.post("/api/exams", json=sample_exam)
    assert res.status_code == 200
    return res.json()


def submission(exam_id, pin, name="Anna", group="1A", score=1, max_score=1, responses=None):
    return {
        "examId": exam_id,
        "pin": pin,
        "student": {"name": name, "group": group},
        "totals": {"score": score, "max": max_score},
        "responses": responses if responses is not None else [{"answer": 1, "correct": True}],
    }


@pytest.fixture
def make_submission():
    return submission
