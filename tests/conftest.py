from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from globequiz.config import get_settings
from globequiz.main import app
from globequiz.models.quiz import Coordinate, GuessResult
from globequiz.security import create_access_token
from globequiz.services.result_store import ResultStore, _require_fid

TEST_SECRET = "test-secret"

QUIZ_ENV = (
    "QUIZ_Q1_PROMPT", "QUIZ_Q1_LAT", "QUIZ_Q1_LNG",
    "QUIZ_Q2_PROMPT", "QUIZ_Q2_LAT", "QUIZ_Q2_LNG",
    "QUIZ_Q3_PROMPT", "QUIZ_Q3_LAT", "QUIZ_Q3_LNG",
)


class MemoryResultStore(ResultStore):
    """In-process store with the same first-write-wins contract."""

    def __init__(self):
        self.records: Dict[Tuple[str, str], List[GuessResult]] = {}

    async def get(self, fid: str, version: str) -> Optional[List[GuessResult]]:
        return self.records.get((_require_fid(fid), version))

    async def submit(self, fid, version, results):
        return self.records.setdefault((_require_fid(fid), version), list(results))


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Known settings for every test."""
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("STORE_BACKEND", "redis")
    monkeypatch.setenv("REDIS_URL", "")
    monkeypatch.setenv("QUIZ_VERSION", "1")
    monkeypatch.setenv("IS_LOCAL_DEVELOPMENT", "false")
    for name in QUIZ_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def memory_store(client):
    store = MemoryResultStore()
    app.state.result_store = store
    return store


def auth_headers(fid: str = "1234") -> Dict[str, str]:
    token = create_access_token(get_settings(), fid=fid)
    return {"Authorization": f"Bearer {token}"}


def make_result(question_id: str, distance: float, score: int) -> GuessResult:
    return GuessResult(
        id=question_id,
        guess=Coordinate(lat=50.0, lng=8.0),
        answer=Coordinate(lat=50.1108, lng=8.6733),
        distance_km=distance,
        score=score,
    )


@pytest.fixture
def three_results() -> List[GuessResult]:
    return [
        make_result("goethe", 120.5, 99),
        make_result("leonardo", 800.0, 96),
        make_result("newton", 1500.25, 92),
    ]
