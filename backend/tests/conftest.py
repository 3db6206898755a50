import json
import pytest
import os
import sys
from pathlib import Path
from typing import List, Optional
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent))

TEST_ENV = {
    "GEMINI_API_KEY": "test_gemini_key",
    "TAVILY_API_KEY": "test_tavily_key",
    "GEMINI_MODEL": "gemini-2.5-flash",
}

@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables before any imports."""
    for key, value in TEST_ENV.items():
        os.environ[key] = value
    yield
    # Cleanup
    for key in TEST_ENV.keys():
        os.environ.pop(key, None)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock all required environment variables."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    return TEST_ENV


@pytest.fixture
def test_client():
    """Create a TestClient for FastAPI app."""
    import main
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def make_async_client(post: AsyncMock) -> MagicMock:
    """Stand-in for ``httpx.AsyncClient(...)`` used as an async context manager."""
    mock_client = MagicMock()
    mock_client.post = post
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def make_json_response(payload) -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    return mock_response


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def sample_image_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-screenshot"


@pytest.fixture
def moon_extraction_text() -> str:
    return json.dumps({
        "extracted_claim": "The moon landing was faked",
        "question": "Was the 1969 moon landing faked?",
    })


@pytest.fixture
def moon_verdict_text() -> str:
    return '```json\n{"validity": false, "response": "NASA archives [1] and independent tracking [2] confirm the landing."}\n```'


@pytest.fixture
def sample_tavily_response():
    """Sample Tavily search response."""
    return {
        "query": "Was the 1969 moon landing faked?",
        "answer": "No. The Apollo 11 landing is extensively documented.",
        "results": [
            {
                "title": "Apollo 11 Mission Overview",
                "url": "https://www.nasa.gov/apollo11",
                "content": "Apollo 11 landed on the Moon on July 20, 1969.",
                "score": 0.71,
            },
            {
                "title": "Tracking Apollo from Jodrell Bank",
                "url": "https://example.org/jodrell-bank",
                "content": "Independent observatories tracked the spacecraft.",
                "score": 0.93,
            },
            {
                "title": "Moon landing conspiracy theories",
                "url": "https://example.org/conspiracies",
                "content": "Claims of a hoax have been debunked repeatedly.",
                "score": 0.65,
            },
        ],
    }


class FakeGenerativeClient:
    """Answers extraction prompts (image present) and synthesis prompts (text only)."""

    def __init__(self, extraction_text: str, verdict_text: str):
        self.extraction_text = extraction_text
        self.verdict_text = verdict_text
        self.calls: List[list] = []

    async def generate(self, parts) -> str:
        from models import InlineImagePart
        self.calls.append(list(parts))
        if any(isinstance(p, InlineImagePart) for p in parts):
            return self.extraction_text
        return self.verdict_text


class FakeSearchClient:
    def __init__(self, bundle=None, error: Optional[Exception] = None):
        self.bundle = bundle
        self.error = error
        self.queries: List[str] = []

    async def search(self, query: str, include_answer_summary: bool = True):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.bundle
