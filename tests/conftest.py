import pytest


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Start every test without a Jina API key in the environment."""
    monkeypatch.delenv("JINA_API_KEY", raising=False)


@pytest.fixture
def search_payload():
    """Five upstream search results, the third one without a date."""
    return {
        "code": 200,
        "data": [
            {
                "title": f"Result {n}",
                "url": f"https://example.com/{n}",
                "description": f"Description {n}",
                "date": "2024-01-0{}".format(n) if n != 3 else None,
                "usage": {"tokens": 10 * n},
            }
            for n in range(1, 6)
        ],
    }
