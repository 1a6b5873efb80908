from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from itinerary_api.deps import get_fragment_source
from itinerary_api.errors import UpstreamError
from itinerary_api.main import app, limiter


class FakeSource:
    """Stands in for the Gemini stream: yields canned fragments, optionally failing."""

    configured = True

    def __init__(
        self,
        fragments: List[str],
        fail_at: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.fragments = fragments
        self.fail_at = fail_at
        self.error = error or UpstreamError("Gemini request failed: connection reset")
        self.prompts: List[str] = []

    async def __call__(self, prompt: str):
        self.prompts.append(prompt)
        for i, fragment in enumerate(self.fragments):
            if self.fail_at is not None and i == self.fail_at:
                raise self.error
            yield fragment
        if self.fail_at is not None and self.fail_at >= len(self.fragments):
            raise self.error


@pytest.fixture(autouse=True)
def _no_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def install_source():
    def _install(source: FakeSource) -> FakeSource:
        app.dependency_overrides[get_fragment_source] = lambda: source
        return source

    yield _install
    app.dependency_overrides.pop(get_fragment_source, None)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
