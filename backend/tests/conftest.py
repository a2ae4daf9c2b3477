import sys
from pathlib import Path

import httpx
import pytest

# Ensure the backend root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture
def mock_http(monkeypatch):
    """
    Route every httpx.AsyncClient through a MockTransport driven by handler.
    Returns the list of requests seen, for asserting on query params.
    """
    seen = []
    real_client = httpx.AsyncClient

    def install(handler):
        def recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(recording)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)
        return seen

    return install
