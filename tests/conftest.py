"""Shared pytest fixtures for Merchify SDK tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import httpx
import pytest

from merchify.core.config import MerchifySettings
from merchify.core.storage import InMemoryStore


class ManualTimerHandle:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualTimerHandle] = []

    def call_later(self, delay: float, callback) -> ManualTimerHandle:
        handle = ManualTimerHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [h for h in self.handles if h.when <= self.now and not h.cancelled]
        self.handles = [h for h in self.handles if h not in due]
        for handle in sorted(due, key=lambda h: h.when):
            handle.callback()

    @property
    def pending(self) -> int:
        return sum(1 for h in self.handles if not h.cancelled)


class FailingStore:
    """Durable store that rejects every operation, like a sandboxed context."""

    def __init__(self):
        self.calls = 0

    def get_item(self, name: str):
        self.calls += 1
        raise PermissionError("storage disabled")

    def set_item(self, name: str, value: str) -> None:
        self.calls += 1
        raise PermissionError("storage disabled")

    def remove_item(self, name: str) -> None:
        self.calls += 1
        raise PermissionError("storage disabled")


class SignerStub:
    """Callable for ``httpx.MockTransport`` imitating the URL signer.

    Echoes the requested URL back with ``&sig=<signature>`` appended. Set
    ``error`` to make the next requests raise, or ``status_code`` / ``payload``
    to change the response.
    """

    def __init__(self, signature: str = "S1"):
        self.signature = signature
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: dict | None = None
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        if self.payload is not None:
            return httpx.Response(self.status_code, json=self.payload)

        url = request.url.params["url"]
        return httpx.Response(
            self.status_code,
            json={
                "signature": self.signature,
                "urlWithSignature": f"{url}&sig={self.signature}",
            },
        )

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_settings(temp_dir: Path) -> MerchifySettings:
    """Settings isolated from the environment and the user's cache directory."""
    return MerchifySettings(
        _env_file=None,
        environment="production",
        cache_dir=temp_dir / "cache",
        memory_cache_size=500,
        storage_cache_size=100,
        signature_cache_key="test_cache_key",
    )


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def signer() -> SignerStub:
    return SignerStub()


@pytest.fixture
def transport(signer: SignerStub) -> httpx.MockTransport:
    return httpx.MockTransport(signer)


@pytest.fixture
def color_element() -> dict:
    return {
        "type": "color",
        "hex": "#FF0000",
        "placement": "front",
        "width": 1200,
        "height": 1200,
        "alignment": "center",
        "isTile": False,
    }


@pytest.fixture
def image_element() -> dict:
    return {
        "type": "image",
        "imageUrl": "https://cdn.example.com/art.png",
        "placement": "back",
        "width": 800,
        "height": 600,
        "alignment": "top",
        "isTile": True,
        "tileScale": "0.5",
    }


@pytest.fixture
def mockup_request(color_element: dict) -> dict:
    return {
        "design": [color_element],
        "product": {"productId": "p1", "mockupId": "m1", "variantId": "v1"},
    }
