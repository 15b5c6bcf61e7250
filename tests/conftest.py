import sys
from pathlib import Path

import pytest

# Ensure local source package (src/fluenthttp) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from fluenthttp import Client  # noqa: E402
from fluenthttp.models.errors import TransportError  # noqa: E402
from tests.utils.executors import FakeExecutor  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "FLUENTHTTP_BASE_URL",
        "FLUENTHTTP_TIMEOUT",
        "FLUENTHTTP_CONNECT_TIMEOUT",
        "FLUENTHTTP_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def client(executor: FakeExecutor) -> Client:
    return Client(executor=executor)


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("connection refused")
