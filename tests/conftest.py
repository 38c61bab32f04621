import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure local source package (src/declarest) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from declarest import OperationRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("DECLAREST_BASE_URL", raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://api.test"


@pytest.fixture
def fresh_registry() -> Generator[OperationRegistry, None, None]:
    """Provide an empty registry, isolated from the process-wide one."""
    registry = OperationRegistry()
    yield registry
    registry.clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
