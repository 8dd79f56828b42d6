import pytest
from fastapi.testclient import TestClient

from deployinfo.main import create_app

_ENV_VARS = (
    "VERSION",
    "VERSION_FILE",
    "PORT",
    "HOST",
    "SHUTDOWN_GRACE_SECONDS",
    "KEEP_ALIVE_SECONDS",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Run every test in an empty directory with no service variables set."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def version_file(workdir):
    def _write(content: str):
        path = workdir / "VERSION"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def client():
    """Create a test client for API tests."""
    with TestClient(create_app()) as client:
        yield client
