import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tddapp.app import create_app
from tddapp.config import Settings


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Deterministic settings; the user file lives in a temp dir and starts out missing."""
    return Settings(secret_key="abc", users_path=tmp_path / "users.yml")


@pytest.fixture()
def make_client(settings):
    """Build a TestClient around create_app(); redirects are never followed."""

    def _make(**kwargs) -> TestClient:
        kwargs.setdefault("settings", settings)
        return TestClient(create_app(**kwargs), follow_redirects=False)

    return _make
