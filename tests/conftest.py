import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sessionauth import create_app
from sessionauth.core.config import AppSettings


@pytest.fixture()
def settings(tmp_path: Path) -> AppSettings:
    # Cheapest bcrypt cost keeps the flow tests fast.
    return AppSettings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'app.db'}",
        SESSION_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_JSON=False,
    )


@pytest.fixture()
def app(settings: AppSettings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client

