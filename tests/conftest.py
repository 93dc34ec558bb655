"""
Pytest fixtures for the QRTix API tests.

Every test gets two fresh SQLite files, one acting as the primary store
and one as the local mirror, so replication can be checked by reading
both files directly. The Face++ client is replaced by ``FakeFaceMatcher``.
"""
import pytest
from fastapi.testclient import TestClient

from qrtix.app.api.deps import get_face_matcher
from qrtix.app.core.config import Settings
from qrtix.app.main import create_app
from tests.helpers import FakeFaceMatcher, usuario_payload


@pytest.fixture
def primary_db(tmp_path):
    return tmp_path / "primary.db"


@pytest.fixture
def mirror_db(tmp_path):
    return tmp_path / "mirror.db"


@pytest.fixture
def settings(primary_db, mirror_db):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{primary_db}",
        LOCAL_DATABASE_URL=f"sqlite:///{mirror_db}",
        MIRROR_RETRY_DELAY_SECONDS=0,
        FACEPP_API_KEY="test-key",
        FACEPP_API_SECRET="test-secret",
    )


@pytest.fixture
def face_matcher():
    return FakeFaceMatcher(match=True)


@pytest.fixture
def app(settings, face_matcher):
    app = create_app(settings)
    app.dependency_overrides[get_face_matcher] = lambda: face_matcher
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered(client):
    """A user already registered through the API."""
    response = client.post("/registro", json=usuario_payload())
    assert response.status_code == 200
    return usuario_payload()
