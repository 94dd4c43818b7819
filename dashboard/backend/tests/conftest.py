"""
Pytest configuration and fixtures
"""
import os
import sys
import json
import pytest
from typing import Generator, AsyncGenerator
from unittest.mock import AsyncMock, patch

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport


# ============================================
# App Fixtures
# ============================================

@pytest.fixture(scope="session")
def app():
    """Create FastAPI app for testing"""
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app) -> Generator:
    """Synchronous test client"""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncGenerator:
    """Asynchronous test client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ============================================
# Cluster Fixtures
# ============================================

TEST_CLUSTERS = {
    "c1": {"name": "prod", "endpoint": "http://h1"},
    "c2": {"name": "staging", "endpoint": "http://h2:9999", "timeout": 5000, "token": "secret"},
}


@pytest.fixture(autouse=True)
def clusters():
    """Use an in-memory cluster registry for every test"""
    from core.config import settings
    from core.cluster import reload_clusters

    original = settings.CLUSTERS
    settings.CLUSTERS = json.dumps(TEST_CLUSTERS)
    yield reload_clusters()

    settings.CLUSTERS = original
    reload_clusters()


# ============================================
# Session Fixtures
# ============================================

@pytest.fixture
def superuser():
    from models.session import SessionUser
    return SessionUser(name="root", role=True)


@pytest.fixture
def cluster_admin():
    from models.session import SessionUser
    return SessionUser(name="ops", clusterAcl={"c1": {"isAdmin": True, "apps": []}})


@pytest.fixture
def app_user():
    """Non-admin user allowed to see app1 on c1"""
    from models.session import SessionUser
    return SessionUser(name="dev", clusterAcl={"c1": {"isAdmin": False, "apps": ["app1"]}})


@pytest.fixture
def login(app):
    """Override the session user dependency"""
    from core.session import get_session_user

    def _login(user):
        app.dependency_overrides[get_session_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.pop(get_session_user, None)


# ============================================
# Mock Fixtures
# ============================================

@pytest.fixture
def mock_remote():
    """Mock remote cluster API call"""
    with patch("services.app_ops.call_remote", new_callable=AsyncMock) as mock:
        mock.return_value = {"code": "SUCCESS", "data": {}}
        yield mock


@pytest.fixture
def mock_oplog():
    """Mock audit log writer"""
    with patch("services.app_ops.oplog") as mock:
        yield mock


# ============================================
# Data Fixtures
# ============================================

@pytest.fixture
def sample_app_list():
    """Remote /api/apps response with two hosts"""
    return {
        "code": "SUCCESS",
        "data": {
            "success": [
                {
                    "ip": "10.0.0.1",
                    "apps": [
                        {"name": "app1", "appId": "app1_1.0.0_1", "version": "1.0.0", "buildNum": "1", "ip": "10.0.0.1", "status": "online"},
                        {"name": "app2", "appId": "app2_2.0.0_3", "version": "2.0.0", "buildNum": "3", "ip": "10.0.0.1", "status": "online"},
                    ],
                },
                {
                    "ip": "10.0.0.2",
                    "apps": [
                        {"name": "app1", "appId": "app1_1.0.0_1", "version": "1.0.0", "buildNum": "1", "ip": "10.0.0.2", "status": "online"},
                    ],
                },
            ],
            "error": [{"ip": "10.0.0.3", "message": "connect ECONNREFUSED"}],
        },
    }
