import pytest
from fastapi.testclient import TestClient #gives you a fake http client that can call your FastAPI routes without running a real server.

from app.main import app


@pytest.fixture() #test client
def client():
    with TestClient(app) as test_client:
        yield test_client
