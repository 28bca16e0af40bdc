# tests/api_tests/conftest.py
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from api_server.main import app

# Key the in-process server is started with for this test module
TEST_SERVER_API_KEY = "test_drbg_api_key_123!"


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """
    Provides an authenticated client for the API, with the server's lifespan
    (and so its shared DRBG) running for the whole module.
    """
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("SERVER_API_KEY", TEST_SERVER_API_KEY)
        mp.setenv("SP800_API_MECHANISM", "hash")
        mp.delenv("SP800_SECURITY_STRENGTH", raising=False)
        mp.delenv("SP800_ENTROPY_BITS", raising=False)
        mp.delenv("SP800_PREDICTION_RESISTANT", raising=False)
        with TestClient(app) as client:
            client.headers.update({"X-API-Key": TEST_SERVER_API_KEY, "accept": "application/json"})
            yield client
