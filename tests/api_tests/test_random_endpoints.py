# tests/api_tests/test_random_endpoints.py
import base64
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api_server.core.generator import SharedGenerator, build_server_generator
from api_server.main import app
from sp800_random.errors import EntropyUnavailable, MechanismFault

BYTES_URL = "/api/v1/random/bytes"
RESEED_URL = "/api/v1/random/reseed"
INFO_URL = "/api/v1/random/info"


def test_root(api_client: TestClient):
    response = api_client.get("/")
    assert response.status_code == 200
    assert "SP 800-90A" in response.json()["message"]


def test_random_bytes_default_count(api_client: TestClient):
    response = api_client.get(BYTES_URL)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["count"] == 32
    assert len(base64.b64decode(data["random_b64"])) == 32
    assert data["algorithm"] == "HASH-DRBG-SHA256"


def test_random_bytes_are_fresh_each_call(api_client: TestClient):
    first = api_client.get(BYTES_URL, params={"count": 64}).json()["random_b64"]
    second = api_client.get(BYTES_URL, params={"count": 64}).json()["random_b64"]
    assert len(base64.b64decode(first)) == 64
    assert first != second


@pytest.mark.parametrize("count", [0, -1, 65537])
def test_random_bytes_count_out_of_range(api_client: TestClient, count: int):
    response = api_client.get(BYTES_URL, params={"count": count})
    assert response.status_code == 422


def test_missing_api_key(api_client: TestClient):
    request = api_client.build_request("GET", BYTES_URL)
    del request.headers["X-API-Key"]
    response = api_client.send(request)
    assert response.status_code == 401
    assert "header missing" in response.json()["detail"]


def test_wrong_api_key(api_client: TestClient):
    response = api_client.get(BYTES_URL, headers={"X-API-Key": "not-the-key"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API Key."


def test_reseed_without_additional_input(api_client: TestClient):
    response = api_client.post(RESEED_URL, json={})
    assert response.status_code == 200, response.text
    assert response.json() == {"status": "reseeded", "algorithm": "HASH-DRBG-SHA256"}


def test_reseed_with_additional_input(api_client: TestClient):
    payload = {"additional_input_b64": base64.b64encode(b"session-123").decode()}
    response = api_client.post(RESEED_URL, json=payload)
    assert response.status_code == 200, response.text
    assert api_client.get(BYTES_URL).status_code == 200


def test_reseed_with_invalid_base64(api_client: TestClient):
    response = api_client.post(RESEED_URL, json={"additional_input_b64": "!!not base64!!"})
    assert response.status_code == 400
    assert "base64" in response.json()["detail"]


def test_generator_info(api_client: TestClient):
    response = api_client.get(INFO_URL)
    assert response.status_code == 200
    assert response.json() == {
        "algorithm": "HASH-DRBG-SHA256",
        "prediction_resistant": False,
        "security_strength": 256,
    }


def test_entropy_failure_maps_to_503(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    failing = MagicMock(spec=SharedGenerator)
    failing.generate_bytes.side_effect = EntropyUnavailable("Simulated source failure")
    monkeypatch.setattr(app.state, "drbg", failing)
    response = api_client.get(BYTES_URL)
    assert response.status_code == 503
    assert "entropy unavailable" in response.json()["detail"]


def test_mechanism_fault_maps_to_500(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    faulted = MagicMock(spec=SharedGenerator)
    faulted.reseed.side_effect = MechanismFault("Simulated fault")
    monkeypatch.setattr(app.state, "drbg", faulted)
    response = api_client.post(RESEED_URL, json={})
    assert response.status_code == 500


def test_generator_not_loaded(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(app.state, "drbg", None)
    response = api_client.get(INFO_URL)
    assert response.status_code == 503
    assert response.json()["detail"] == "DRBG not initialised."


@pytest.mark.parametrize("mechanism, algorithm", [
    ("hash", "HASH-DRBG-SHA256"),
    ("hmac", "HMAC-DRBG-SHA256"),
    ("ctr", "CTR-DRBG-AES256"),
    ("DUAL_EC", "Dual-EC-DRBG-SHA256"),
])
def test_build_server_generator(mechanism: str, algorithm: str, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SP800_SECURITY_STRENGTH", "128")
    monkeypatch.delenv("SP800_PREDICTION_RESISTANT", raising=False)
    generator = build_server_generator(mechanism)
    assert generator.algorithm == algorithm
    assert generator.security_strength == 128
    assert len(generator.generate_bytes(48)) == 48


def test_build_server_generator_rejects_unknown_mechanism():
    with pytest.raises(ValueError):
        build_server_generator("md5")
