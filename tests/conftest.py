# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from propquant.api.http import app
from propquant.domain.assumptions import DEFAULT_CONFIG
from samples.listings import listing_payload, sample_risks, strong_listing


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def listing():
    return strong_listing()


@pytest.fixture
def risks():
    return sample_risks()


@pytest.fixture
def default_config():
    return DEFAULT_CONFIG


@pytest.fixture
def analyze_payload():
    return {
        "property": listing_payload(),
        "risks": [r.model_dump(by_alias=True) for r in sample_risks()],
    }
