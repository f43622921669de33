"""Pytest configuration and shared fixtures"""
import pytest
from fastapi.testclient import TestClient

from unitcode.definitions import DefinitionsTable, Prefix, Unit, default_definitions
from unitcode.main import app


@pytest.fixture
def definitions():
    """Bundled canonical definitions table"""
    return default_definitions()


@pytest.fixture
def small_table():
    """Minimal table where kg is listed before g"""
    return DefinitionsTable(
        prefixes=[Prefix("M", 6), Prefix("k", 3), Prefix("G", 9), Prefix("m", -3)],
        units=[Unit("kg"), Unit("g"), Unit("m"), Unit("s")],
        currency_codes=["USD", "EUR"],
    )


@pytest.fixture(scope="function")
def client():
    """Create FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client
