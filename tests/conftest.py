import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from network_blocker import install_network_blocker

from core.http.session import SessionState
from core.mapping.factory import clear_geocoder_cache
from db.models import ALL_DOCUMENT_MODELS


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOMINATIM_USER_AGENT", "Doorstep-tests/1.0")
    monkeypatch.setenv("NOMINATIM_SEARCH_URL", "http://nominatim.test/search")
    monkeypatch.delenv("GEOCODE_COUNTRY_CODES", raising=False)
    install_network_blocker(monkeypatch)
    clear_geocoder_cache()
    SessionState.session = None
    SessionState.session_owner_pid = None


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=ALL_DOCUMENT_MODELS)
    return database
