import pytest

from core.exceptions import ProviderUnavailable
from core.http.request import get_json
from tests.http_fakes import FakeResponse, FakeSession


@pytest.mark.asyncio
async def test_get_json_sends_params_and_headers() -> None:
    session = FakeSession(get_responses=[FakeResponse(status=200, json_data=[1, 2])])

    body = await get_json(
        "http://nominatim.test/search",
        session=session,
        params={"q": "Paris"},
        headers={"User-Agent": "Doorstep-tests/1.0"},
    )

    assert body == [1, 2]
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url == "http://nominatim.test/search"
    assert kwargs == {
        "params": {"q": "Paris"},
        "headers": {"User-Agent": "Doorstep-tests/1.0"},
    }


@pytest.mark.asyncio
async def test_get_json_only_accepts_200() -> None:
    session = FakeSession(get_responses=[FakeResponse(status=204)])

    with pytest.raises(ProviderUnavailable) as raised:
        await get_json("http://nominatim.test/search", session=session, service_name="Search")

    assert raised.value.message == "Search error: 204"
    assert raised.value.details["status"] == 204
