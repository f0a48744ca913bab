from core.http.nominatim import NominatimClient
from core.mapping.factory import clear_geocoder_cache, get_geocoder


def test_get_geocoder_is_cached_until_cleared(monkeypatch) -> None:
    monkeypatch.setenv("GEOCODE_RESULT_LIMIT", "3")

    geocoder = get_geocoder()

    assert isinstance(geocoder, NominatimClient)
    assert geocoder.limit == 3
    assert get_geocoder() is geocoder

    monkeypatch.setenv("GEOCODE_RESULT_LIMIT", "7")
    clear_geocoder_cache()

    refreshed = get_geocoder()
    assert refreshed is not geocoder
    assert refreshed.limit == 7
