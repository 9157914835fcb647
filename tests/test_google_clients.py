import httpx
import pytest

from safetravel.config.settings import get_settings
from safetravel.core.errors import ConfigurationError, ProviderError
from safetravel.domain.models import Coordinate
from safetravel.ingestion.google_geocoding import GoogleGeocodingClient
from safetravel.ingestion.google_places import GooglePlacesClient

ORIGIN = Coordinate(latitude=-33.8688, longitude=151.2093)


def _settings(api_key="test-key"):
    settings = get_settings()
    google = settings.providers.google.model_copy(update={"api_key": api_key})
    providers = settings.providers.model_copy(update={"google": google})
    return settings.model_copy(update={"providers": providers})


def test_nearby_search_maps_google_wire_format(monkeypatch):
    seen = {}

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen["url"] = url
        seen["params"] = params
        return {
            "status": "OK",
            "results": [
                {
                    "place_id": "abc",
                    "name": "Sydney Hospital",
                    "vicinity": "8 Macquarie St, Sydney",
                    "geometry": {"location": {"lat": -33.8678, "lng": 151.2129}},
                    "rating": 4.1,
                    "price_level": 0,
                    "opening_hours": {"open_now": False},
                },
                {"place_id": "no-geometry", "name": "Broken"},
            ],
        }

    monkeypatch.setattr("safetravel.ingestion.google_places.get_json", fake_get_json)

    response = GooglePlacesClient(_settings()).nearby_search(ORIGIN, 5000, "hospital")

    assert seen["params"] == {
        "location": "-33.8688,151.2093",
        "radius": 5000,
        "type": "hospital",
        "key": "test-key",
    }
    assert response.status == "OK"
    assert len(response.results) == 1
    place = response.results[0]
    assert place.place_id == "abc"
    assert place.vicinity == "8 Macquarie St, Sydney"
    assert place.latitude == -33.8678
    # Zero is a real price level, not "unknown".
    assert place.price_level == 0
    assert place.open_now is False


def test_missing_api_key_raises_before_network(monkeypatch):
    def fail(*_a, **_k):
        raise AssertionError("network must not be called")

    monkeypatch.setattr("safetravel.ingestion.google_places.get_json", fail)
    with pytest.raises(ConfigurationError):
        GooglePlacesClient(_settings(api_key=None)).nearby_search(ORIGIN, 5000, "hospital")


def test_transport_error_becomes_provider_error(monkeypatch):
    def boom(url, **_kwargs):
        raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

    monkeypatch.setattr("safetravel.ingestion.google_places.get_json", boom)
    with pytest.raises(ProviderError) as excinfo:
        GooglePlacesClient(_settings()).nearby_search(ORIGIN, 5000, "hospital")
    assert excinfo.value.provider == "google"
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_http_status_error_carries_status(monkeypatch):
    def forbidden(url, **_kwargs):
        request = httpx.Request("GET", url)
        response = httpx.Response(403, request=request)
        raise httpx.HTTPStatusError("403", request=request, response=response)

    monkeypatch.setattr("safetravel.ingestion.google_places.get_json", forbidden)
    with pytest.raises(ProviderError) as excinfo:
        GoogleGeocodingClient(_settings()).geocode("Sydney Opera House")
    assert excinfo.value.status == "403"


def test_geocode_client_passes_status_through(monkeypatch):
    monkeypatch.setattr(
        "safetravel.ingestion.google_places.get_json",
        lambda *_a, **_k: {"status": "ZERO_RESULTS", "results": []},
    )
    response = GoogleGeocodingClient(_settings()).geocode("nowhere at all")
    assert response.status == "ZERO_RESULTS"
    assert response.results == []


def test_geocode_client_parses_first_result(monkeypatch):
    monkeypatch.setattr(
        "safetravel.ingestion.google_places.get_json",
        lambda *_a, **_k: {
            "status": "OK",
            "results": [
                {
                    "formatted_address": "Bennelong Point, Sydney NSW 2000, Australia",
                    "geometry": {"location": {"lat": -33.8568, "lng": 151.2153}},
                }
            ],
        },
    )
    response = GoogleGeocodingClient(_settings()).geocode("Sydney Opera House")
    assert response.results[0].formatted_address.startswith("Bennelong Point")
    assert response.results[0].longitude == 151.2153
