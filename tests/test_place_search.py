import pytest

from safetravel.core.errors import ProviderError, ValidationError
from safetravel.domain.models import Coordinate
from safetravel.ingestion.base import NearbySearchResponse, RawPlace
from safetravel.search.places import PlaceSearchService
from safetravel.storage.memory import InMemoryStore

SYDNEY = Coordinate(latitude=-33.8688, longitude=151.2093)

ST_VINCENTS = RawPlace(
    place_id="st-vincents",
    name="St Vincent's Hospital",
    latitude=-33.8807,
    longitude=151.2206,
    vicinity="390 Victoria St, Darlinghurst",
    rating=3.1,
)
SYDNEY_HOSPITAL = RawPlace(
    place_id="sydney-hospital",
    name="Sydney Hospital",
    latitude=-33.8678,
    longitude=151.2129,
    formatted_address="8 Macquarie St, Sydney NSW 2000",
    open_now=True,
)


class StubPlacesProvider:
    def __init__(self, response: NearbySearchResponse):
        self.response = response
        self.calls: list[tuple[Coordinate, int, str]] = []

    def nearby_search(self, origin, radius_m, place_type):
        self.calls.append((origin, radius_m, place_type))
        return self.response


def _service(response, store=None):
    provider = StubPlacesProvider(response)
    store = store or InMemoryStore()
    return PlaceSearchService(provider, store), provider, store


def test_sydney_hospitals_sorted_and_search_recorded():
    service, provider, store = _service(NearbySearchResponse(status="OK", results=[ST_VINCENTS, SYDNEY_HOSPITAL]))

    places = service.search(SYDNEY, 5000, "hospital")

    assert [p.place_id for p in places] == ["sydney-hospital", "st-vincents"]
    assert all(p.distance_km >= 0 for p in places)
    assert places[0].distance_km <= places[1].distance_km
    assert provider.calls == [(SYDNEY, 5000, "hospital")]

    searches = store.get_recent_searches(10)
    assert len(searches) == 1
    assert searches[0].radius_m == 5000
    assert searches[0].category == "hospital"
    assert searches[0].origin == SYDNEY


def test_normalization_keeps_unknowns_as_none():
    service, _, _ = _service(NearbySearchResponse(status="OK", results=[ST_VINCENTS, SYDNEY_HOSPITAL]))
    by_id = {p.place_id: p for p in service.search(SYDNEY, 5000, "hospital")}

    assert by_id["st-vincents"].address == "390 Victoria St, Darlinghurst"
    assert by_id["st-vincents"].rating == 3.1
    assert by_id["st-vincents"].is_open is None
    assert by_id["st-vincents"].price_level is None
    assert by_id["sydney-hospital"].address == "8 Macquarie St, Sydney NSW 2000"
    assert by_id["sydney-hospital"].rating is None
    assert by_id["sydney-hospital"].is_open is True


def test_missing_address_uses_placeholder():
    bare = RawPlace(place_id="x", name="Clinic", latitude=-33.87, longitude=151.21)
    service, _, _ = _service(NearbySearchResponse(status="OK", results=[bare]))
    assert service.search(SYDNEY, 1000, "hospital")[0].address == "Address not available"


def test_equal_distances_keep_provider_order():
    twin_a = RawPlace(place_id="a", name="A", latitude=-33.87, longitude=151.21)
    twin_b = RawPlace(place_id="b", name="B", latitude=-33.87, longitude=151.21)
    service, _, _ = _service(NearbySearchResponse(status="OK", results=[twin_a, twin_b]))
    assert [p.place_id for p in service.search(SYDNEY, 1000, "pharmacy")] == ["a", "b"]


def test_zero_results_is_empty_list_and_still_recorded():
    service, _, store = _service(NearbySearchResponse(status="ZERO_RESULTS"))
    assert service.search(SYDNEY, 5000, "pharmacy") == []
    assert len(store.get_recent_searches()) == 1


def test_provider_error_status_raises_and_records_nothing():
    service, _, store = _service(
        NearbySearchResponse(status="REQUEST_DENIED", error_message="The provided API key is invalid.")
    )
    with pytest.raises(ProviderError) as excinfo:
        service.search(SYDNEY, 5000, "hospital")

    assert excinfo.value.status == "REQUEST_DENIED"
    assert "API key is invalid" in excinfo.value.message
    assert store.get_recent_searches() == []
    assert store.get_place_by_place_id("st-vincents") is None


def test_unknown_category_falls_back_to_hospital():
    service, provider, store = _service(NearbySearchResponse(status="OK", results=[ST_VINCENTS]))
    places = service.search(SYDNEY, 5000, "museum")

    assert provider.calls[0][2] == "hospital"
    assert places[0].category == "hospital"
    assert store.get_recent_searches()[0].category == "hospital"


@pytest.mark.parametrize("radius", [0, -10])
def test_non_positive_radius_is_rejected_before_provider_call(radius):
    service, provider, _ = _service(NearbySearchResponse(status="OK"))
    with pytest.raises(ValidationError):
        service.search(SYDNEY, radius, "hospital")
    assert provider.calls == []


def test_missing_origin_is_rejected_before_provider_call():
    service, provider, _ = _service(NearbySearchResponse(status="OK"))
    with pytest.raises(ValidationError, match="Latitude and longitude"):
        service.search(None, 5000, "hospital")
    assert provider.calls == []


def test_results_are_cached_once_per_place_id():
    service, _, store = _service(NearbySearchResponse(status="OK", results=[ST_VINCENTS, SYDNEY_HOSPITAL]))
    service.search(SYDNEY, 5000, "hospital")
    service.search(SYDNEY, 5000, "hospital")

    nearby = store.get_places_by_location(SYDNEY, 5000)
    assert [p.place_id for p in nearby] == ["sydney-hospital", "st-vincents"]
    assert len(store.get_recent_searches()) == 2
