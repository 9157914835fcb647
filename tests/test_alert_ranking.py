from datetime import datetime, timedelta, timezone

import pytest

from safetravel.alerts.ranking import rank_alerts
from safetravel.alerts.service import AlertService
from safetravel.core.errors import ValidationError
from safetravel.domain.models import Coordinate, DisasterAlert
from safetravel.storage.memory import InMemoryStore

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _alert(alert_id, coordinates=None, hours_ago=0):
    return DisasterAlert(
        id=alert_id,
        title=f"Alert {alert_id}",
        description="",
        severity="medium",
        location="Somewhere",
        source="test",
        published_at=NOW - timedelta(hours=hours_ago),
        coordinates=coordinates,
    )


def test_without_location_returns_first_min_count_in_feed_order():
    alerts = [_alert(str(i)) for i in range(6)]

    ranked = rank_alerts(alerts, None, 4)

    assert [r.alert.id for r in ranked] == ["0", "1", "2", "3"]
    assert all(r.distance_km is None for r in ranked)


def test_without_location_and_fewer_alerts_returns_them_all():
    assert len(rank_alerts([_alert("a"), _alert("b")], None, 4)) == 2


def test_with_location_sorts_nearest_first_and_keeps_every_alert():
    taipei = Coordinate(latitude=25.03, longitude=121.56)
    alerts = [
        _alert("tokyo", Coordinate(latitude=35.68, longitude=139.69)),
        _alert("no-coords"),
        _alert("manila", Coordinate(latitude=14.60, longitude=120.98)),
        _alert("taichung", Coordinate(latitude=24.15, longitude=120.67)),
        _alert("seoul", Coordinate(latitude=37.57, longitude=126.98)),
        _alert("hanoi", Coordinate(latitude=21.03, longitude=105.85)),
    ]

    ranked = rank_alerts(alerts, taipei, 2)

    assert [r.alert.id for r in ranked] == ["taichung", "manila", "seoul", "hanoi", "tokyo", "no-coords"]
    distances = [r.distance_km for r in ranked[:-1]]
    assert distances == sorted(distances)
    assert ranked[-1].distance_km is None


def test_zero_zero_is_a_real_location_not_missing():
    alerts = [_alert("missing"), _alert("null-island", Coordinate(latitude=0.0, longitude=0.0))]

    ranked = rank_alerts(alerts, Coordinate(latitude=10.0, longitude=10.0), 4)

    assert [r.alert.id for r in ranked] == ["null-island", "missing"]
    assert ranked[0].distance_km == pytest.approx(1568.5, abs=5)


def test_equal_distances_keep_input_order():
    spot = Coordinate(latitude=1.0, longitude=1.0)
    alerts = [_alert("first", spot), _alert("second", spot)]
    ranked = rank_alerts(alerts, Coordinate(latitude=0.0, longitude=0.0), 4)
    assert [r.alert.id for r in ranked] == ["first", "second"]


def test_negative_min_count_is_rejected():
    with pytest.raises(ValidationError):
        rank_alerts([_alert("a")], None, -1)


class StubFeed:
    def __init__(self, alerts):
        self.alerts = alerts
        self.calls = 0

    def fetch_alerts(self):
        self.calls += 1
        return list(self.alerts)


def test_alert_service_stores_feed_and_serves_newest_first():
    feed = StubFeed([_alert("old", hours_ago=10), _alert("new", hours_ago=1)])
    store = InMemoryStore()
    service = AlertService(feed, store, min_count=1)

    assert [a.id for a in service.list_alerts()] == ["new", "old"]
    assert [a.id for a in store.get_disaster_alerts()] == ["new", "old"]

    # Without a location the configured min_count applies; an explicit one wins.
    assert [r.alert.id for r in service.ranked()] == ["new"]
    assert len(service.ranked(None, 5)) == 2


def test_alert_at_user_location_has_zero_distance_and_ranks_first():
    origin = Coordinate(latitude=0.0, longitude=0.0)
    alerts = [_alert("missing"), _alert("here", Coordinate(latitude=0.0, longitude=0.0))]

    ranked = rank_alerts(alerts, origin, 4)

    assert [r.alert.id for r in ranked] == ["here", "missing"]
    assert ranked[0].distance_km == 0
    assert ranked[1].distance_km is None
