from __future__ import annotations

import math
from typing import Sequence

from safetravel.core.errors import ValidationError
from safetravel.core.geo import haversine_km
from safetravel.domain.models import Coordinate, DisasterAlert, RankedAlert

"""
Alert ranking.

Without a user location there is nothing to rank by, so the first `min_count` alerts
are returned in feed order with `distance_km=None`.

With a location, every alert is returned nearest first. Alerts without coordinates
sort last (infinite key) and also report `distance_km=None`.
"""


def rank_alerts(
    alerts: Sequence[DisasterAlert],
    user_location: Coordinate | None = None,
    min_count: int = 4,
) -> list[RankedAlert]:
    if min_count < 0:
        raise ValidationError("min_count must be >= 0")

    if user_location is None:
        return [RankedAlert(alert=a, distance_km=None) for a in alerts[:min_count]]

    keyed: list[tuple[float, RankedAlert]] = []
    for alert in alerts:
        if alert.coordinates is None:
            keyed.append((math.inf, RankedAlert(alert=alert, distance_km=None)))
            continue
        d = haversine_km(user_location, alert.coordinates)
        keyed.append((d, RankedAlert(alert=alert, distance_km=d)))

    keyed.sort(key=lambda item: item[0])
    return [ranked for _, ranked in keyed]
