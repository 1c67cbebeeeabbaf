from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import pytest

from apps.lecturas.models import Period
from apps.lecturas.periods import classify_period, to_local

SANTIAGO = ZoneInfo('America/Santiago')


@pytest.mark.parametrize('hour, minute, expected', [
    (4, 59, Period.OTHER),
    (5, 0, Period.MORNING),
    (11, 59, Period.MORNING),
    (12, 0, Period.OTHER),
    (16, 59, Period.OTHER),
    (17, 0, Period.EVENING),
    (21, 59, Period.EVENING),
    (22, 0, Period.OTHER),
    (0, 0, Period.OTHER),
])
def test_classify_period_boundaries(hour, minute, expected):
    assert classify_period(datetime(2025, 6, 1, hour, minute)) == expected


def test_classify_period_uses_local_time():
    # 12:30 UTC son las 08:30 en Santiago (UTC-4 en junio)
    timestamp = datetime(2025, 6, 1, 12, 30, tzinfo=dt_timezone.utc)

    assert classify_period(timestamp, SANTIAGO) == Period.MORNING
    assert classify_period(timestamp, dt_timezone.utc) == Period.OTHER


def test_classify_period_defaults_to_project_time_zone():
    timestamp = datetime(2025, 6, 1, 22, 0, tzinfo=dt_timezone.utc)
    assert classify_period(timestamp) == Period.EVENING


def test_to_local_keeps_naive_datetimes():
    naive = datetime(2025, 6, 1, 8, 0)
    assert to_local(naive) is naive
