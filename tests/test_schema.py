from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

from apps.lecturas.models import Period
from apps.lecturas.schema import detect_schema_version, normalize_reading_document, parse_timestamp

SANTIAGO = ZoneInfo('America/Santiago')
MORNING = datetime(2025, 6, 1, 8, 0, tzinfo=SANTIAGO)
EVENING = datetime(2025, 6, 1, 19, 0, tzinfo=SANTIAGO)


def test_detect_schema_version():
    assert detect_schema_version({'temperature': 4.0}) == 1
    assert detect_schema_version({'minTemperature': 2.0, 'maxTemperature': 4.0}) == 2
    assert detect_schema_version({
        'minTemperature': 2.0, 'period': 'morning', 'averageTemperature': 2.0,
    }) == 3


def test_current_document_is_kept_as_is():
    reading = normalize_reading_document('R1', {
        'ownerUserId': 'ana',
        'timestamp': MORNING,
        'period': 'evening',
        'minTemperature': 2.0,
        'maxTemperature': 4.0,
        'averageTemperature': 3.0,
        'addedByUserId': 'beto',
        'addedByUserName': 'Beto',
    })

    assert reading.id == 'R1'
    assert reading.owner_user_id == 'ana'
    assert reading.timestamp == MORNING
    # el periodo guardado manda aunque la hora diga otra cosa
    assert reading.period == 'evening'
    assert reading.average_temperature == 3.0
    assert reading.added_by_user_id == 'beto'


def test_single_temperature_document():
    reading = normalize_reading_document('R1', {'temperature': 4.26, 'timestamp': MORNING}, 'ana')

    assert reading.owner_user_id == 'ana'
    assert reading.average_temperature == 4.3
    assert reading.min_temperature is None
    assert reading.max_temperature is None
    assert reading.period == Period.MORNING


def test_document_without_average_or_period():
    reading = normalize_reading_document('R1', {
        'timestamp': EVENING,
        'minTemperature': 2.0,
        'maxTemperature': '5.0',
    })

    assert reading.max_temperature == 5.0
    assert reading.average_temperature == 3.5
    assert reading.period == Period.EVENING


def test_unknown_period_becomes_other(app_caplog):
    reading = normalize_reading_document('R1', {
        'timestamp': MORNING,
        'period': 'noon',
        'minTemperature': 2.0,
        'averageTemperature': 2.0,
    })

    assert reading.period == Period.OTHER
    assert 'periodo desconocido' in app_caplog.text


def test_missing_timestamp_is_tolerated():
    reading = normalize_reading_document('R1', {'minTemperature': 2.0, 'maxTemperature': 3.0})

    assert reading.timestamp is None
    assert reading.period == Period.OTHER


def test_legacy_date_field():
    reading = normalize_reading_document('R1', {
        'date': '2025-06-01T08:00:00-04:00',
        'minTemperature': 2.0,
        'maxTemperature': 3.0,
    })

    assert reading.timestamp == MORNING


def test_parse_timestamp():
    assert parse_timestamp(MORNING) is MORNING
    assert parse_timestamp({'seconds': 0, 'nanoseconds': 0}) == datetime(1970, 1, 1, tzinfo=dt_timezone.utc)
    assert parse_timestamp('2025-06-01').date().isoformat() == '2025-06-01'
    assert parse_timestamp('no es fecha') is None
    assert parse_timestamp('2025-13-45') is None
    assert parse_timestamp(12345) is None
    assert parse_timestamp(None) is None
