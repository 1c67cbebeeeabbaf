from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from google.api_core.exceptions import ServiceUnavailable

from apps.lecturas.archiver import archive_reading, build_deleted_record
from apps.lecturas.exceptions import ReadingNotFound, ReadingValidationError
from apps.lecturas.models import UNKNOWN_ADDER_ID
from apps.lecturas.services import month_bounds
from services.firebase_service import SERVER_TIMESTAMP, fetch_deleted_readings, fetch_readings_in_range

SANTIAGO = ZoneInfo('America/Santiago')

DELETION_FIELDS = {'deletedAt', 'originalLogId', 'deletedByUserId', 'deletedByUserName'}


def current_document(**overrides):
    document = {
        'ownerUserId': 'U1',
        'timestamp': datetime(2025, 6, 1, 8, 30, tzinfo=SANTIAGO),
        'period': 'morning',
        'minTemperature': 2.0,
        'maxTemperature': 4.0,
        'averageTemperature': 3.0,
        'addedByUserId': 'U1',
        'addedByUserName': 'Ana',
        'createdAt': datetime(2025, 6, 1, 8, 31, tzinfo=SANTIAGO),
    }
    document.update(overrides)
    return document


def test_archive_moves_reading(firestore_client):
    firestore_client.add('U1', current_document(), doc_id='R1')
    firestore_client.add('U1', current_document(period='evening'), doc_id='R2')

    archive_reading('U1', 'R1', 'U2', 'Beto')

    start, end = month_bounds(2025, 6)
    assert [r.id for r in fetch_readings_in_range('U1', start, end)] == ['R2']

    deleted = fetch_deleted_readings('U1')
    assert len(deleted) == 1
    assert deleted[0]['originalLogId'] == 'R1'
    assert deleted[0]['deletedByUserId'] == 'U2'
    assert deleted[0]['deletedByUserName'] == 'Beto'


def test_archive_preserves_every_field(firestore_client):
    original = current_document(notes='puerta mal cerrada')
    firestore_client.add('U1', original, doc_id='R1')

    deleted_id = archive_reading('U1', 'R1', 'U1', 'Ana')

    record = firestore_client.deleted('U1')[deleted_id]
    assert set(record) == set(original) | DELETION_FIELDS
    assert {key: record[key] for key in original} == original
    assert isinstance(record['deletedAt'], datetime)
    assert 'R1' not in firestore_client.readings('U1')


def test_archive_defaults_missing_fields_of_old_documents(firestore_client):
    firestore_client.add('U1', {
        'date': '2025-06-01T08:00:00-04:00',
        'temperature': 4.0,
    }, doc_id='R1')

    deleted_id = archive_reading('U1', 'R1', 'U1')

    record = firestore_client.deleted('U1')[deleted_id]
    assert record['addedByUserId'] == UNKNOWN_ADDER_ID
    assert record['addedByUserName'] is None
    assert isinstance(record['createdAt'], datetime)
    assert record['ownerUserId'] == 'U1'
    assert record['timestamp'] == datetime(2025, 6, 1, 8, 0, tzinfo=SANTIAGO)
    assert record['period'] == 'morning'
    assert record['averageTemperature'] == 4.0
    assert record['temperature'] == 4.0
    assert 'date' in record
    assert record['deletedByUserName'] is None


def test_archive_matches_the_listed_reading(firestore_client):
    firestore_client.add('U1', {
        'timestamp': '2025-06-01T08:00:00-04:00',
        'minTemperature': 2.0,
        'maxTemperature': 4.0,
    }, doc_id='R1')

    deleted_id = archive_reading('U1', 'R1', 'U1', 'Ana')

    record = firestore_client.deleted('U1')[deleted_id]
    assert record['timestamp'] == datetime(2025, 6, 1, 8, 0, tzinfo=SANTIAGO)
    assert record['period'] == 'morning'
    assert record['averageTemperature'] == 3.0
    assert record['minTemperature'] == 2.0
    assert record['maxTemperature'] == 4.0


def test_archive_is_atomic(firestore_client):
    firestore_client.add('U1', current_document(), doc_id='R1')
    firestore_client.fail_commit = True

    with pytest.raises(ServiceUnavailable):
        archive_reading('U1', 'R1', 'U1', 'Ana')

    assert firestore_client.readings('U1')['R1']['averageTemperature'] == 3.0
    assert firestore_client.deleted('U1') == {}


def test_archive_missing_reading(firestore_client):
    with pytest.raises(ReadingNotFound):
        archive_reading('U1', 'no-existe', 'U1')

    assert firestore_client.commits == 0
    assert firestore_client.deleted('U1') == {}


@pytest.mark.parametrize('owner_id, reading_id, user_id', [
    ('', 'R1', 'U1'),
    ('U1', '', 'U1'),
    ('U1', 'R1', None),
])
def test_archive_requires_ids(firestore_client, owner_id, reading_id, user_id):
    firestore_client.add('U1', current_document(), doc_id='R1')

    with pytest.raises(ReadingValidationError):
        archive_reading(owner_id, reading_id, user_id)

    assert firestore_client.commits == 0
    assert 'R1' in firestore_client.readings('U1')


def test_build_deleted_record_uses_server_time():
    record = build_deleted_record('U1', 'R1', {'addedByUserId': 42}, 'U2', None)

    assert record['deletedAt'] is SERVER_TIMESTAMP
    assert record['createdAt'] is SERVER_TIMESTAMP
    assert record['addedByUserId'] == UNKNOWN_ADDER_ID
    assert record['originalLogId'] == 'R1'


def test_deleted_readings_newest_first(firestore_client):
    for doc_id, day in (('D1', 1), ('D2', 3), ('D3', 2)):
        firestore_client.add('U1', {
            'originalLogId': doc_id,
            'deletedAt': datetime(2025, 6, day, tzinfo=SANTIAGO),
        }, doc_id=doc_id, collection='deletedTemperatures')

    assert [d['id'] for d in fetch_deleted_readings('U1')] == ['D2', 'D3', 'D1']
