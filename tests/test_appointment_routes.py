import pytest
from sqlmodel import SQLModel, select

from booking_api.api.deps import get_schedule
from booking_api.core.config import ScheduleConfig
from booking_api.main import app
from booking_api.models.appointment import Appointment

TUESDAY = '2025-03-04'
WEDNESDAY = '2025-03-05'


def _booking(**overrides) -> dict:
    body = {
        'name': '  Jane Doe ',
        'email': 'Jane.Doe@Example.com',
        'date': TUESDAY,
        'time': '10:00',
        'message': 'Erstgespräch',
    }
    body.update(overrides)
    return body


def test_get_slots_requires_date(client) -> None:
    response = client.get('/api/appointments')

    assert response.status_code == 400
    assert response.json() == {'error': 'Date is required'}


def test_get_slots_rejects_malformed_date(client) -> None:
    response = client.get('/api/appointments', params={'date': '2099-13-40'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid date format'}


@pytest.mark.parametrize('day', ['2025-03-03', WEDNESDAY, '2025-03-08', '2025-03-09'])
def test_get_slots_returns_empty_list_on_closed_days(client, day: str) -> None:
    response = client.get('/api/appointments', params={'date': day})

    assert response.status_code == 200
    assert response.json() == {'slots': []}


def test_get_slots_marks_booked_times(client, db) -> None:
    db.add(Appointment(name='A', email='a@b.co', date=TUESDAY, time='10:00'))
    db.add(Appointment(name='B', email='b@b.co', date=TUESDAY, time='0000-01-01T15:30:00Z'))
    db.add(Appointment(name='C', email='c@b.co', date='2025-03-06', time='11:00'))
    db.commit()

    response = client.get('/api/appointments', params={'date': TUESDAY})

    assert response.status_code == 200
    slots = response.json()['slots']
    assert len(slots) == 15
    assert slots[0] == {'time': '09:00', 'isBooked': False}
    booked = [s['time'] for s in slots if s['isBooked']]
    assert booked == ['10:00', '15:30']


def test_get_slots_surfaces_malformed_stored_time(client, db) -> None:
    db.add(Appointment(name='A', email='a@b.co', date=TUESDAY, time=''))
    db.commit()

    response = client.get('/api/appointments', params={'date': TUESDAY})

    assert response.status_code == 500
    assert response.json() == {'error': 'Malformed appointment time in storage'}


def test_get_slots_uses_injected_schedule(client) -> None:
    app.dependency_overrides[get_schedule] = lambda: ScheduleConfig(bookable_weekdays=frozenset({2}))

    response = client.get('/api/appointments', params={'date': WEDNESDAY})

    assert response.status_code == 200
    assert len(response.json()['slots']) == 15


def test_book_appointment_stores_normalized_fields(client, db) -> None:
    response = client.post('/api/appointments', json=_booking())

    assert response.status_code == 200
    payload = response.json()
    assert payload['success'] is True
    assert payload['message'] == 'Appointment booked successfully'
    appointment = payload['appointment']
    assert isinstance(appointment['id'], int)
    assert appointment['name'] == 'Jane Doe'
    assert appointment['email'] == 'jane.doe@example.com'
    assert appointment['date'] == TUESDAY
    assert appointment['time'] == '10:00'
    assert appointment['message'] == 'Erstgespräch'

    stored = db.exec(select(Appointment)).one()
    assert stored.id == appointment['id']
    assert stored.name == 'Jane Doe'
    assert stored.email == 'jane.doe@example.com'


def test_book_appointment_omits_missing_message(client) -> None:
    body = _booking()
    del body['message']

    response = client.post('/api/appointments', json=body)

    assert response.status_code == 200
    assert 'message' not in response.json()['appointment']


def test_book_same_slot_twice_conflicts(client) -> None:
    first = client.post('/api/appointments', json=_booking())
    second = client.post('/api/appointments', json=_booking(name='Other', email='other@example.com'))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {'error': 'This time slot is already booked'}


def test_booked_slot_shows_up_in_availability(client) -> None:
    client.post('/api/appointments', json=_booking(time='16:30'))

    slots = client.get('/api/appointments', params={'date': TUESDAY}).json()['slots']

    assert {'time': '16:30', 'isBooked': True} in slots


def test_book_appointment_maps_unique_violation_to_conflict(client, db, monkeypatch: pytest.MonkeyPatch) -> None:
    db.add(Appointment(name='A', email='a@b.co', date=TUESDAY, time='10:00'))
    db.commit()

    async def _no_existing(session, date_str, time_str):
        return None

    monkeypatch.setattr('booking_api.services.appointment_service.find_appointment', _no_existing)

    response = client.post('/api/appointments', json=_booking())

    assert response.status_code == 400
    assert response.json() == {'error': 'This time slot is already booked'}


@pytest.mark.parametrize(
    ('overrides', 'error'),
    [
        ({'name': ''}, 'Name, email, date, and time are required'),
        ({'email': None}, 'Name, email, date, and time are required'),
        ({'time': ''}, 'Name, email, date, and time are required'),
        ({'email': 'foo@bar'}, 'Invalid email format'),
        ({'email': 'a b@c.com'}, 'Invalid email format'),
        ({'date': '2099-13-40'}, 'Invalid date format'),
        ({'date': WEDNESDAY}, 'This day is not available for appointments'),
        ({'time': 'garbage'}, 'Invalid time format'),
        ({'time': '9:00'}, 'Invalid time format'),
        ({'time': '10:00:00'}, 'Invalid time format'),
        ({'time': '25:00'}, 'Invalid time format'),
        ({'time': '14:00'}, 'This time slot is not available'),
        ({'time': '10:15'}, 'This time slot is not available'),
        ({'time': '17:00'}, 'This time slot is not available'),
        # day check wins over the time check
        ({'date': WEDNESDAY, 'time': 'garbage'}, 'This day is not available for appointments'),
        # required-field check wins over the email check
        ({'name': '', 'email': 'foo@bar'}, 'Name, email, date, and time are required'),
        # email check wins over the date check
        ({'email': 'foo@bar', 'date': '2099-13-40'}, 'Invalid email format'),
    ],
)
def test_book_appointment_validation_errors(client, db, overrides: dict, error: str) -> None:
    response = client.post('/api/appointments', json=_booking(**overrides))

    assert response.status_code == 400
    assert response.json() == {'error': error}
    assert db.exec(select(Appointment)).all() == []


def test_book_appointment_rejects_non_object_body(client) -> None:
    response = client.post('/api/appointments', content='not json', headers={'Content-Type': 'application/json'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid request body'}


def test_book_appointment_reports_storage_failure(client, sync_engine) -> None:
    SQLModel.metadata.tables['appointments'].drop(sync_engine)

    response = client.post('/api/appointments', json=_booking())

    assert response.status_code == 500
    assert response.json() == {'error': 'Database error'}


def test_get_slots_reports_storage_failure(client, sync_engine) -> None:
    SQLModel.metadata.tables['appointments'].drop(sync_engine)

    response = client.get('/api/appointments', params={'date': TUESDAY})

    assert response.status_code == 500
    assert response.json() == {'error': 'Database error'}


def test_unsupported_method_returns_405(client) -> None:
    response = client.delete('/api/appointments')

    assert response.status_code == 405
    assert response.json() == {'error': 'Method not allowed'}


def test_preflight_is_answered_with_empty_body(client) -> None:
    response = client.options(
        '/api/appointments',
        headers={'Origin': 'http://localhost:3000', 'Access-Control-Request-Method': 'POST'},
    )

    assert response.status_code == 200
    assert response.content == b''
    assert response.headers['access-control-allow-origin'] == 'http://localhost:3000'
    assert 'POST' in response.headers['access-control-allow-methods']


def test_preflight_from_unlisted_origin_is_answered_with_empty_body(client) -> None:
    response = client.options(
        '/api/contacts',
        headers={'Origin': 'https://other.example', 'Access-Control-Request-Method': 'POST'},
    )

    assert response.status_code == 200
    assert response.content == b''
    assert response.headers['access-control-allow-origin'] == 'http://localhost:3000'


def test_plain_options_request_is_answered(client) -> None:
    response = client.options('/api/appointments')

    assert response.status_code == 200
    assert response.content == b''


def test_error_responses_carry_cors_headers(client) -> None:
    response = client.get('/api/appointments', headers={'Origin': 'http://localhost:3000'})

    assert response.status_code == 400
    assert response.headers['access-control-allow-origin'] == 'http://localhost:3000'


def test_book_appointment_rejects_second_spelling_of_booked_slot(client) -> None:
    first = client.post('/api/appointments', json=_booking(time='10:00'))
    second = client.post('/api/appointments', json=_booking(time='10:00:00'))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {'error': 'Invalid time format'}


def test_rejected_time_leaves_availability_readable(client) -> None:
    client.post('/api/appointments', json=_booking(time='garbage'))

    response = client.get('/api/appointments', params={'date': TUESDAY})

    assert response.status_code == 200
    assert not any(s['isBooked'] for s in response.json()['slots'])
