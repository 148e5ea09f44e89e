from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from pydantic import ValidationError

from nexsched.core.errors import ConflictError, InvalidTransitionError, NotFoundError
from nexsched.core.errors import ValidationError as SchedulingValidationError
from nexsched.database import get_db
from nexsched.main import app
from nexsched.routes.appointment_routes import CreateAppointmentRequest
from nexsched.routes.dependencies import get_booking_locks, to_http_exception
from nexsched.services.appointment_service import BookingLocks


@pytest.fixture
def client(session_factory, clinic_settings, booking_locks, monkeypatch: pytest.MonkeyPatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(app.state, 'clinic_settings', clinic_settings, raising=False)
    monkeypatch.setattr(app.state, 'booking_locks', booking_locks)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _book(client: TestClient, start_time: str, patient_id: str = 'user-1'):
    return client.post(
        '/appointments',
        json={
            'patient_id': patient_id,
            'dentist_id': 'dentist-1',
            'service_id': 'service-2',
            'start_time': start_time,
        },
    )


def test_create_appointment_request_normalizes_fields() -> None:
    request = CreateAppointmentRequest(
        patient_id=' user-1 ',
        dentist_id=' dentist-1',
        service_id='service-2 ',
        start_time='2026-01-05T09:00:00',
        notes='   ',
    )

    assert request.patient_id == 'user-1'
    assert request.dentist_id == 'dentist-1'
    assert request.service_id == 'service-2'
    assert request.notes is None


def test_create_appointment_request_converts_aware_time_to_clinic_time() -> None:
    request = CreateAppointmentRequest(
        patient_id='user-1',
        dentist_id='dentist-1',
        service_id='service-2',
        start_time='2026-01-05T01:00:00+00:00',
    )

    assert request.start_time.tzinfo is None
    assert request.start_time.isoformat() == '2026-01-05T09:00:00'


def test_create_appointment_request_rejects_long_notes() -> None:
    with pytest.raises(ValidationError):
        CreateAppointmentRequest(
            patient_id='user-1',
            dentist_id='dentist-1',
            service_id='service-2',
            start_time='2026-01-05T09:00:00',
            notes='x' * 601,
        )


@pytest.mark.parametrize(
    ('error', 'status_code'),
    [
        (NotFoundError('missing'), 404),
        (ConflictError('taken'), 409),
        (InvalidTransitionError('terminal'), 409),
        (SchedulingValidationError('bad'), 400),
    ],
)
def test_to_http_exception_maps_error_kinds(error, status_code: int) -> None:
    exception = to_http_exception(error)

    assert isinstance(exception, HTTPException)
    assert exception.status_code == status_code
    assert exception.detail == error.detail


def test_catalog_and_settings_endpoints(client: TestClient) -> None:
    services = client.get('/catalog/services').json()
    dentists = client.get('/catalog/dentists').json()
    settings = client.get('/clinic/settings').json()

    assert {'id': 'service-2', 'name': 'Teeth Cleaning', 'duration_minutes': 60} in services
    assert [dentist['id'] for dentist in dentists] == ['dentist-1', 'dentist-2', 'dentist-3']
    assert settings['slot_duration_minutes'] == 30
    assert settings['holidays'] == ['2026-01-07']
    assert len(settings['working_hours']) == 7


def test_book_then_slot_becomes_unavailable(client: TestClient) -> None:
    response = _book(client, '2026-01-05T10:00:00')

    assert response.status_code == 201
    body = response.json()
    assert body['status'] == 'scheduled'
    assert body['end_time'] == '2026-01-05T11:00:00'
    assert body['duration_minutes'] == 60

    slots = client.get(
        '/availability/slots',
        params={'date': '2026-01-05', 'dentist_id': 'dentist-1', 'service_id': 'service-2'},
    ).json()
    unavailable = [slot['time'] for slot in slots if not slot['is_available']]
    assert unavailable == ['2026-01-05T09:30:00', '2026-01-05T10:00:00', '2026-01-05T10:30:00']

    available_only = client.get(
        '/availability/slots',
        params={
            'date': '2026-01-05',
            'dentist_id': 'dentist-1',
            'service_id': 'service-2',
            'available_only': 'true',
        },
    ).json()
    assert len(available_only) == 12


def test_double_booking_returns_conflict(client: TestClient) -> None:
    assert _book(client, '2026-01-05T10:00:00').status_code == 201

    response = _book(client, '2026-01-05T10:30:00', patient_id='user-3')

    assert response.status_code == 409
    assert response.json()['detail'] == 'This time is already booked.'


def test_booking_on_holiday_returns_bad_request(client: TestClient) -> None:
    response = _book(client, '2026-01-07T10:00:00')

    assert response.status_code == 400


def test_availability_for_unknown_service_returns_not_found(client: TestClient) -> None:
    response = client.get(
        '/availability/slots',
        params={'date': '2026-01-05', 'dentist_id': 'dentist-1', 'service_id': 'service-404'},
    )

    assert response.status_code == 404


def test_cancel_and_status_endpoints(client: TestClient) -> None:
    appointment_id = _book(client, '2026-01-05T09:00:00').json()['id']

    cancelled = client.post(f'/appointments/{appointment_id}/cancel')
    cancelled_again = client.post(f'/appointments/{appointment_id}/cancel')
    missing = client.post('/appointments/999/cancel')
    completed = client.patch(f'/appointments/{appointment_id}/status', json={'status': 'completed'})
    invalid = client.patch(f'/appointments/{appointment_id}/status', json={'status': 'rescheduled'})

    assert cancelled.json()['status'] == 'cancelled'
    assert cancelled_again.status_code == 409
    assert missing.status_code == 404
    assert completed.json()['status'] == 'completed'
    assert invalid.status_code == 422


def test_list_endpoints_sort_by_start_time(client: TestClient) -> None:
    _book(client, '2026-01-05T13:00:00')
    _book(client, '2026-01-05T09:00:00', patient_id='user-3')
    _book(client, '2026-01-05T11:00:00')

    all_appointments = client.get('/appointments').json()
    patient_appointments = client.get('/appointments/patients/user-1').json()

    assert [item['start_time'] for item in all_appointments] == [
        '2026-01-05T09:00:00',
        '2026-01-05T11:00:00',
        '2026-01-05T13:00:00',
    ]
    assert [item['start_time'] for item in patient_appointments] == [
        '2026-01-05T11:00:00',
        '2026-01-05T13:00:00',
    ]


def test_report_summary_endpoint(client: TestClient) -> None:
    first_id = _book(client, '2026-01-05T09:00:00').json()['id']
    second_id = _book(client, '2026-01-05T11:00:00').json()['id']
    client.patch(f'/appointments/{first_id}/status', json={'status': 'completed'})
    client.patch(f'/appointments/{second_id}/status', json={'status': 'no-show'})

    report = client.get('/reports/summary').json()

    assert report['total_appointments'] == 2
    assert report['no_show_rate'] == 50.0
    assert report['attendance_rate'] == 50.0
    assert report['appointments_by_service']['Teeth Cleaning'] == 2
    assert report['busiest_days'] == {'Monday': 2}


def test_booking_locks_exist_before_first_request() -> None:
    first_request = SimpleNamespace(app=app)
    second_request = SimpleNamespace(app=app)

    locks = get_booking_locks(first_request)

    assert isinstance(locks, BookingLocks)
    assert get_booking_locks(second_request) is locks
