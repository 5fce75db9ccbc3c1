import pytest

PRACTITIONER = {
    'name': 'Dr. A',
    'specialty': 'Cardio',
    'gender': 'F',
    'phone': '123',
    'biography': 'bio',
    'facility': 'Hosp',
}


@pytest.fixture
def booking_refs(client, auth_headers, slot_catalog) -> dict[str, int]:
    account = client.post('/auth/register', json={'username': 'pat', 'name': 'Pat', 'password': 'pw'})
    practitioner = client.post('/practitioners', json={**PRACTITIONER, 'slot_ids': [5]}, headers=auth_headers)
    return {
        'account_id': account.json()['result']['account_id'],
        'practitioner_id': practitioner.json()['result']['practitioner_id'],
    }


def _booking_payload(refs: dict[str, int], **overrides) -> dict:
    payload = {
        **refs,
        'date': '2026-01-05',
        'time': '09:00',
        'method': 'insurance',
        'status': 'pending',
        'note': '  first visit  ',
    }
    payload.update(overrides)
    return payload


def _create(client, headers, refs, **overrides) -> int:
    response = client.post('/bookings', json=_booking_payload(refs, **overrides), headers=headers)
    assert response.status_code == 201
    return response.json()['result']['booking_id']


def test_create_and_fetch_booking_with_names(client, auth_headers, booking_refs) -> None:
    booking_id = _create(client, auth_headers, booking_refs)

    response = client.get('/bookings', params={'booking_id': booking_id}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['result'] == {
        'booking_id': booking_id,
        'account_id': booking_refs['account_id'],
        'account_name': 'Pat',
        'practitioner_id': booking_refs['practitioner_id'],
        'practitioner_name': 'Dr. A',
        'facility': 'Hosp',
        'date': '2026-01-05',
        'time': '09:00:00',
        'method': 'insurance',
        'status': 'pending',
        'note': 'first visit',
    }


def test_list_bookings(client, auth_headers, booking_refs) -> None:
    _create(client, auth_headers, booking_refs, date='2026-01-07')
    _create(client, auth_headers, booking_refs, date='2026-01-06')

    response = client.get('/bookings', headers=auth_headers)

    assert [booking['date'] for booking in response.json()['result']] == ['2026-01-06', '2026-01-07']


def test_create_rejects_missing_fields(client, auth_headers, booking_refs) -> None:
    response = client.post('/bookings', json=_booking_payload(booking_refs, method=None), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == 'method is required.'


def test_create_rejects_unknown_practitioner(client, auth_headers, booking_refs) -> None:
    response = client.post('/bookings', json=_booking_payload(booking_refs, practitioner_id=999), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == 'Unknown practitioner id: 999.'


def test_update_booking(client, auth_headers, booking_refs) -> None:
    booking_id = _create(client, auth_headers, booking_refs)

    response = client.put(
        '/bookings',
        params={'booking_id': booking_id},
        json=_booking_payload(booking_refs, time='10:30', note=None),
        headers=auth_headers,
    )

    assert response.status_code == 200
    fetched = client.get('/bookings', params={'booking_id': booking_id}, headers=auth_headers).json()['result']
    assert fetched['time'] == '10:30:00'
    assert fetched['note'] is None


def test_change_status(client, auth_headers, booking_refs) -> None:
    booking_id = _create(client, auth_headers, booking_refs)

    response = client.put('/bookings/status', params={'booking_id': booking_id, 'status': 'confirmed'}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['message'] == 'Booking status updated successfully.'
    fetched = client.get('/bookings', params={'booking_id': booking_id}, headers=auth_headers).json()['result']
    assert fetched['status'] == 'confirmed'


def test_change_status_requires_status(client, auth_headers, booking_refs) -> None:
    booking_id = _create(client, auth_headers, booking_refs)

    response = client.put('/bookings/status', params={'booking_id': booking_id}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == 'status is required.'


def test_change_status_of_unknown_booking(client, auth_headers) -> None:
    response = client.put('/bookings/status', params={'booking_id': 77, 'status': 'done'}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()['message'] == 'Booking not found.'


def test_delete_booking(client, auth_headers, booking_refs) -> None:
    booking_id = _create(client, auth_headers, booking_refs)

    response = client.delete('/bookings', params={'booking_id': booking_id}, headers=auth_headers)

    assert response.status_code == 200
    assert client.get('/bookings', params={'booking_id': booking_id}, headers=auth_headers).status_code == 404


def test_practitioner_with_bookings_cannot_be_deleted(client, auth_headers, booking_refs) -> None:
    _create(client, auth_headers, booking_refs)

    response = client.delete(
        '/practitioners',
        params={'practitioner_id': booking_refs['practitioner_id']},
        headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json()['message'] == 'Practitioner has bookings and cannot be deleted.'
