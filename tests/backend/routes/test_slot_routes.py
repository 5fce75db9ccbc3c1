from sqlalchemy import func, select

from backend.models.practitioner import practitioner_slots

PRACTITIONER = {
    'name': 'A',
    'specialty': 'Cardio',
    'gender': 'F',
    'phone': '123',
    'biography': 'bio',
    'facility': 'Hosp',
}


def test_create_and_fetch_slot(client, auth_headers) -> None:
    response = client.post(
        '/slots',
        json={'day': 'tuesday', 'start': '08:30', 'end': '09:15'},
        headers=auth_headers,
    )

    assert response.status_code == 201
    slot_id = response.json()['result']['slot_id']

    fetched = client.get('/slots', params={'slot_id': slot_id}, headers=auth_headers)
    assert fetched.json()['result'] == {'slot_id': slot_id, 'day': 'Tuesday', 'start': '08:30:00', 'end': '09:15:00'}


def test_list_slots(client, auth_headers, slot_catalog) -> None:
    response = client.get('/slots', headers=auth_headers)

    assert response.status_code == 200
    assert [slot['slot_id'] for slot in response.json()['result']] == [5, 7, 9]


def test_create_rejects_unknown_weekday(client, auth_headers) -> None:
    response = client.post('/slots', json={'day': 'Someday', 'start': '08:30', 'end': '09:15'}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'].startswith('day must be one of')


def test_create_rejects_end_before_start(client, auth_headers) -> None:
    response = client.post('/slots', json={'day': 'Monday', 'start': '10:00', 'end': '09:00'}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == 'end must be later than start.'


def test_create_requires_every_field(client, auth_headers) -> None:
    response = client.post('/slots', json={'day': 'Monday', 'start': '10:00'}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()['message'] == 'end is required.'


def test_update_slot(client, auth_headers, slot_catalog) -> None:
    response = client.put(
        '/slots',
        params={'slot_id': 5},
        json={'day': 'Thursday', 'start': '11:00', 'end': '12:00'},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()['result'] == {'slot_id': 5, 'day': 'Thursday', 'start': '11:00:00', 'end': '12:00:00'}


def test_update_unknown_slot_returns_not_found(client, auth_headers) -> None:
    response = client.put(
        '/slots',
        params={'slot_id': 404},
        json={'day': 'Thursday', 'start': '11:00', 'end': '12:00'},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()['message'] == 'Slot not found.'


def test_delete_slot_removes_it_from_practitioner_availability(
    client,
    auth_headers,
    slot_catalog,
    session_factory,
) -> None:
    created = client.post('/practitioners', json={**PRACTITIONER, 'slot_ids': [5, 7]}, headers=auth_headers)
    practitioner_id = created.json()['result']['practitioner_id']

    response = client.delete('/slots', params={'slot_id': 5}, headers=auth_headers)

    assert response.status_code == 200
    fetched = client.get('/practitioners', params={'practitioner_id': practitioner_id}, headers=auth_headers)
    assert [slot['slot_id'] for slot in fetched.json()['result']['slots']] == [7]

    db = session_factory()
    try:
        remaining = db.scalar(
            select(func.count()).select_from(practitioner_slots).where(practitioner_slots.c.slot_id == 5)
        )
    finally:
        db.close()
    assert remaining == 0


def test_delete_unknown_slot_returns_not_found(client, auth_headers) -> None:
    response = client.delete('/slots', params={'slot_id': 404}, headers=auth_headers)

    assert response.status_code == 404


def test_slots_require_token(client) -> None:
    response = client.get('/slots')

    assert response.status_code == 401
