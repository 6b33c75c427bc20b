import pytest
from decimal import Decimal
from spacebook.extensions import db
from spacebook.models import Reservation, Space


def iso(day, hour, minute=0):
    return day.replace(hour=hour, minute=minute).isoformat()


@pytest.fixture
def hall(app):
    space = Space(name='Hall', description='Main hall', price=Decimal('50'), capacity=10, is_active=True)
    db.session.add(space)
    db.session.commit()
    return space


def test_health(client):
    assert client.get('/health').get_json()['status'] == 'ok'


def test_requires_token(client):
    resp = client.get('/api/reservations')
    assert resp.status_code == 401


def test_invalid_token(client):
    resp = client.get('/api/reservations', headers={'Authorization': 'Bearer not-a-jwt'})
    assert resp.status_code == 401


def test_end_to_end_booking_flow(client, users, hall, tomorrow, auth_headers):
    user1, user2, _ = users

    resp = client.post('/api/reservations', json={
        'space_id': hall.id, 'start_time': iso(tomorrow, 10), 'end_time': iso(tomorrow, 12), 'attendees': 5
    }, headers=auth_headers(user1))
    assert resp.status_code == 201
    a = resp.get_json()
    assert a['status'] == 'pending'
    assert a['total_price'] == 100.0

    conflict = {'space_id': hall.id, 'start_time': iso(tomorrow, 11), 'end_time': iso(tomorrow, 13), 'attendees': 2}
    resp = client.post('/api/reservations', json=conflict, headers=auth_headers(user2))
    assert resp.status_code == 409

    resp = client.put(f"/api/reservations/{a['id']}/cancel", headers=auth_headers(user1))
    assert resp.status_code == 200
    assert resp.get_json()['reservation']['status'] == 'canceled'

    resp = client.post('/api/reservations', json=conflict, headers=auth_headers(user2))
    assert resp.status_code == 201


def test_capacity_reported(client, users, hall, tomorrow, auth_headers):
    user1, _, _ = users
    resp = client.post('/api/reservations', json={
        'space_id': hall.id, 'start_time': iso(tomorrow, 10), 'end_time': iso(tomorrow, 11), 'attendees': 11
    }, headers=auth_headers(user1))
    assert resp.status_code == 400
    assert resp.get_json()['capacity'] == 10


def test_missing_fields(client, users, auth_headers):
    user1, _, _ = users
    resp = client.post('/api/reservations', json={'space_id': 1}, headers=auth_headers(user1))
    assert resp.status_code == 400
    assert set(resp.get_json()['fields']) == {'start_time', 'end_time', 'attendees'}


def test_unknown_space_is_404(client, users, tomorrow, auth_headers):
    user1, _, _ = users
    resp = client.post('/api/reservations', json={
        'space_id': 77, 'start_time': iso(tomorrow, 10), 'end_time': iso(tomorrow, 11), 'attendees': 1
    }, headers=auth_headers(user1))
    assert resp.status_code == 404


def test_offset_datetimes_are_normalized_to_utc(client, users, hall, tomorrow, auth_headers):
    user1, _, _ = users
    resp = client.post('/api/reservations', json={
        'space_id': hall.id,
        'start_time': iso(tomorrow, 12) + '+02:00',
        'end_time': iso(tomorrow, 13) + '+02:00',
        'attendees': 1
    }, headers=auth_headers(user1))
    assert resp.status_code == 201
    assert resp.get_json()['start_time'] == iso(tomorrow, 10)


def test_stranger_cannot_view_or_update(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, user2, _ = users
    r = make_reservation(user1, hall, tomorrow.replace(hour=9), tomorrow.replace(hour=10))

    assert client.get(f'/api/reservations/{r.id}', headers=auth_headers(user2)).status_code == 403
    resp = client.put(f'/api/reservations/{r.id}', json={'notes': 'x'}, headers=auth_headers(user2))
    assert resp.status_code == 403
    assert client.get(f'/api/reservations/{r.id}', headers=auth_headers(user1)).status_code == 200


def test_admin_approves(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, admin = users
    r = make_reservation(user1, hall, tomorrow.replace(hour=9), tomorrow.replace(hour=10))

    resp = client.put(f'/api/reservations/{r.id}', json={'status': 'approved'}, headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'approved'
    assert db.session.get(Reservation, r.id).updated_at is not None


def test_upcoming_and_calendar(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, admin = users
    r = make_reservation(user1, hall, tomorrow.replace(hour=9), tomorrow.replace(hour=10))

    upcoming = client.get('/api/reservations/upcoming', headers=auth_headers(user1)).get_json()
    assert [x['id'] for x in upcoming] == [r.id]

    params = {'start_date': iso(tomorrow, 0), 'end_date': iso(tomorrow, 23)}
    assert client.get('/api/reservations/calendar', query_string=params,
                      headers=auth_headers(user1)).status_code == 403
    resp = client.get('/api/reservations/calendar', query_string=params, headers=auth_headers(admin))
    assert [x['id'] for x in resp.get_json()] == [r.id]

    resp = client.get('/api/reservations/calendar', headers=auth_headers(admin))
    assert resp.status_code == 400


def test_space_admin_crud(client, users, auth_headers):
    user1, _, admin = users
    payload = {'name': 'Studio', 'description': 'Open space', 'price': 40, 'capacity': 15,
               'amenities': ['projector'], 'location': 'Floor 3'}

    assert client.post('/api/spaces', json=payload, headers=auth_headers(user1)).status_code == 403

    resp = client.post('/api/spaces', json=payload, headers=auth_headers(admin))
    assert resp.status_code == 201
    space_id = resp.get_json()['id']

    resp = client.put(f'/api/spaces/{space_id}', json={'is_active': False}, headers=auth_headers(admin))
    assert resp.get_json()['is_active'] is False

    assert client.get('/api/spaces', headers=auth_headers(user1)).get_json() == []
    assert len(client.get('/api/spaces', headers=auth_headers(admin)).get_json()) == 1
    assert client.get(f'/api/spaces/{space_id}', headers=auth_headers(user1)).status_code == 403

    resp = client.delete(f'/api/spaces/{space_id}', headers=auth_headers(admin))
    assert resp.get_json()['deleted'] is True
    assert client.get(f'/api/spaces/{space_id}', headers=auth_headers(admin)).status_code == 404


def test_space_delete_soft_disables(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, admin = users
    make_reservation(user1, hall, tomorrow.replace(hour=9), tomorrow.replace(hour=10))

    resp = client.delete(f'/api/spaces/{hall.id}', headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.get_json()['deleted'] is False
    assert db.session.get(Space, hall.id).is_active is False


def test_availability_endpoint(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, _ = users
    r = make_reservation(user1, hall, tomorrow.replace(hour=10), tomorrow.replace(hour=11))
    url = f'/api/spaces/{hall.id}/availability'

    body = {'start_time': iso(tomorrow, 10, 30), 'end_time': iso(tomorrow, 11, 30)}
    assert client.post(url, json=body, headers=auth_headers(user1)).get_json()['is_available'] is False

    body['exclude_reservation_id'] = r.id
    assert client.post(url, json=body, headers=auth_headers(user1)).get_json()['is_available'] is True

    body = {'start_time': iso(tomorrow, 11), 'end_time': iso(tomorrow, 12)}
    assert client.post(url, json=body, headers=auth_headers(user1)).get_json()['is_available'] is True

    assert client.post(url, json={}, headers=auth_headers(user1)).status_code == 400


def test_slots_endpoint(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, _ = users
    make_reservation(user1, hall, tomorrow.replace(hour=8), tomorrow.replace(hour=12))

    resp = client.get(f'/api/spaces/{hall.id}/slots', query_string={'date': tomorrow.date().isoformat()},
                      headers=auth_headers(user1))
    assert resp.status_code == 200
    assert resp.get_json()['slots'] == [{'start': iso(tomorrow, 12), 'end': iso(tomorrow, 20)}]

    resp = client.get(f'/api/spaces/{hall.id}/slots', query_string={'date': 'not-a-date'},
                      headers=auth_headers(user1))
    assert resp.status_code == 400


def test_availability_lists_blocking_reservations(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, _, _ = users
    r = make_reservation(user1, hall, tomorrow.replace(hour=10), tomorrow.replace(hour=11))
    url = f'/api/spaces/{hall.id}/availability'

    body = client.post(url, json={'start_time': iso(tomorrow, 9), 'end_time': iso(tomorrow, 12)},
                       headers=auth_headers(user1)).get_json()
    assert body['conflicting_reservation_ids'] == [r.id]

    body = client.post(url, json={'start_time': iso(tomorrow, 11), 'end_time': iso(tomorrow, 12)},
                       headers=auth_headers(user1)).get_json()
    assert body['conflicting_reservation_ids'] == []


def test_space_reservations_admin_only(client, users, hall, tomorrow, make_reservation, auth_headers):
    user1, user2, admin = users
    early = make_reservation(user1, hall, tomorrow.replace(hour=9), tomorrow.replace(hour=10))
    late = make_reservation(user2, hall, tomorrow.replace(hour=14), tomorrow.replace(hour=15), status='canceled')
    url = f'/api/spaces/{hall.id}/reservations'

    assert client.get(url, headers=auth_headers(user1)).status_code == 403

    resp = client.get(url, headers=auth_headers(admin))
    assert resp.status_code == 200
    assert [x['id'] for x in resp.get_json()] == [late.id, early.id]

    assert client.get('/api/spaces/999/reservations', headers=auth_headers(admin)).status_code == 404


@pytest.mark.parametrize('method, url, as_admin', [
    ('post', '/api/reservations', False),
    ('post', '/api/spaces', True),
    ('post', '/api/spaces/{space_id}/availability', False),
    ('put', '/api/spaces/{space_id}', True),
    ('put', '/api/profile', False),
])
def test_json_array_body_is_rejected(client, users, hall, auth_headers, method, url, as_admin):
    user1, _, admin = users
    headers = auth_headers(admin if as_admin else user1)
    resp = getattr(client, method)(url.format(space_id=hall.id), json=[1, 2], headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Request body must be a JSON object.'


@pytest.mark.parametrize('url', ['/api/register', '/api/auth/login'])
def test_json_array_body_is_rejected_before_auth(client, url):
    resp = client.post(url, json=['user@test.com'])
    assert resp.status_code == 400


def test_calendar_checks_role_before_parameters(client, users, auth_headers):
    user1, _, _ = users
    resp = client.get('/api/reservations/calendar', headers=auth_headers(user1))
    assert resp.status_code == 403
