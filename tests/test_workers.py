def test_create_worker_applies_defaults(client):
    response = client.post('/api/workers', json={'name': '  Ravi Kumar ', 'phone': '9876543210'})
    assert response.status_code == 201

    body = response.get_json()
    assert body['success'] is True
    worker = body['data']
    assert worker['name'] == 'Ravi Kumar'
    assert worker['role'] == 'Loom Operator'
    assert worker['power_loom_number'] == 1
    assert worker['is_active'] is True
    assert worker['hire_date'] is not None


def test_create_worker_reports_every_missing_field(client):
    response = client.post('/api/workers', json={})
    assert response.status_code == 400

    body = response.get_json()
    assert body['success'] is False
    assert body['error'] == 'Validation Error'
    assert body['message'] == 'name is required, phone is required'


def test_create_worker_rejects_bad_fields(client):
    response = client.post('/api/workers', json={
        'name': 'Ravi', 'phone': '12-34', 'role': 'Weaver', 'power_loom_number': 4
    })
    assert response.status_code == 400

    message = response.get_json()['message']
    assert 'Please enter a valid phone number' in message
    assert 'Please select a valid role' in message
    assert 'Power loom number must be 1, 2 or 3' in message


def test_name_length_is_bounded(client):
    response = client.post('/api/workers', json={'name': 'x' * 101, 'phone': '9876543210'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Worker name cannot exceed 100 characters'


def test_list_returns_active_workers_sorted_by_name(client, create_worker):
    create_worker(name='Suresh')
    anil = create_worker(name='Anil')
    create_worker(name='Mohan', role='Mechanic')

    client.delete(f"/api/workers/{anil['id']}")

    body = client.get('/api/workers').get_json()
    assert body['count'] == 2
    assert [w['name'] for w in body['data']] == ['Mohan', 'Suresh']

    mechanics = client.get('/api/workers?role=Mechanic').get_json()
    assert [w['name'] for w in mechanics['data']] == ['Mohan']


def test_filter_by_loom(client, create_worker):
    create_worker(name='Loom One', power_loom_number=1)
    create_worker(name='Loom Three', power_loom_number=3)

    body = client.get('/api/workers?loom=3').get_json()
    assert [w['name'] for w in body['data']] == ['Loom Three']

    response = client.get('/api/workers?loom=three')
    assert response.status_code == 400


def test_update_worker_in_place(client, create_worker):
    worker = create_worker()

    response = client.put(f"/api/workers/{worker['id']}", json={'power_loom_number': 3, 'notes': 'Night shift'})
    assert response.status_code == 200
    updated = response.get_json()['data']
    assert updated['power_loom_number'] == 3
    assert updated['notes'] == 'Night shift'
    assert updated['name'] == worker['name']


def test_update_worker_validates_supplied_fields(client, create_worker):
    worker = create_worker()

    response = client.put(f"/api/workers/{worker['id']}", json={'name': None})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Worker name is required'

    response = client.put(f"/api/workers/{worker['id']}", json={'fixed_salary': -10})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Salary cannot be negative'


def test_delete_is_soft(client, create_worker):
    worker = create_worker()

    response = client.delete(f"/api/workers/{worker['id']}")
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'message': 'Worker deleted successfully'}

    fetched = client.get(f"/api/workers/{worker['id']}").get_json()['data']
    assert fetched['is_active'] is False


def test_missing_worker_is_404(client):
    for response in (client.get('/api/workers/999'),
                     client.put('/api/workers/999', json={'name': 'X'}),
                     client.delete('/api/workers/999')):
        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Worker not found'}


def test_field_messages_are_translated(client, monkeypatch):
    monkeypatch.setattr('workpay.errors._', lambda text, **variables: (text % variables if variables else text).upper())

    response = client.post('/api/workers', json={'name': 'Ravi', 'phone': '12-34'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'PLEASE ENTER A VALID PHONE NUMBER'

    response = client.post('/api/workers', json={'phone': '9876543210'})
    assert response.get_json()['message'] == 'NAME IS REQUIRED'
