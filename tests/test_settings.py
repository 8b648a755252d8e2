def test_revenue_defaults_to_zero(client):
    response = client.get('/api/settings/revenue')
    assert response.status_code == 200
    assert response.get_json()['data'] == {'value': 0}


def test_set_revenue(client):
    response = client.put('/api/settings/revenue', json={'value': 100000})
    assert response.status_code == 200
    assert response.get_json()['data'] == {'value': 100000}

    client.put('/api/settings/revenue', json={'value': 125000.5})
    assert client.get('/api/settings/revenue').get_json()['data'] == {'value': 125000.5}


def test_revenue_must_be_non_negative_number(client):
    client.put('/api/settings/revenue', json={'value': 5000})

    response = client.put('/api/settings/revenue', json={'value': -1})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Value must be a non-negative number'

    response = client.put('/api/settings/revenue', json={'value': 'lots'})
    assert response.status_code == 400

    assert client.get('/api/settings/revenue').get_json()['data'] == {'value': 5000}


def test_body_must_be_an_object(client):
    response = client.put('/api/settings/revenue', json=[1, 2])
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Request body must be a JSON object'
