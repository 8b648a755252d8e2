import pytest
from workpay import create_app
from workpay.models import db


def make_app(**overrides):
    config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'LOG_LEVEL': 'WARNING',
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app_factory():
    apps = []

    def _make(**overrides):
        app = make_app(**overrides)
        apps.append(app)
        return app

    yield _make

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def create_worker(client):
    def _create(name='Ravi Kumar', phone='+91 98765 43210', **fields):
        response = client.post('/api/workers', json={'name': name, 'phone': phone, **fields})
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']
    return _create


@pytest.fixture
def create_product(client):
    def _create(name='Cotton Saree', worker_salary=5, **fields):
        response = client.post('/api/products', json={'name': name, 'worker_salary': worker_salary, **fields})
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']
    return _create


@pytest.fixture
def record_loom(client):
    def _record(worker_id, day, machines, loom_number=1):
        response = client.post('/api/powerloom-production', json={
            'loom_number': loom_number,
            'date': day,
            'worker_id': worker_id,
            'machines': [
                {'index': index, 'product_id': product_id, 'quantity': quantity}
                for index, product_id, quantity in machines
            ]
        })
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']
    return _record
