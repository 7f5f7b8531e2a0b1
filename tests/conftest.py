
import pytest
from pizzatracker import create_app
from pizzatracker.storage import get_store


def make_app(tmp_path, backend='local'):
    return create_app({
        'TESTING': True,
        'STORAGE_BACKEND': backend,
        'LOCAL_STORAGE_DIR': str(tmp_path / 'storage'),
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path}/test.db",
    })


@pytest.fixture()
def app(tmp_path):
    return make_app(tmp_path)


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture(params=['local', 'remote'])
def store(request, tmp_path):
    app = make_app(tmp_path, request.param)
    with app.app_context():
        yield get_store()


@pytest.fixture()
def remote_store(tmp_path):
    app = make_app(tmp_path, 'remote')
    with app.app_context():
        yield get_store()


@pytest.fixture()
def remote_client(tmp_path):
    app = make_app(tmp_path, 'remote')
    with app.test_client() as client:
        yield client
