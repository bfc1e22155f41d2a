import time

import jwt
import pytest

from config import TestingConfig
from main import create_app
from models import db
from storage import MemStorage


class SQLTestingConfig(TestingConfig):
    STORAGE_BACKEND = 'sql'


BACKENDS = {
    'memory': TestingConfig,
    'sql': SQLTestingConfig,
}


def make_token(sub="provider-uid-1", email="amina@example.com", name="Amina Wanjiru",
               picture=None, secret=TestingConfig.AUTH_TOKEN_SECRET, expires_in=3600, **claims):
    now = int(time.time())
    payload = {"sub": sub, "iat": now, "exp": now + expires_in}
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name
    if picture:
        payload["picture"] = picture
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token=None, **claims):
    return {"Authorization": f"Bearer {token or make_token(**claims)}"}


@pytest.fixture(params=sorted(BACKENDS))
def app(request):
    """Application wired to each storage backend in turn."""
    app = create_app(BACKENDS[request.param])
    yield app
    if request.param == 'sql':
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def memory_app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return bearer()


@pytest.fixture(params=sorted(BACKENDS))
def store(request):
    """A bare store of each backend; the SQL one runs inside an app context."""
    if request.param == 'memory':
        yield MemStorage()
        return
    app = create_app(SQLTestingConfig)
    with app.app_context():
        yield app.extensions['storage']
        db.session.remove()
        db.drop_all()
