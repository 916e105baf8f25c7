import os
import sys
import pytest
from flask import g, request_started

# Ensure the project root (containing the `physquiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from physquiz import create_app, db, socketio, get_rounds


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # cheapest cost bcrypt accepts, keeps the suite fast
    BCRYPT_LOG_ROUNDS = 4
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    GRAVITY = 9.8
    TARGET_WALL_DISTANCE_M = 13.0
    TARGET_RADIUS_M = 0.28
    TARGET_MAX_HEIGHT_M = 7.0
    TARGET_ANGLE_MIN_DEG = 30.0
    TARGET_ANGLE_MAX_DEG = 60.0
    NUMERIC_ANSWER_TOLERANCE = 0.01
    LEADERBOARD_DEFAULT_LIMIT = 10
    RANDOM_SEED = 1234
    ALLOWED_ORIGINS = ['http://localhost:5173']


def _forget_cached_login(sender, **extra):
    # requests share the fixture's app context, so g outlives a request;
    # Flask-Login must reload the user from each client's own cookie
    g.pop('_login_user', None)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    request_started.connect(_forget_cached_login, application)
    with application.app_context():
        # Ensure models are imported so tables are created
        import physquiz.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    request_started.disconnect(_forget_cached_login, application)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def rounds(flask_app):
    return get_rounds()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


class FixedClock:
    """Injectable clock that only moves when told to."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture()
def clock():
    from datetime import datetime
    return FixedClock(datetime(2025, 1, 1, 12, 0, 0))
