import os
import sys
import pytest

# Ensure the backend root (containing the `tetris_duel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tetris_duel import create_app, get_game_server, socketio
from tetris_duel.models import COLS, ROWS, Cell, EMPTY


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SOCKETIO_NAMESPACE = '/ws'
    CORS_ALLOWED_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    GAME_CODE_LENGTH = 6
    RANDOM_SEED = 1234


class FakeConnection:
    """Records frames pushed to a player instead of emitting them."""

    def __init__(self, handle):
        self.handle = handle
        self.sent = []

    def send(self, payload):
        self.sent.append(payload)

    def types(self):
        return [p['type'] for p in self.sent]

    def last(self, msg_type):
        for payload in reversed(self.sent):
            if payload['type'] == msg_type:
                return payload
        return None


def board_from_rows(rows_from_bottom):
    """Build a board whose bottom rows are described by strings.

    '#' is a filled cell, '.' is empty; the first string is the bottom row.
    """
    board = [[EMPTY] * COLS for _ in range(ROWS)]
    for offset, line in enumerate(rows_from_bottom):
        row = ROWS - 1 - offset
        for col, ch in enumerate(line):
            if ch == '#':
                board[row][col] = Cell.filled('#123456')
    return tuple(tuple(line) for line in board)


def received_messages(sio, namespace='/ws'):
    """Flatten test client packets into the JSON payloads sent on 'message'."""
    messages = []
    for pkt in sio.get_received(namespace):
        if pkt['name'] != 'message':
            continue
        payload = pkt['args']
        if isinstance(payload, list):
            payload = payload[0]
        messages.append(payload)
    return messages


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def game_server(flask_app):
    return get_game_server(flask_app)


@pytest.fixture()
def make_sio_client(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()
