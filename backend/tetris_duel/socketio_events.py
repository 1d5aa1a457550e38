from flask import request
from flask_socketio import SocketIO

from tetris_duel.errors import SendFailure
from tetris_duel.sessions import GameServer


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


class SocketConnection:
    """Network handle of one player: a Socket.IO sid on a namespace."""

    def __init__(self, socketio: SocketIO, sid: str, namespace: str):
        self.socketio = socketio
        self.handle = sid
        self.namespace = namespace

    def send(self, payload) -> None:
        try:
            self.socketio.emit('message', payload, to=self.handle, namespace=self.namespace)
        except Exception as exc:
            raise SendFailure(f'emit to {self.handle} failed: {exc}') from exc


def register_socketio_handlers(socketio: SocketIO, server: GameServer, namespace: str = '/ws', testing: bool = False) -> None:
    """Register Socket.IO event handlers bound to ``server``.

    Always register on ``namespace``. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """

    def _bind(ns: str) -> None:
        def handle_connect(auth=None):
            server.connect(SocketConnection(socketio, _get_sid(), ns))

        def handle_disconnect(reason=None):
            server.disconnect(_get_sid())

        def handle_message(data):
            server.handle_frame(_get_sid(), data)

        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('message', handle_message, namespace=ns)

    # Primary namespace
    _bind(namespace)

    if testing and namespace != '/':
        # Test-only mirror on default namespace
        _bind('/')
