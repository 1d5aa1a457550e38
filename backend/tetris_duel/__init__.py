import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

EXTENSION_KEY = 'tetris_duel'


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from tetris_duel.main import main
    flask_app.register_blueprint(main)

    # One game server per application owns every session and room
    from tetris_duel.sessions import GameServer
    seed = flask_app.config.get('RANDOM_SEED')
    server = GameServer(
        logger=flask_app.logger,
        rng=random.Random(seed) if seed is not None else None,
        code_length=int(flask_app.config.get('GAME_CODE_LENGTH', 6)),
    )
    flask_app.extensions[EXTENSION_KEY] = server

    # Register Socket.IO event handlers bound to this app's game server
    from tetris_duel.socketio_events import register_socketio_handlers
    register_socketio_handlers(
        socketio,
        server,
        namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/ws'),
        testing=flask_app.config.get('TESTING', False),
    )

    return flask_app


def get_game_server(flask_app):
    return flask_app.extensions[EXTENSION_KEY]
