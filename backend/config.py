import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8080'))
    # Comma separated list; '*' accepts any origin (static client is hosted elsewhere)
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Length of the shareable room code
    GAME_CODE_LENGTH = int(os.environ.get('GAME_CODE_LENGTH', '6'))
    # Optional seed for piece draws, game codes and garbage gaps
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
