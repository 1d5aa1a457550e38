from flask import Blueprint

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return 'Tetris WebSocket Server is running!', 200, {'Content-Type': 'text/plain; charset=utf-8'}
