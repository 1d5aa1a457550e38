from tetris_duel import create_app, get_game_server, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets
    try:
        socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
    finally:
        get_game_server(app).close()
