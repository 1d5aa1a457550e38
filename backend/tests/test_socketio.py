from conftest import received_messages


def _types(messages):
    return [m['type'] for m in messages]


def _by_type(messages, msg_type):
    return [m for m in messages if m['type'] == msg_type]


def test_socket_connect_receives_welcome(sio_client):
    assert sio_client.is_connected('/ws')
    received = received_messages(sio_client)
    assert _types(received)[:2] == ['welcome', 'gameStateUpdate']
    welcome = received[0]
    assert welcome['id'] == received[1]['state']['id']
    assert welcome['message'] == f"Welcome, Player {welcome['id']}!"


def test_create_join_and_third_player_rejected(make_sio_client, game_server):
    host = make_sio_client()
    guest = make_sio_client()
    third = make_sio_client()
    for c in (host, guest, third):
        received_messages(c)  # flush

    host.emit('message', {'type': 'createGame'}, namespace='/ws')
    created = _by_type(received_messages(host), 'gameCreated')[0]
    code = created['gameCode']
    assert created['isHost'] is True
    assert len(code) == 6

    guest.emit('message', '{"type": "joinGame", "gameCode": "%s"}' % code.lower(), namespace='/ws')
    guest_msgs = received_messages(guest)
    host_msgs = received_messages(host)
    assert _by_type(guest_msgs, 'gameJoined')[0]['isHost'] is False
    assert _by_type(host_msgs, 'playerJoined')[0]['gameCode'] == code
    assert game_server.rooms.get(code).status == 'playing'

    third.emit('message', {'type': 'joinGame', 'gameCode': code}, namespace='/ws')
    error = _by_type(received_messages(third), 'error')[0]
    assert error['message'].startswith('Game is already full')


def test_host_disconnect_ends_room(make_sio_client, game_server):
    host = make_sio_client()
    guest = make_sio_client()
    host.emit('message', {'type': 'createGame'}, namespace='/ws')
    code = _by_type(received_messages(host), 'gameCreated')[0]['gameCode']
    guest.emit('message', {'type': 'joinGame', 'gameCode': code}, namespace='/ws')
    received_messages(guest)  # flush

    # Disconnect host -> expect opponentDisconnected for guest
    host.disconnect(namespace='/ws')
    events = _by_type(received_messages(guest), 'opponentDisconnected')
    assert events == [{'type': 'opponentDisconnected', 'reason': 'Host left the game'}]
    assert game_server.rooms.get(code) is None

    latecomer = make_sio_client()
    latecomer.emit('message', {'type': 'joinGame', 'gameCode': code}, namespace='/ws')
    assert _by_type(received_messages(latecomer), 'error')[0]['message'] == 'Game not found'


def test_malformed_message_keeps_connection(sio_client):
    received_messages(sio_client)
    sio_client.emit('message', '{broken json', namespace='/ws')
    sio_client.emit('message', {'type': 'selfDestruct'}, namespace='/ws')
    assert received_messages(sio_client) == []
    assert sio_client.is_connected('/ws')

    sio_client.emit('message', {'type': 'requestGameStart'}, namespace='/ws')
    assert _types(received_messages(sio_client)) == ['gameStateUpdate']


def test_move_pushes_state(sio_client):
    start = received_messages(sio_client)[1]['state']
    sio_client.emit('message', {'type': 'moveLeft'}, namespace='/ws')
    update = received_messages(sio_client)[0]
    assert update['type'] == 'gameStateUpdate'
    assert update['state']['currentX'] == start['currentX'] - 1
