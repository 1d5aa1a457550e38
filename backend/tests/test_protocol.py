import json

import pytest

from tetris_duel import protocol
from tetris_duel.errors import ProtocolError


@pytest.mark.parametrize('msg_type,expected', [
    ('createGame', protocol.CreateGame()),
    ('cancelGame', protocol.CancelGame()),
    ('moveLeft', protocol.Move('left')),
    ('moveRight', protocol.Move('right')),
    ('moveDown', protocol.Move('down')),
    ('rotate', protocol.Rotate()),
    ('dropPiece', protocol.DropPiece()),
    ('lock', protocol.Lock()),
    ('requestGameStart', protocol.RequestGameStart()),
])
def test_decode_simple_messages(msg_type, expected):
    assert protocol.decode_message(json.dumps({'type': msg_type})) == expected
    assert protocol.decode_message({'type': msg_type}) == expected


def test_join_game_code_is_normalised():
    message = protocol.decode_message(b'{"type": "joinGame", "gameCode": " abc234 "}')
    assert message == protocol.JoinGame('ABC234')


@pytest.mark.parametrize('raw', [
    'not json',
    '[1, 2, 3]',
    '{"no": "type"}',
    '{"type": "fly"}',
    '{"type": 5}',
    '{"type": "joinGame"}',
    '{"type": "joinGame", "gameCode": 42}',
    b'\xff\xfe',
    None,
])
def test_malformed_frames_raise_protocol_error(raw):
    with pytest.raises(ProtocolError):
        protocol.decode_message(raw)


def test_outbound_frames_carry_type():
    assert protocol.game_created('ABC234', 1) == {
        'type': 'gameCreated', 'gameCode': 'ABC234', 'playerId': 1, 'isHost': True,
    }
    assert protocol.game_joined('ABC234', 2, 1)['isHost'] is False
    assert protocol.welcome(3)['id'] == 3
    assert protocol.add_garbage(2, 1) == {'type': 'addGarbage', 'lines': 2, 'fromPlayer': 1}
