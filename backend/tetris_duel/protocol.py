"""Wire protocol: JSON objects discriminated by their ``type`` field.

Inbound frames are decoded once, here, into one of the message classes
below. Anything that does not decode raises ``ProtocolError``.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from tetris_duel.errors import ProtocolError
from tetris_duel.services.board import DOWN, LEFT, RIGHT


@dataclass(frozen=True)
class CreateGame:
    pass


@dataclass(frozen=True)
class JoinGame:
    game_code: str


@dataclass(frozen=True)
class CancelGame:
    pass


@dataclass(frozen=True)
class Move:
    direction: str


@dataclass(frozen=True)
class Rotate:
    pass


@dataclass(frozen=True)
class DropPiece:
    pass


@dataclass(frozen=True)
class Lock:
    pass


@dataclass(frozen=True)
class RequestGameStart:
    pass


InboundMessage = Union[CreateGame, JoinGame, CancelGame, Move, Rotate, DropPiece, Lock, RequestGameStart]


def _join_game(data):
    code = data.get('gameCode')
    if not isinstance(code, str) or not code.strip():
        raise ProtocolError('joinGame requires a gameCode string')
    return JoinGame(code.strip().upper())


_DECODERS = {
    'createGame': lambda data: CreateGame(),
    'joinGame': _join_game,
    'cancelGame': lambda data: CancelGame(),
    'moveLeft': lambda data: Move(LEFT),
    'moveRight': lambda data: Move(RIGHT),
    'moveDown': lambda data: Move(DOWN),
    'rotate': lambda data: Rotate(),
    'dropPiece': lambda data: DropPiece(),
    'lock': lambda data: Lock(),
    'requestGameStart': lambda data: RequestGameStart(),
}


def decode_message(raw: Any) -> InboundMessage:
    """Decode a JSON text frame (or an already parsed object) into a message."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise ProtocolError(f'frame is not valid UTF-8: {exc}') from exc
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise ProtocolError(f'frame is not valid JSON: {exc}') from exc
    if not isinstance(raw, dict):
        raise ProtocolError(f'frame must be a JSON object, got {type(raw).__name__}')
    msg_type = raw.get('type')
    decoder = _DECODERS.get(msg_type) if isinstance(msg_type, str) else None
    if decoder is None:
        raise ProtocolError(f'unknown message type: {msg_type!r}')
    return decoder(raw)


# ---- Outbound frames ----

def welcome(player_id: int) -> Dict[str, Any]:
    return {'type': 'welcome', 'id': player_id, 'message': f'Welcome, Player {player_id}!'}


def game_created(code: str, player_id: int) -> Dict[str, Any]:
    return {'type': 'gameCreated', 'gameCode': code, 'playerId': player_id, 'isHost': True}


def game_joined(code: str, player_id: int, opponent_id: int) -> Dict[str, Any]:
    return {
        'type': 'gameJoined',
        'gameCode': code,
        'playerId': player_id,
        'opponentId': opponent_id,
        'isHost': False,
    }


def player_joined(code: str, opponent_id: int) -> Dict[str, Any]:
    return {'type': 'playerJoined', 'gameCode': code, 'opponentId': opponent_id}


def game_canceled(code: str) -> Dict[str, Any]:
    return {'type': 'gameCanceled', 'gameCode': code}


def error(message: str) -> Dict[str, Any]:
    return {'type': 'error', 'message': message}


def opponent_disconnected(reason: str) -> Dict[str, Any]:
    return {'type': 'opponentDisconnected', 'reason': reason}


def game_state_update(state) -> Dict[str, Any]:
    return {'type': 'gameStateUpdate', 'state': state.to_dict()}


def opponent_update(state) -> Dict[str, Any]:
    payload = {'type': 'opponentUpdate'}
    payload.update(state.to_opponent_dict())
    return payload


def add_garbage(lines: int, from_player: int) -> Dict[str, Any]:
    return {'type': 'addGarbage', 'lines': lines, 'fromPlayer': from_player}
