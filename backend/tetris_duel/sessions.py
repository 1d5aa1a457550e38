"""Session registry and message dispatch.

``GameServer`` owns every piece of mutable server state: player sessions
keyed by integer id, the network handle -> session id index, and the
``RoomManager``. Socket.IO may deliver events on several threads, so every
entry point takes ``self.lock`` and runs its turn, broadcasts included, to
completion before the next one starts.
"""
import itertools
import logging
import random
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from tetris_duel import protocol
from tetris_duel.errors import (
    InvalidTransition,
    ProtocolError,
    RoomNotFound,
    RoomUnavailable,
    SendFailure,
)
from tetris_duel.models import PlayerState
from tetris_duel.services import board as engine
from tetris_duel.services.garbage import apply_garbage
from tetris_duel.services.rooms import RoomManager
from tetris_duel.services.scoring import garbage_lines_for

HOST_LEFT = 'Host left the game'
GUEST_LEFT = 'Guest left the game'


@dataclass
class PlayerSession:
    id: int
    connection: Any
    state: PlayerState


class GameServer:
    def __init__(self, logger=None, rng=None, code_length: int = 6):
        self.logger = logger or logging.getLogger('tetris_duel')
        self.rng = rng or random.Random()
        self.rooms = RoomManager(rng=self.rng, code_length=code_length)
        self.sessions: Dict[int, PlayerSession] = {}
        self._by_handle: Dict[Any, int] = {}
        self._ids = itertools.count(1)
        # Reentrant: propagate_garbage is public and also runs inside handle_frame
        self.lock = threading.RLock()

    # ---- Connection lifecycle ----

    def connect(self, connection) -> PlayerSession:
        """Register a freshly accepted connection and greet it."""
        with self.lock:
            session_id = next(self._ids)
            session = PlayerSession(session_id, connection, engine.new_player_state(session_id, self.rng))
            self.sessions[session_id] = session
            self._by_handle[connection.handle] = session_id
            self.logger.info(f"[connect] player={session_id} handle={connection.handle}")
            self._send(session, protocol.welcome(session_id))
            self._send(session, protocol.game_state_update(session.state))
            return session

    def disconnect(self, handle) -> None:
        with self.lock:
            session_id = self._by_handle.pop(handle, None)
            if session_id is None:
                return
            self.sessions.pop(session_id, None)
            self.logger.info(f"[disconnect] player={session_id}")
            left = self.rooms.leave(session_id)
            if not left:
                return
            room, other_id = left
            self.logger.info(f"[room-teardown] code={room.code} left={session_id}")
            other = self.sessions.get(other_id) if other_id is not None else None
            if other:
                reason = HOST_LEFT if room.host == session_id else GUEST_LEFT
                self._send(other, protocol.opponent_disconnected(reason))

    def close(self) -> None:
        """Drop every session and room; called when the server shuts down."""
        with self.lock:
            self.logger.info(f"[shutdown] sessions={len(self.sessions)} rooms={len(self.rooms)}")
            self.sessions.clear()
            self._by_handle.clear()
            self.rooms.clear()

    def session_for(self, handle) -> Optional[PlayerSession]:
        with self.lock:
            session_id = self._by_handle.get(handle)
            return self.sessions.get(session_id) if session_id is not None else None

    # ---- Inbound frames ----

    def handle_frame(self, handle, raw) -> None:
        with self.lock:
            session = self.session_for(handle)
            if not session:
                self.logger.warning(f"[frame-drop] unknown handle={handle}")
                return
            try:
                message = protocol.decode_message(raw)
            except ProtocolError as exc:
                self.logger.warning(f"[protocol-error] player={session.id} {exc}")
                return
            self.dispatch(session, message)

    def dispatch(self, session: PlayerSession, message) -> None:
        if isinstance(message, protocol.CreateGame):
            self._create_game(session)
        elif isinstance(message, protocol.JoinGame):
            self._join_game(session, message.game_code)
        elif isinstance(message, protocol.CancelGame):
            self._cancel_game(session)
        elif isinstance(message, protocol.RequestGameStart):
            self._send(session, protocol.game_state_update(session.state))
        elif session.state.game_over:
            self.logger.debug(f"[ignored] player={session.id} game over, {type(message).__name__} dropped")
        elif isinstance(message, protocol.Move):
            self._move(session, message.direction)
        elif isinstance(message, protocol.Rotate):
            state, rotated = engine.rotate(session.state)
            if rotated:
                self._commit(session, state)
        elif isinstance(message, protocol.DropPiece):
            state, _ = engine.hard_drop(session.state)
            session.state = state
            self._lock(session)
        elif isinstance(message, protocol.Lock):
            self._lock(session)
        else:
            raise TypeError(f'unhandled message {message!r}')

    # ---- Rooms ----

    def _create_game(self, session: PlayerSession) -> None:
        try:
            room = self.rooms.create(session.id)
        except InvalidTransition as exc:
            self.logger.info(f"[room-create-ignored] player={session.id} {exc}")
            return
        self.logger.info(f"[room-create] code={room.code} host={session.id}")
        self._send(session, protocol.game_created(room.code, session.id))

    def _join_game(self, session: PlayerSession, code: str) -> None:
        try:
            room = self.rooms.join(session.id, code)
        except (RoomNotFound, RoomUnavailable) as exc:
            self.logger.info(f"[room-join-rejected] code={code} player={session.id} {exc}")
            self._send(session, protocol.error(str(exc)))
            return
        except InvalidTransition as exc:
            self.logger.info(f"[room-join-ignored] code={code} player={session.id} {exc}")
            return
        host = self.sessions[room.host]
        self.logger.info(f"[room-join] code={room.code} host={host.id} guest={session.id}")
        self._send(session, protocol.game_joined(room.code, session.id, host.id))
        self._send(host, protocol.player_joined(room.code, session.id))
        for player, opponent in ((session, host), (host, session)):
            self._send(player, protocol.game_state_update(player.state))
            self._send(player, protocol.opponent_update(opponent.state))

    def _cancel_game(self, session: PlayerSession) -> None:
        try:
            room = self.rooms.cancel(session.id)
        except InvalidTransition as exc:
            self.logger.info(f"[room-cancel-ignored] player={session.id} {exc}")
            return
        self.logger.info(f"[room-cancel] code={room.code} host={session.id}")
        self._send(session, protocol.game_canceled(room.code))

    # ---- Gameplay ----

    def _move(self, session: PlayerSession, direction: str) -> None:
        state, moved = engine.move(session.state, direction)
        if moved:
            self._commit(session, state)
        elif direction == engine.DOWN:
            # Blocked downward move: the piece has landed
            self._lock(session)

    def _lock(self, session: PlayerSession) -> None:
        state, cleared = engine.lock(session.state, self.rng)
        if cleared:
            self.logger.info(f"[lines] player={session.id} cleared={cleared} score={state.score}")
        if state.game_over:
            self.logger.info(f"[game-over] player={session.id} score={state.score}")
        self._commit(session, state)
        garbage = garbage_lines_for(cleared)
        if garbage:
            self.propagate_garbage(session, garbage)

    def _commit(self, session: PlayerSession, state: PlayerState) -> None:
        """Store the new state, push it to its owner and relay it to the opponent."""
        session.state = state
        self._send(session, protocol.game_state_update(state))
        opponent = self._opponent(session)
        if opponent:
            self._send(opponent, protocol.opponent_update(state))

    def propagate_garbage(self, sender: PlayerSession, lines: int) -> None:
        """Push ``lines`` garbage rows into the sender's opponent, if one is playing."""
        with self.lock:
            opponent = self._opponent(sender)
            if not opponent:
                return
            if opponent.state.game_over:
                self.logger.info(f"[garbage-skip] from={sender.id} to={opponent.id} opponent game over")
                return
            state, added = apply_garbage(opponent.state, lines, self.rng)
            opponent.state = state
            self.logger.info(f"[garbage] from={sender.id} to={opponent.id} lines={lines} added={added}")
            if state.game_over:
                self.logger.info(f"[game-over] player={opponent.id} score={state.score}")
            self._send(opponent, protocol.add_garbage(lines, sender.id))
            self._send(opponent, protocol.game_state_update(state))
            self._send(sender, protocol.opponent_update(state))

    def _opponent(self, session: PlayerSession) -> Optional[PlayerSession]:
        opponent_id = self.rooms.opponent_of(session.id)
        return self.sessions.get(opponent_id) if opponent_id is not None else None

    def _send(self, session: PlayerSession, payload) -> None:
        try:
            session.connection.send(payload)
        except SendFailure as exc:
            self.logger.error(f"[send-failure] player={session.id} type={payload.get('type')} {exc}")
