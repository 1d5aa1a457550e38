"""Room lifecycle: waiting -> playing -> ended.

A room pairs exactly two sessions under a short shareable code. Rooms are
identified by code and sessions by their integer id; sending frames is the
caller's job.
"""
import random
from typing import Dict, Optional, Tuple

from tetris_duel.errors import InvalidTransition, RoomNotFound, RoomUnavailable
from tetris_duel.models import ENDED, PLAYING, WAITING, Room, generate_game_code


class RoomManager:
    def __init__(self, rng=None, code_length: int = 6):
        self.rng = rng or random.Random()
        self.code_length = code_length
        self.rooms: Dict[str, Room] = {}
        self.membership: Dict[int, str] = {}

    def __len__(self):
        return len(self.rooms)

    def __contains__(self, code):
        return code in self.rooms

    def get(self, code: str) -> Optional[Room]:
        return self.rooms.get(code)

    def room_of(self, session_id: int) -> Optional[Room]:
        code = self.membership.get(session_id)
        return self.rooms.get(code) if code else None

    def opponent_of(self, session_id: int) -> Optional[int]:
        """Other participant of a playing room, or None when nothing should be relayed."""
        room = self.room_of(session_id)
        if not room or room.status != PLAYING:
            return None
        return room.other(session_id)

    def create(self, host_id: int) -> Room:
        if host_id in self.membership:
            raise InvalidTransition(f'player {host_id} is already in game {self.membership[host_id]}')
        code = generate_game_code(self.rooms, rng=self.rng, length=self.code_length)
        room = Room(code=code, host=host_id)
        self.rooms[code] = room
        self.membership[host_id] = code
        return room

    def join(self, guest_id: int, code: str) -> Room:
        if guest_id in self.membership:
            raise InvalidTransition(f'player {guest_id} is already in game {self.membership[guest_id]}')
        room = self.rooms.get(code)
        if not room:
            raise RoomNotFound(code)
        if room.status != WAITING or room.guest is not None:
            raise RoomUnavailable(code)
        room.guest = guest_id
        room.status = PLAYING
        self.membership[guest_id] = code
        return room

    def cancel(self, session_id: int) -> Room:
        """Host withdraws a room nobody has joined yet."""
        room = self.room_of(session_id)
        if not room:
            raise InvalidTransition(f'player {session_id} is not in a game')
        if room.host != session_id:
            raise InvalidTransition(f'player {session_id} is not the host of {room.code}')
        if room.status != WAITING:
            raise InvalidTransition(f'game {room.code} is {room.status}')
        self._remove(room)
        return room

    def leave(self, session_id: int) -> Optional[Tuple[Room, Optional[int]]]:
        """Tear down the room ``session_id`` participates in, whatever its status.

        Returns the removed room and the remaining participant's id (if any).
        """
        room = self.room_of(session_id)
        if not room:
            self.membership.pop(session_id, None)
            return None
        other = room.other(session_id)
        self._remove(room)
        return room, other

    def clear(self) -> None:
        for room in self.rooms.values():
            room.status = ENDED
        self.rooms.clear()
        self.membership.clear()

    def _remove(self, room: Room) -> None:
        room.status = ENDED
        self.rooms.pop(room.code, None)
        for member in (room.host, room.guest):
            if member is not None and self.membership.get(member) == room.code:
                del self.membership[member]
