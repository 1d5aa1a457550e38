class TetrisDuelError(Exception):
    """Base class for failures scoped to one connection or one room."""


class ProtocolError(TetrisDuelError):
    """Inbound frame could not be parsed or carries an unknown type."""


class RoomNotFound(TetrisDuelError):
    def __init__(self, code):
        super().__init__('Game not found')
        self.code = code


class RoomUnavailable(TetrisDuelError):
    def __init__(self, code):
        super().__init__('Game is already full or not in waiting state')
        self.code = code


class InvalidTransition(TetrisDuelError):
    """Request is not allowed in the current room state; ignored without reply."""


class SendFailure(TetrisDuelError):
    """Peer connection was unusable when a frame was pushed to it."""
