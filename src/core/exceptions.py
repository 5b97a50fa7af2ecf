"""
Errors raised across layers.

Everything recoverable derives from GameError. InvariantViolationError is the odd one out: it flags a bug in the engine
itself and is therefore an AssertionError rather than something callers are expected to handle.
"""


class GameError(Exception):
    """Base class for anything that goes wrong while playing a game."""


class IllegalMoveError(GameError):
    """The requested move is not in the legal set for the current state."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested action."""


class InvalidBoardError(GameError):
    """A piece placement that would break the board layout (off the board / light square)."""


class RepositoryError(GameError):
    """Game record could not be found (or stored)."""


class InvalidRequestError(GameError):
    """Raised by request model validators.

    NOTE: must not derive from ValueError, pydantic would wrap it into a ValidationError.
    """


# --- MOVE SUGGESTION ADAPTER ---
class SuggestionError(GameError):
    """The move suggestion adapter did not produce a usable move."""


class SuggestionUnavailableError(SuggestionError):
    pass


class SuggestionTimeoutError(SuggestionError):
    pass


class InvalidSuggestionError(SuggestionError):
    pass


class InvariantViolationError(AssertionError):
    """Piece count went up, a continuation points to an empty square, etc."""
