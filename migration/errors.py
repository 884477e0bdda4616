"""Error taxonomy for the Migration engine.

Every error is local and recoverable. Each class also derives from the
closest builtin so callers can catch either the engine type or the builtin.
"""


class MigrationError(Exception):
    """Base class for all engine errors."""


class InvalidSize(MigrationError, ValueError):
    """Board size is not an integer >= 2."""


class InvalidDepth(MigrationError, ValueError):
    """Search depth is not an integer >= 1."""


class OutOfBounds(MigrationError, IndexError):
    """Coordinates fall outside the board."""


class IllegalMove(MigrationError, ValueError):
    """Move is not in the legal move list of the side to move."""


class GameOver(MigrationError):
    """A move was submitted after the game reached a terminal state."""


class CorruptSave(MigrationError, ValueError):
    """Saved text could not be decoded into a valid game."""


class SerializationError(MigrationError):
    """A game could not be encoded to text."""
