"""
Exceptions
===========
Fatal conditions raised by the terminal shell around the game.
"""


class AstroStrikeError(Exception):
    """Base class for every error the game raises on purpose."""


class TerminalTooSmall(AstroStrikeError):
    """The terminal cannot hold the play-field."""

    def __init__(self, width: int, height: int, min_width: int, min_height: int):
        self.width = width
        self.height = height
        super().__init__(
            f'Terminal too small: {width}x{height}. '
            f'Minimum: {min_width}x{min_height}'
        )


class TerminalResized(AstroStrikeError):
    """The terminal changed size while a session was running."""

    def __init__(self, old_size, new_size):
        self.old_size = old_size
        self.new_size = new_size
        super().__init__(
            f'Terminal resized from {old_size[0]}x{old_size[1]} to '
            f'{new_size[0]}x{new_size[1]}. Please restart the game.'
        )
