"""
Audio Cues
===========
Best-effort tones. Playing a cue never blocks the frame and never
raises: a machine without sound simply stays quiet.
"""

import logging
import sys
import threading
from typing import Callable, Dict, Optional, TextIO, Tuple

logger = logging.getLogger(__name__)

# Cue name -> (frequency Hz, duration ms)
CUES: Dict[str, Tuple[int, int]] = {
    'shoot': (880, 15),
    'player_hit': (180, 160),
    'boss_spawn': (110, 350),
    'boss_defeat': (1320, 300),
}

Backend = Callable[[int, int], None]


def bell_backend(out: Optional[TextIO] = None) -> Backend:
    """Terminal bell. Frequency and duration are ignored."""
    stream = out if out is not None else sys.stdout

    def play(frequency: int, duration: int) -> None:
        stream.write('\a')
        stream.flush()

    return play


def winsound_backend() -> Backend:
    """Real tones on Windows, played off the game thread."""
    import winsound

    def play(frequency: int, duration: int) -> None:
        threading.Thread(
            target=winsound.Beep, args=(frequency, duration), daemon=True
        ).start()

    return play


def default_backend() -> Backend:
    if sys.platform == 'win32':
        return winsound_backend()
    return bell_backend()


class AudioCues:
    """Fire-and-forget cue player."""

    def __init__(self, backend: Optional[Backend] = None, enabled: bool = True):
        self.backend = backend
        self.enabled = enabled and backend is not None

    @classmethod
    def silent(cls) -> 'AudioCues':
        return cls(None, enabled=False)

    def play(self, name: str) -> None:
        if not self.enabled:
            return
        frequency, duration = CUES[name]
        try:
            self.backend(frequency, duration)
        except Exception:
            # Dropped; cues are optional
            logger.debug('Audio cue %r failed', name, exc_info=True)
