"""
Game World
===========
Owns every entity collection of one session.

Collections are plain lists in spawn order. Systems remove entries by
index while walking them back to front, so the survivors keep their
relative order.
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from .audio import AudioCues
from .components import Bullet, Enemy, Player, PowerUp, Session, Star
from .config import ARCADE, GameConfig


# Rows reserved for the HUD above the play-field
TOP_MARGIN = 1


@dataclass
class Clocks:
    """Elapsed-time accumulators that gate discrete steps."""
    star_ms: int = 0
    enemy_move_ms: int = 0
    powerup_move_ms: int = 0
    enemy_spawn: float = 0.0
    powerup_spawn: float = 0.0


class World:
    """
    Entity collections, session state and the services systems need.

    Created at session start and discarded at game over.
    """

    def __init__(self, width: int, height: int, config: GameConfig = ARCADE,
                 rng: Optional[random.Random] = None,
                 audio: Optional[AudioCues] = None):
        self.width = width
        self.height = height
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.audio = audio if audio is not None else AudioCues.silent()

        self.session = Session(
            lives=config.lives,
            spawn_rate=config.spawn_rate(1),
            enemy_move_ms=config.enemy_move_ms(1),
        )
        self.clocks = Clocks()

        self.player = Player(x=width // 2, y=self.player_row)
        self.bullets: List[Bullet] = []
        self.enemies: List[Enemy] = []
        self.powerups: List[PowerUp] = []
        self.stars: List[Star] = []

    @property
    def top(self) -> int:
        """First playable row."""
        return TOP_MARGIN

    @property
    def bottom(self) -> int:
        """Row at which enemies and power-ups leave the field."""
        return self.height - 2

    @property
    def player_row(self) -> int:
        return self.height - 3

    def boss(self) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.is_boss:
                return enemy
        return None


# =============================================================================
# SESSION BOOKKEEPING
# =============================================================================

def lose_life(session: Session) -> None:
    """
    Take one life and end the session when none are left.

    Once the session is over further losses are ignored, so lives
    stop at exactly zero.
    """
    if session.game_over:
        return
    session.lives -= 1
    if session.lives <= 0:
        session.lives = 0
        session.game_over = True


def award(session: Session, points: int) -> None:
    if points > 0:
        session.score += points
