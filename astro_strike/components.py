"""
Component Definitions
======================
Entity records and session state as plain dataclasses.
"""

from dataclasses import dataclass


# Ship and enemy footprint: x-1 .. x+1, y .. y+1
SHIP_WIDTH = 3
SHIP_HEIGHT = 2


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass
class Player:
    """The ship. y stays fixed for the whole session."""
    x: int
    y: int
    cooldown_ms: int = 0


@dataclass
class Bullet:
    """Player shot travelling upward. y0 is the row it left this tick."""
    x: int
    y: int
    y0: int


@dataclass
class Enemy:
    x: int
    y: int
    tier: int = 1
    hp: int = 1
    is_boss: bool = False


@dataclass
class PowerUp:
    x: int
    y: int


@dataclass
class Star:
    """Background decoration."""
    x: int
    y: int
    speed: int = 1


# =============================================================================
# SESSION
# =============================================================================

@dataclass
class Session:
    """
    Score, lives and flags for one run, from start to game over.

    level is derived from score; the stored copy only exists to detect
    the tick where it changes.
    """
    lives: int = 3
    score: int = 0
    level: int = 1
    paused: bool = False
    game_over: bool = False
    boss_spawned: bool = False

    # Simulation clock (ms) and the end of the power-active window
    clock_ms: int = 0
    power_until_ms: int = 0

    # Difficulty knobs, refreshed on level change
    spawn_rate: float = 0.0
    enemy_move_ms: int = 0

    def power_active(self) -> bool:
        return self.clock_ms < self.power_until_ms
