"""
Game Configuration
===================
Tunable constants grouped into presets.

ARCADE is the full game (bullet fan, power-ups, boss).
CLASSIC is the stripped-down variant: single bullet, one-cell
steps, no power-ups and no boss.
"""

from dataclasses import dataclass, replace as _replace
from typing import Tuple


TARGET_FPS = 30
FRAME_MS = 1000 // TARGET_FPS

MIN_WIDTH = 60
MIN_HEIGHT = 25

# Points per level
LEVEL_SCORE_STEP = 250


@dataclass(frozen=True)
class GameConfig:
    """All knobs read by the simulation. Times are in milliseconds."""
    lives: int = 3
    frame_ms: int = FRAME_MS

    # Player
    player_step: int = 2
    fire_offsets: Tuple[int, ...] = (-1, 0, 1)
    base_cooldown_ms: int = 260
    powered_cooldown_ms: int = 110

    # Bullets (rows per tick)
    bullet_speed: int = 2

    # Stars
    star_count: int = 40
    star_drift_ms: int = 120

    # Enemies
    base_spawn_rate: float = 0.7       # enemies per second at level 1
    spawn_rate_per_level: float = 0.3
    max_spawn_rate: float = 3.0
    tier2_chance: float = 0.18
    base_enemy_move_ms: int = 520
    enemy_move_ms_per_level: int = 60
    min_enemy_move_ms: int = 140

    # Power-ups
    powerups_enabled: bool = True
    powerup_rate: float = 0.12         # accumulator units per second
    powerup_chance: float = 0.6
    powerup_move_ms: int = 200
    power_duration_ms: int = 6000

    # Boss
    boss_enabled: bool = True
    boss_hp: int = 18
    boss_bonus: int = 500

    # Scoring
    hit_score: int = 5
    tier1_kill_score: int = 20
    tier2_kill_score: int = 40

    def spawn_rate(self, level: int) -> float:
        """Enemies per second at a given level."""
        rate = self.base_spawn_rate + self.spawn_rate_per_level * (level - 1)
        return min(self.max_spawn_rate, rate)

    def enemy_move_ms(self, level: int) -> int:
        """Milliseconds between enemy steps at a given level."""
        period = self.base_enemy_move_ms - self.enemy_move_ms_per_level * (level - 1)
        return max(self.min_enemy_move_ms, period)

    def replace(self, **overrides) -> 'GameConfig':
        """Return a copy with some fields overridden."""
        return _replace(self, **overrides)


ARCADE = GameConfig()

CLASSIC = GameConfig(
    player_step=1,
    fire_offsets=(0,),
    powerups_enabled=False,
    boss_enabled=False,
)
