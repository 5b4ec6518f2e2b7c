"""
Spawning and Progression
=========================
Enemy and power-up spawning, and the score-driven level curve.
"""

import logging

from .components import PowerUp
from .config import LEVEL_SCORE_STEP
from .enemies import create_boss, create_enemy
from .world import World

logger = logging.getLogger(__name__)


def level_for_score(score: int) -> int:
    """Level is a pure function of score."""
    return 1 + score // LEVEL_SCORE_STEP


def random_column(world: World) -> int:
    """Pick a column where a 3-wide sprite fits."""
    return world.rng.randint(2, world.width - 3)


def enemy_spawn_system(world: World, elapsed_ms: int):
    """
    Spawn enemies at the current rate.

    Nothing spawns while a boss is on the field.
    """
    if world.boss() is not None:
        return

    clocks = world.clocks
    clocks.enemy_spawn += elapsed_ms / 1000.0 * world.session.spawn_rate
    while clocks.enemy_spawn >= 1.0:
        clocks.enemy_spawn -= 1.0
        tier = 2 if world.rng.random() < world.config.tier2_chance else 1
        create_enemy(world, random_column(world), tier)


def powerup_spawn_system(world: World, elapsed_ms: int):
    """Occasionally drop a power-up from the top."""
    cfg = world.config
    if not cfg.powerups_enabled:
        return

    clocks = world.clocks
    clocks.powerup_spawn += elapsed_ms / 1000.0 * cfg.powerup_rate
    while clocks.powerup_spawn >= 1.0:
        clocks.powerup_spawn -= 1.0
        if world.rng.random() < cfg.powerup_chance:
            world.powerups.append(PowerUp(x=random_column(world), y=world.top))


def level_system(world: World):
    """
    Recompute the level from score and react to a change.

    The first time the level reaches 2 the boss appears. Every change
    refreshes the spawn rate and enemy speed.
    """
    session = world.session
    cfg = world.config
    level = level_for_score(session.score)
    if level == session.level:
        return

    previous = session.level
    session.level = level
    logger.info('Level %d -> %d (score %d)', previous, level, session.score)

    if cfg.boss_enabled and not session.boss_spawned and previous < 2 <= level:
        session.boss_spawned = True
        create_boss(world)
        world.audio.play('boss_spawn')
        logger.info('Boss spawned with %d hp', cfg.boss_hp)

    session.spawn_rate = cfg.spawn_rate(level)
    session.enemy_move_ms = cfg.enemy_move_ms(level)
