"""
Enemy Definitions
==================
Enemy factories and the downward march.
"""

import logging

from .components import Enemy
from .world import World, lose_life

logger = logging.getLogger(__name__)


# Tier -> hit points
TIER_HP = {
    1: 1,
    2: 2,
}

# Two-row sprites, centered on x
ENEMY_SPRITES = {
    1: ('<o>', '/ \\'),
    2: ('{#}', '/V\\'),
}
BOSS_SPRITE = ('[@]', '/W\\')


def create_enemy(world: World, x: int, tier: int = 1) -> Enemy:
    """Spawn an ordinary enemy on the top row."""
    enemy = Enemy(x=x, y=world.top, tier=tier, hp=TIER_HP[tier])
    world.enemies.append(enemy)
    return enemy


def create_boss(world: World) -> Enemy:
    """Spawn the boss at the top center. Uses the tier-2 look."""
    boss = Enemy(
        x=world.width // 2,
        y=world.top + 1,
        tier=2,
        hp=world.config.boss_hp,
        is_boss=True,
    )
    world.enemies.append(boss)
    return boss


def enemy_sprite(enemy: Enemy):
    if enemy.is_boss:
        return BOSS_SPRITE
    return ENEMY_SPRITES[enemy.tier]


def kill_score(world: World, enemy: Enemy) -> int:
    """Points for destroying an enemy."""
    cfg = world.config
    points = cfg.tier2_kill_score if enemy.tier == 2 else cfg.tier1_kill_score
    if enemy.is_boss:
        points += cfg.boss_bonus
    return points


def enemy_movement_system(world: World, elapsed_ms: int):
    """
    Step enemies down one row per move period.

    An enemy reaching the bottom leaks: it is removed and costs a life.
    """
    clocks = world.clocks
    period = world.session.enemy_move_ms
    clocks.enemy_move_ms += elapsed_ms
    if clocks.enemy_move_ms < period:
        return
    steps = clocks.enemy_move_ms // period
    clocks.enemy_move_ms -= steps * period

    for i in range(len(world.enemies) - 1, -1, -1):
        enemy = world.enemies[i]
        enemy.y += steps
        if enemy.y >= world.bottom:
            del world.enemies[i]
            lose_life(world.session)
            logger.info('Enemy leaked at x=%d, lives=%d',
                        enemy.x, world.session.lives)
