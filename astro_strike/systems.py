"""
Game Systems
=============
Per-tick update functions and entity rendering.

simulation_step runs the systems in a fixed order: later stages read
positions written by earlier ones within the same tick.
"""

import logging
from typing import FrozenSet

from .components import SHIP_HEIGHT, SHIP_WIDTH, Session, Star
from .engine import ColorTag, FrameBuffer
from .enemies import enemy_movement_system, enemy_sprite, kill_score
from .geometry import bullet_hits_enemy, rect_hit
from .player import PLAYER_SPRITE, Action, fire_control_system, player_input_system
from .projectiles import BULLET_CHAR, bullet_system
from .spawner import enemy_spawn_system, level_system, powerup_spawn_system
from .world import World, award, lose_life

logger = logging.getLogger(__name__)

POWERUP_CHAR = 'P'
STAR_CHARS = {1: '.', 2: '.', 3: '*'}


# =============================================================================
# STARFIELD
# =============================================================================

def generate_starfield(world: World):
    """Scatter the background stars over the whole field."""
    rng = world.rng
    world.stars = [
        Star(
            x=rng.randint(0, world.width - 1),
            y=rng.randint(0, world.height - 1),
            speed=rng.randint(1, 3),
        )
        for _ in range(world.config.star_count)
    ]


def star_system(world: World, elapsed_ms: int):
    """Drift stars down; a star leaving the bottom re-enters at the top."""
    clocks = world.clocks
    threshold = world.config.star_drift_ms
    clocks.star_ms += elapsed_ms
    if clocks.star_ms < threshold:
        return
    steps = clocks.star_ms // threshold
    clocks.star_ms -= steps * threshold

    rng = world.rng
    for _ in range(steps):
        for star in world.stars:
            star.y += star.speed
            if star.y >= world.height:
                star.y = 0
                star.x = rng.randint(0, world.width - 1)
                star.speed = rng.randint(1, 3)


# =============================================================================
# POWER-UPS
# =============================================================================

def powerup_movement_system(world: World, elapsed_ms: int):
    """Drift power-ups down; missed ones just disappear."""
    clocks = world.clocks
    period = world.config.powerup_move_ms
    clocks.powerup_move_ms += elapsed_ms
    if clocks.powerup_move_ms < period:
        return
    steps = clocks.powerup_move_ms // period
    clocks.powerup_move_ms -= steps * period

    for i in range(len(world.powerups) - 1, -1, -1):
        powerup = world.powerups[i]
        powerup.y += steps
        if powerup.y >= world.bottom:
            del world.powerups[i]


def activate_power(session: Session, duration_ms: int):
    """Start the power-active window. A second pickup restarts it."""
    session.power_until_ms = session.clock_ms + duration_ms


def pickup_system(world: World):
    player = world.player
    for i in range(len(world.powerups) - 1, -1, -1):
        powerup = world.powerups[i]
        if rect_hit(player.x - 1, player.y, SHIP_WIDTH, SHIP_HEIGHT,
                    powerup.x, powerup.y, 1, 1):
            del world.powerups[i]
            activate_power(world.session, world.config.power_duration_ms)


# =============================================================================
# COMBAT
# =============================================================================

def bullet_collision_system(world: World):
    """
    Resolve bullet hits.

    A bullet damages at most the first enemy it touches and is then
    spent. Non-lethal hits score a little; kills score by tier.
    """
    session = world.session
    cfg = world.config
    for bi in range(len(world.bullets) - 1, -1, -1):
        bullet = world.bullets[bi]
        for ei, enemy in enumerate(world.enemies):
            if not bullet_hits_enemy(bullet, enemy):
                continue
            enemy.hp -= 1
            if enemy.hp > 0:
                award(session, cfg.hit_score)
            else:
                del world.enemies[ei]
                award(session, kill_score(world, enemy))
                if enemy.is_boss:
                    world.audio.play('boss_defeat')
                    logger.info('Boss defeated, score %d', session.score)
            del world.bullets[bi]
            break


def player_collision_system(world: World):
    """Ramming an enemy destroys it and costs a life."""
    player = world.player
    for i in range(len(world.enemies) - 1, -1, -1):
        enemy = world.enemies[i]
        if rect_hit(player.x - 1, player.y, SHIP_WIDTH, SHIP_HEIGHT,
                    enemy.x - 1, enemy.y, SHIP_WIDTH, SHIP_HEIGHT):
            del world.enemies[i]
            world.audio.play('player_hit')
            lose_life(world.session)
            logger.info('Player hit, lives=%d', world.session.lives)


# =============================================================================
# TICK
# =============================================================================

def simulation_step(world: World, actions: FrozenSet[Action], elapsed_ms: int):
    """Advance the whole world by one tick."""
    world.session.clock_ms += elapsed_ms

    player_input_system(world, actions)
    fire_control_system(world, actions, elapsed_ms)
    star_system(world, elapsed_ms)
    enemy_spawn_system(world, elapsed_ms)
    powerup_spawn_system(world, elapsed_ms)
    bullet_system(world)
    enemy_movement_system(world, elapsed_ms)
    powerup_movement_system(world, elapsed_ms)
    pickup_system(world)
    bullet_collision_system(world)
    player_collision_system(world)
    level_system(world)


# =============================================================================
# RENDERING
# =============================================================================

def render_starfield(world: World, buffer: FrameBuffer):
    for star in world.stars:
        buffer.set_cell(star.x, star.y, STAR_CHARS[star.speed], ColorTag.STAR)


def _draw_sprite(buffer: FrameBuffer, x: int, y: int, sprite, tag: ColorTag):
    for row, line in enumerate(sprite):
        buffer.draw_text(x - 1, y + row, line, tag)


def render_system(world: World, buffer: FrameBuffer):
    """Draw every entity, back to front."""
    render_starfield(world, buffer)

    for powerup in world.powerups:
        buffer.set_cell(powerup.x, powerup.y, POWERUP_CHAR, ColorTag.POWER_UP)

    for bullet in world.bullets:
        buffer.set_cell(bullet.x, bullet.y, BULLET_CHAR, ColorTag.BULLET)

    for enemy in world.enemies:
        tag = ColorTag.ENEMY_T2 if enemy.tier == 2 else ColorTag.ENEMY_T1
        _draw_sprite(buffer, enemy.x, enemy.y, enemy_sprite(enemy), tag)

    player = world.player
    _draw_sprite(buffer, player.x, player.y, PLAYER_SPRITE, ColorTag.PLAYER)
