"""
Projectile System
==================
Bullet spawning and movement. Collision lives in systems.py.
"""

from typing import List

from .components import Bullet
from .world import World


BULLET_CHAR = '|'


def spawn_bullet_fan(world: World) -> List[Bullet]:
    """
    Fire one bullet per configured offset from the player's column.

    Offsets that land outside columns 1 .. width-2 are skipped;
    the rest of the fan still fires.
    """
    player = world.player
    spawned = []
    for offset in world.config.fire_offsets:
        x = player.x + offset
        if not 1 <= x <= world.width - 2:
            continue
        y = player.y - 1
        bullet = Bullet(x=x, y=y, y0=y)
        world.bullets.append(bullet)
        spawned.append(bullet)
    return spawned


def bullet_system(world: World):
    """
    Move bullets up by the bullet speed.

    y0 keeps the row each bullet started from this tick, for the
    swept collision test. Bullets above the top margin are removed.
    """
    speed = world.config.bullet_speed
    for i in range(len(world.bullets) - 1, -1, -1):
        bullet = world.bullets[i]
        bullet.y0 = bullet.y
        bullet.y -= speed
        if bullet.y < world.top:
            del world.bullets[i]
