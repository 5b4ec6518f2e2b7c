"""
Collision Utilities
====================
Integer grid hit tests. Spans are inclusive: a box at x with
width w covers columns x .. x+w-1.
"""

from .components import Bullet, Enemy


def rect_hit(ax: int, ay: int, aw: int, ah: int,
             bx: int, by: int, bw: int, bh: int) -> bool:
    """Check AABB overlap between two boxes."""
    return not (
        ax + aw - 1 < bx or
        bx + bw - 1 < ax or
        ay + ah - 1 < by or
        by + bh - 1 < ay
    )


def bullet_hits_enemy(bullet: Bullet, enemy: Enemy) -> bool:
    """
    Swept hit test for a bullet against a 3x2 enemy.

    The bullet covers every row between its previous and current
    position this tick, so fast bullets cannot skip over an enemy.
    """
    if not enemy.x - 1 <= bullet.x <= enemy.x + 1:
        return False
    top = min(bullet.y0, bullet.y)
    bottom = max(bullet.y0, bullet.y)
    return top <= enemy.y + 1 and bottom >= enemy.y
