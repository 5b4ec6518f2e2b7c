"""
Player Module
==============
Input mapping, ship movement and fire control.
"""

from enum import Enum, auto
from typing import FrozenSet, Iterable, Set

from .projectiles import spawn_bullet_fan
from .world import World


class Action(Enum):
    """Everything a key press can mean."""
    LEFT = auto()
    RIGHT = auto()
    SHOOT = auto()
    PAUSE = auto()
    QUIT = auto()
    CONFIRM = auto()


# blessed key names
KEY_NAME_ACTIONS = {
    'KEY_LEFT': Action.LEFT,
    'KEY_RIGHT': Action.RIGHT,
    'KEY_UP': Action.SHOOT,
    'KEY_ESCAPE': Action.QUIT,
    'KEY_ENTER': Action.CONFIRM,
}

# Plain characters (lower-cased)
CHAR_ACTIONS = {
    'a': Action.LEFT,
    'd': Action.RIGHT,
    'w': Action.SHOOT,
    ' ': Action.SHOOT,
    'p': Action.PAUSE,
    'q': Action.QUIT,
    '\n': Action.CONFIRM,
    '\r': Action.CONFIRM,
}

PLAYER_SPRITE = ('/A\\', '=^=')


def key_to_action(key):
    """Map a blessed Keystroke to an Action, or None if unbound."""
    if not key:
        return None
    if key.is_sequence:
        return KEY_NAME_ACTIONS.get(key.name)
    return CHAR_ACTIONS.get(str(key).lower())


class InputHandler:
    """
    Collects the actions pressed since the last tick.

    Terminals deliver no key-up events, so each tick sees the set of
    distinct actions pressed during it; repeats count once.
    """

    def __init__(self):
        self._pending: Set[Action] = set()

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        action = key_to_action(key)
        if action is not None:
            self._pending.add(action)

    def process_keys(self, keys: Iterable) -> None:
        for key in keys:
            self.process_key(key)

    def drain(self) -> FrozenSet[Action]:
        """Return this tick's actions and start a new tick."""
        actions = frozenset(self._pending)
        self._pending.clear()
        return actions


def player_input_system(world: World, actions: FrozenSet[Action]):
    """
    Step the ship sideways and clamp it inside the field.

    Left and right are applied independently, so pressing both in
    the same tick cancels out.
    """
    player = world.player
    step = world.config.player_step
    if Action.RIGHT in actions:
        player.x += step
    if Action.LEFT in actions:
        player.x -= step
    player.x = max(3, min(world.width - 4, player.x))


def fire_control_system(world: World, actions: FrozenSet[Action], elapsed_ms: int):
    """Count down the fire cooldown and shoot when ready."""
    player = world.player
    cfg = world.config
    player.cooldown_ms = max(0, player.cooldown_ms - elapsed_ms)

    if Action.SHOOT not in actions or player.cooldown_ms > 0:
        return

    spawn_bullet_fan(world)
    if world.session.power_active():
        player.cooldown_ms = cfg.powered_cooldown_ms
    else:
        player.cooldown_ms = cfg.base_cooldown_ms
    world.audio.play('shoot')
