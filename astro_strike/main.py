#!/usr/bin/env python3
"""
ASTRO_STRIKE - Terminal Arcade Shooter
=======================================
Hold the bottom row against endless waves of descending raiders.

Controls:
    A/D or LEFT/RIGHT  - Move
    SPACE/W/UP         - Fire
    P                  - Pause
    ENTER              - Start / Confirm
    Q/ESC              - Quit
"""

import argparse
import logging
import sys
import time
from enum import Enum, auto
from typing import FrozenSet, Optional

from blessed import Terminal

from .audio import AudioCues, default_backend
from .config import ARCADE, CLASSIC, MIN_HEIGHT, MIN_WIDTH, GameConfig
from .engine import ColorTag, FrameBuffer, create_renderer, detect_rich_color
from .exceptions import TerminalResized, TerminalTooSmall
from .player import Action, InputHandler
from .systems import generate_starfield, render_system, simulation_step
from .world import World

__version__ = '1.0.0'

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

LOG_FORMAT = '[%(asctime)s][%(levelname)s] %(message)s'

# Longest tick fed to the simulation, in frames
MAX_FRAME_SKIP = 5

TITLE_ART = [
    r"    _   ___ _____ ___  ___     ___ _____ ___ ___ _  _____ ",
    r"   /_\ / __|_   _| _ \/ _ \   / __|_   _| _ \_ _| |/ / __|",
    r"  / _ \\__ \ | | |   / (_) |  \__ \ | | |   /| || ' <| _| ",
    r" /_/ \_\___/ |_| |_|_\\___/   |___/ |_| |_|_\___|_|\_\___|",
]

GAME_OVER_TEXT = 'G A M E   O V E R'


class Phase(Enum):
    """Game state machine states."""
    TITLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()


# =============================================================================
# SETUP
# =============================================================================

def check_terminal_size(width: int, height: int):
    """Refuse to start on a terminal that cannot hold the play-field."""
    if width < MIN_WIDTH or height < MIN_HEIGHT:
        raise TerminalTooSmall(width, height, MIN_WIDTH, MIN_HEIGHT)


def configure_logging(log_file: Optional[str] = None):
    """
    Send log records to a file, if one was asked for.

    The terminal belongs to the renderer, so nothing is ever logged
    to the screen.
    """
    root = logging.getLogger('astro_strike')
    root.setLevel(logging.DEBUG)
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='astro-strike',
        description='Play a game of ASTRO_STRIKE in your terminal.',
    )
    parser.add_argument(
        '--classic', action='store_true',
        help='single bullet, one-cell steps, no power-ups and no boss',
    )
    parser.add_argument(
        '-q', '--quiet', dest='use_sound', action='store_false',
        help='play without sound cues',
    )
    parser.add_argument(
        '--lives', type=int, default=None, help='starting lives',
    )
    parser.add_argument(
        '--plain', action='store_true',
        help='force the run-by-run renderer for limited terminals',
    )
    parser.add_argument(
        '--log-file', default=None, help='write a game log to this file',
    )
    parser.add_argument(
        '-V', '--version', action='version', version='%(prog)s ' + __version__,
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> GameConfig:
    config = CLASSIC if args.classic else ARCADE
    if args.lives is not None:
        config = config.replace(lives=max(1, args.lives))
    return config


# =============================================================================
# UI RENDERING
# =============================================================================

def render_ui(world: World, buffer: FrameBuffer):
    """Render the HUD on the top row."""
    session = world.session
    status = (
        f' SCORE:{session.score:06d}  LEVEL:{session.level}  '
        f'LIVES:{session.lives} '
    )
    title = ' ASTRO_STRIKE '
    buffer.draw_text(0, 0, '-' * buffer.width, ColorTag.HUD)
    buffer.draw_text(buffer.width - len(title) - 2, 0, title, ColorTag.TITLE)
    buffer.draw_text(2, 0, status, ColorTag.HUD)

    x = 2 + len(status) + 1
    if session.power_active():
        left = (session.power_until_ms - session.clock_ms) / 1000.0
        power = f' POWER:{left:3.1f}s '
        buffer.draw_text(x, 0, power, ColorTag.POWER_UP)
        x += len(power) + 1

    boss = world.boss()
    if boss is not None:
        buffer.draw_text(x, 0, f' BOSS:{boss.hp:02d} ', ColorTag.ENEMY_T2)


def render_pause_overlay(buffer: FrameBuffer):
    y = buffer.height // 2
    buffer.draw_centered(y - 1, '=' * 22, ColorTag.HUD)
    buffer.draw_centered(y, '  P A U S E D  ', ColorTag.TITLE)
    buffer.draw_centered(y + 1, '=' * 22, ColorTag.HUD)
    buffer.draw_centered(y + 3, '[ P ] RESUME   [ Q ] QUIT', ColorTag.HUD)


def render_title_screen(buffer: FrameBuffer):
    """Render the static title screen."""
    buffer.clear()
    art_y = buffer.height // 2 - 6
    for i, line in enumerate(TITLE_ART):
        buffer.draw_centered(art_y + i, line, ColorTag.TITLE)

    buffer.draw_centered(art_y + len(TITLE_ART) + 1,
                         'TERMINAL ARCADE SHOOTER', ColorTag.HUD)
    buffer.draw_centered(art_y + len(TITLE_ART) + 4,
                         '[ ENTER ] START    [ Q ] QUIT', ColorTag.PLAYER)

    controls = [
        'A/D or ARROWS - Move     SPACE - Fire',
        'P - Pause                Q/ESC - Quit',
        'Grab  P  power-ups for faster fire',
    ]
    cy = art_y + len(TITLE_ART) + 6
    for i, line in enumerate(controls):
        buffer.draw_centered(cy + i, line, ColorTag.STAR)


def render_game_over_screen(buffer: FrameBuffer, world: World):
    """Render the static game-over screen."""
    buffer.clear()
    session = world.session
    y = buffer.height // 2 - 3
    buffer.draw_centered(y, GAME_OVER_TEXT, ColorTag.ENEMY_T2)
    buffer.draw_centered(y + 2, f'FINAL SCORE: {session.score}', ColorTag.BULLET)
    buffer.draw_centered(y + 3, f'LEVEL REACHED: {session.level}', ColorTag.BULLET)
    buffer.draw_centered(y + 6, '[ ENTER ] / [ Q ] EXIT', ColorTag.PLAYER)


# =============================================================================
# GAME STATE
# =============================================================================

class Game:
    """State machine around one session. Owns the world and frame buffer."""

    def __init__(self, width: int, height: int, config: GameConfig = ARCADE,
                 audio: Optional[AudioCues] = None, rng=None):
        self.width = width
        self.height = height
        self.config = config
        self.audio = audio if audio is not None else AudioCues.silent()
        self.rng = rng

        self.buffer = FrameBuffer(width, height)
        self.phase = Phase.TITLE
        self.running = True
        self.world: Optional[World] = None

    def start_game(self):
        """Initialize a new session."""
        self.world = World(self.width, self.height, self.config,
                           rng=self.rng, audio=self.audio)
        generate_starfield(self.world)
        self.phase = Phase.PLAYING
        logger.info('Session started (%dx%d, %d lives)',
                    self.width, self.height, self.config.lives)

    def handle_title(self, actions: FrozenSet[Action]):
        if Action.QUIT in actions:
            self.running = False
        elif Action.CONFIRM in actions:
            self.start_game()

    def normalize_elapsed(self, elapsed_ms: int) -> int:
        """A backwards clock counts as one frame; stalls are capped."""
        if elapsed_ms < 0:
            return self.config.frame_ms
        return min(elapsed_ms, self.config.frame_ms * MAX_FRAME_SKIP)

    def tick(self, actions: FrozenSet[Action], elapsed_ms: int):
        """One frame of the playing/paused loop."""
        if self.phase not in (Phase.PLAYING, Phase.PAUSED):
            return
        elapsed_ms = self.normalize_elapsed(elapsed_ms)
        session = self.world.session

        if Action.QUIT in actions:
            self.running = False
        if Action.PAUSE in actions:
            session.paused = not session.paused
            self.phase = Phase.PAUSED if session.paused else Phase.PLAYING

        if self.running and not session.paused:
            simulation_step(self.world, actions, elapsed_ms)
            if session.game_over:
                self.phase = Phase.GAME_OVER
                logger.info('Game over: score %d, level %d',
                            session.score, session.level)

        self.render()

    def render(self):
        """Rebuild the whole frame from the world."""
        buffer = self.buffer
        buffer.clear()
        render_system(self.world, buffer)
        render_ui(self.world, buffer)
        if self.world.session.paused:
            render_pause_overlay(buffer)


# =============================================================================
# MAIN LOOP
# =============================================================================

class FrameClock:
    """Whole-millisecond frame deltas; the sub-millisecond remainder carries over."""

    def __init__(self, now: float):
        self.last = now

    def elapsed_ms(self, now: float) -> int:
        elapsed = int((now - self.last) * 1000)
        self.last += elapsed / 1000.0
        return elapsed


def poll_actions(term: Terminal, handler: InputHandler) -> FrozenSet[Action]:
    """Drain every pending key without blocking."""
    key = term.inkey(timeout=0)
    while key:
        handler.process_key(key)
        key = term.inkey(timeout=0)
    return handler.drain()


def wait_for_choice(term: Terminal, handler: InputHandler) -> Action:
    """Block until CONFIRM or QUIT is pressed on a static screen."""
    while True:
        handler.process_key(term.inkey(timeout=0.25))
        actions = handler.drain()
        if Action.QUIT in actions:
            return Action.QUIT
        if Action.CONFIRM in actions:
            return Action.CONFIRM


def check_resized(term: Terminal, game: Game):
    size = (term.width, term.height)
    if size != (game.width, game.height):
        raise TerminalResized((game.width, game.height), size)


def run(term: Terminal, game: Game, renderer, out=None):
    """Title screen, fixed-rate play loop, game-over screen."""
    out = out if out is not None else sys.stdout
    handler = InputHandler()
    frame_s = game.config.frame_ms / 1000.0

    print(term.home + term.clear, end='', flush=True)
    render_title_screen(game.buffer)
    renderer.present(game.buffer, out)
    game.handle_title(frozenset([wait_for_choice(term, handler)]))

    clock = FrameClock(time.perf_counter())
    while game.running and game.phase in (Phase.PLAYING, Phase.PAUSED):
        now = time.perf_counter()
        elapsed_ms = clock.elapsed_ms(now)

        check_resized(term, game)
        game.tick(poll_actions(term, handler), elapsed_ms)
        renderer.present(game.buffer, out)

        # Sleep for remaining frame time
        sleep_time = frame_s - (time.perf_counter() - now)
        if sleep_time > 0:
            time.sleep(sleep_time)

    if game.running and game.phase is Phase.GAME_OVER:
        render_game_over_screen(game.buffer, game.world)
        renderer.present(game.buffer, out)
        wait_for_choice(term, handler)


def restore_terminal(term: Terminal):
    """Leave the terminal usable: colors reset, cursor shown, newline."""
    print(term.normal + term.normal_cursor, flush=True)


def main(argv=None):
    """Entry point. Sets up terminal and runs the game."""
    args = parse_args(argv)
    configure_logging(args.log_file)
    config = config_from_args(args)
    term = Terminal()

    try:
        check_terminal_size(term.width, term.height)
    except TerminalTooSmall as exc:
        print(exc)
        sys.exit(1)

    rich = detect_rich_color(term) and not args.plain
    renderer = create_renderer(term, rich)
    audio = AudioCues(default_backend(), enabled=args.use_sound)

    failure = None
    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            game = Game(term.width, term.height, config, audio)
            run(term, game, renderer)
    except TerminalResized as exc:
        logger.error('%s', exc)
        failure = exc
    except Exception as exc:
        logger.exception('Unhandled error during session')
        failure = exc
    finally:
        restore_terminal(term)

    if failure is not None:
        print(f'{type(failure).__name__}: {failure}')
        print('Press any key to exit.')
        with term.cbreak():
            term.inkey()
        sys.exit(1)


if __name__ == '__main__':
    main()
