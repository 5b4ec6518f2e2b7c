"""
Test Suite for the simulation step and its systems.

Worlds are built with spawning switched off and a seeded RNG so each
test places exactly the entities it needs.
"""

import random
import unittest

from astro_strike.audio import CUES, AudioCues
from astro_strike.components import Bullet, Enemy, PowerUp, Star
from astro_strike.config import ARCADE, CLASSIC
from astro_strike.enemies import TIER_HP, create_boss, create_enemy
from astro_strike.geometry import bullet_hits_enemy, rect_hit
from astro_strike.player import Action, fire_control_system, player_input_system
from astro_strike.projectiles import bullet_system, spawn_bullet_fan
from astro_strike.spawner import (
    enemy_spawn_system,
    level_for_score,
    level_system,
    powerup_spawn_system,
)
from astro_strike.systems import (
    activate_power,
    pickup_system,
    simulation_step,
    star_system,
)
from astro_strike.world import World, lose_life

NO_KEYS = frozenset()
TICK_MS = 33

QUIET = ARCADE.replace(
    base_spawn_rate=0.0,
    spawn_rate_per_level=0.0,
    powerups_enabled=False,
    star_count=0,
)


class RecordingBackend:
    """Audio backend that remembers every tone."""

    def __init__(self):
        self.calls = []

    def __call__(self, frequency, duration):
        self.calls.append((frequency, duration))


def make_world(config=QUIET, width=60, height=25, audio=None):
    return World(width, height, config, rng=random.Random(7), audio=audio)


class TestCollisionUtilities(unittest.TestCase):

    def test_rect_hit_overlap_and_touching(self):
        self.assertTrue(rect_hit(0, 0, 3, 2, 2, 1, 3, 2))
        self.assertTrue(rect_hit(5, 5, 1, 1, 5, 5, 1, 1))
        self.assertFalse(rect_hit(0, 0, 3, 2, 3, 0, 3, 2))
        self.assertFalse(rect_hit(0, 0, 3, 2, 0, 2, 3, 2))

    def test_swept_bullet_cannot_tunnel(self):
        """A six-row jump over an enemy still registers."""
        enemy = Enemy(x=20, y=6)
        bullet = Bullet(x=20, y=4, y0=10)
        self.assertTrue(bullet_hits_enemy(bullet, enemy))

    def test_swept_bullet_column_span(self):
        enemy = Enemy(x=20, y=6)
        self.assertTrue(bullet_hits_enemy(Bullet(x=19, y=6, y0=8), enemy))
        self.assertTrue(bullet_hits_enemy(Bullet(x=21, y=7, y0=7), enemy))
        self.assertFalse(bullet_hits_enemy(Bullet(x=22, y=6, y0=8), enemy))
        self.assertFalse(bullet_hits_enemy(Bullet(x=20, y=8, y0=10), enemy))
        self.assertFalse(bullet_hits_enemy(Bullet(x=20, y=3, y0=5), enemy))


class TestPlayerMechanics(unittest.TestCase):

    def test_player_clamped_to_field(self):
        for width in (60, 61, 97, 200):
            world = make_world(width=width)
            for _ in range(width):
                player_input_system(world, frozenset([Action.LEFT]))
            self.assertEqual(world.player.x, 3)
            for _ in range(width):
                player_input_system(world, frozenset([Action.RIGHT]))
            self.assertEqual(world.player.x, width - 4)

    def test_left_and_right_cancel(self):
        world = make_world()
        start = world.player.x
        player_input_system(world, frozenset([Action.LEFT, Action.RIGHT]))
        self.assertEqual(world.player.x, start)

    def test_classic_steps_one_cell(self):
        world = make_world(config=CLASSIC)
        start = world.player.x
        player_input_system(world, frozenset([Action.RIGHT]))
        self.assertEqual(world.player.x, start + 1)

    def test_fire_spawns_fan_and_sets_cooldown(self):
        world = make_world()
        fire_control_system(world, frozenset([Action.SHOOT]), TICK_MS)
        xs = sorted(b.x for b in world.bullets)
        px = world.player.x
        self.assertEqual(xs, [px - 1, px, px + 1])
        self.assertEqual(world.player.cooldown_ms, QUIET.base_cooldown_ms)

        # Still cooling down: no new bullets
        fire_control_system(world, frozenset([Action.SHOOT]), TICK_MS)
        self.assertEqual(len(world.bullets), 3)

    def test_cooldown_never_negative(self):
        world = make_world()
        fire_control_system(world, NO_KEYS, 5000)
        self.assertEqual(world.player.cooldown_ms, 0)

    def test_powered_cooldown_is_shorter(self):
        world = make_world()
        activate_power(world.session, QUIET.power_duration_ms)
        fire_control_system(world, frozenset([Action.SHOOT]), TICK_MS)
        self.assertEqual(world.player.cooldown_ms, QUIET.powered_cooldown_ms)
        self.assertEqual(len(world.bullets), len(QUIET.fire_offsets))

    def test_off_grid_offsets_are_skipped(self):
        world = make_world(config=QUIET.replace(fire_offsets=(-3, 0, 3)))
        world.player.x = 3
        spawned = spawn_bullet_fan(world)
        self.assertEqual(sorted(b.x for b in spawned), [3, 6])

    def test_shoot_cue_played(self):
        backend = RecordingBackend()
        world = make_world(audio=AudioCues(backend))
        fire_control_system(world, frozenset([Action.SHOOT]), TICK_MS)
        self.assertEqual(len(backend.calls), 1)


class TestBullets(unittest.TestCase):

    def test_bullet_records_previous_row(self):
        world = make_world()
        world.bullets.append(Bullet(x=10, y=12, y0=12))
        bullet_system(world)
        bullet = world.bullets[0]
        self.assertEqual(bullet.y0, 12)
        self.assertEqual(bullet.y, 12 - QUIET.bullet_speed)

    def test_bullet_removed_above_top(self):
        world = make_world()
        world.bullets.append(Bullet(x=10, y=world.top, y0=world.top))
        world.bullets.append(Bullet(x=11, y=15, y0=15))
        bullet_system(world)
        self.assertEqual([b.x for b in world.bullets], [11])


class TestScoring(unittest.TestCase):

    def test_hit_points_by_tier(self):
        world = make_world()
        boss = create_boss(world)
        self.assertGreaterEqual(TIER_HP[2], TIER_HP[1])
        self.assertGreater(boss.hp, TIER_HP[2])

    def test_tier1_kill_scores_20(self):
        world = make_world()
        create_enemy(world, 20, tier=1)
        world.enemies[0].y = 10
        world.bullets.append(Bullet(x=20, y=13, y0=13))
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(world.enemies, [])
        self.assertEqual(world.bullets, [])
        self.assertEqual(world.session.score, 20)

    def test_tier2_needs_two_hits(self):
        world = make_world()
        enemy = create_enemy(world, 20, tier=2)
        enemy.y = 10

        world.bullets.append(Bullet(x=20, y=13, y0=13))
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(world.session.score, 5)
        self.assertEqual(world.enemies, [enemy])
        self.assertEqual(enemy.hp, 1)

        world.bullets.append(Bullet(x=20, y=13, y0=13))
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(world.session.score, 45)
        self.assertEqual(world.enemies, [])

    def test_bullet_hits_only_first_enemy(self):
        world = make_world()
        first = create_enemy(world, 20, tier=2)
        second = create_enemy(world, 20, tier=2)
        first.y = second.y = 10
        world.bullets.append(Bullet(x=20, y=13, y0=13))
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(first.hp, 1)
        self.assertEqual(second.hp, 2)
        self.assertEqual(world.bullets, [])

    def test_boss_kill_bonus_and_cue(self):
        backend = RecordingBackend()
        world = make_world(config=QUIET.replace(boss_hp=1),
                           audio=AudioCues(backend))
        boss = create_boss(world)
        world.session.boss_spawned = True
        world.bullets.append(Bullet(x=boss.x, y=boss.y + 3, y0=boss.y + 3))
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(world.session.score,
                         QUIET.tier2_kill_score + QUIET.boss_bonus)
        self.assertIsNone(world.boss())
        self.assertTrue(backend.calls)

    def test_score_never_decreases(self):
        world = make_world(config=ARCADE)
        last = 0
        for i in range(600):
            keys = frozenset([Action.SHOOT, Action.LEFT if i % 40 < 20 else Action.RIGHT])
            simulation_step(world, keys, TICK_MS)
            self.assertGreaterEqual(world.session.score, last)
            self.assertEqual(world.session.level,
                             level_for_score(world.session.score))
            last = world.session.score
            if world.session.game_over:
                break


class TestLives(unittest.TestCase):

    def test_lose_life_clamps_and_ends(self):
        world = make_world(config=QUIET.replace(lives=1))
        lose_life(world.session)
        lose_life(world.session)
        self.assertEqual(world.session.lives, 0)
        self.assertTrue(world.session.game_over)

    def test_three_collisions_end_the_game(self):
        world = make_world()
        for expected in (2, 1, 0):
            create_enemy(world, world.player.x)
            world.enemies[-1].y = world.player.y
            simulation_step(world, NO_KEYS, TICK_MS)
            self.assertEqual(world.session.lives, expected)
        self.assertTrue(world.session.game_over)
        self.assertEqual(world.session.score, 0)

    def test_simultaneous_rams_stop_at_zero(self):
        world = make_world(config=QUIET.replace(lives=1))
        for dx in (-1, 0, 1):
            create_enemy(world, world.player.x + dx)
            world.enemies[-1].y = world.player.y
        simulation_step(world, NO_KEYS, TICK_MS)
        self.assertEqual(world.session.lives, 0)
        self.assertTrue(world.session.game_over)

    def test_leaked_enemy_costs_life(self):
        world = make_world()
        enemy = create_enemy(world, 10)
        enemy.y = world.bottom - 1
        simulation_step(world, NO_KEYS, world.session.enemy_move_ms)
        self.assertEqual(world.enemies, [])
        self.assertEqual(world.session.lives, QUIET.lives - 1)

    def test_enemy_waits_for_move_period(self):
        world = make_world()
        enemy = create_enemy(world, 10)
        start = enemy.y
        simulation_step(world, NO_KEYS, world.session.enemy_move_ms - 1)
        self.assertEqual(enemy.y, start)
        simulation_step(world, NO_KEYS, 1)
        self.assertEqual(enemy.y, start + 1)


class TestPowerUps(unittest.TestCase):

    def test_pickup_resets_window(self):
        world = make_world()
        session = world.session
        player = world.player

        session.clock_ms = 100
        world.powerups.append(PowerUp(x=player.x, y=player.y))
        pickup_system(world)
        self.assertEqual(session.power_until_ms, 6100)

        session.clock_ms = 200
        world.powerups.append(PowerUp(x=player.x + 1, y=player.y + 1))
        pickup_system(world)
        self.assertEqual(session.power_until_ms, 6200)
        self.assertEqual(world.powerups, [])

    def test_missed_powerup_is_harmless(self):
        world = make_world()
        world.powerups.append(PowerUp(x=5, y=world.bottom - 1))
        simulation_step(world, NO_KEYS, QUIET.powerup_move_ms)
        self.assertEqual(world.powerups, [])
        self.assertEqual(world.session.lives, QUIET.lives)

    def test_powerup_spawns_follow_rate(self):
        world = make_world(config=ARCADE.replace(powerup_rate=2.0, powerup_chance=1.0))
        powerup_spawn_system(world, 1000)
        self.assertEqual(len(world.powerups), 2)
        for powerup in world.powerups:
            self.assertEqual(powerup.y, world.top)
            self.assertTrue(1 <= powerup.x <= world.width - 2)

    def test_powerup_chance_gates_each_slot(self):
        world = make_world(config=ARCADE.replace(powerup_rate=2.0, powerup_chance=0.0))
        powerup_spawn_system(world, 1000)
        self.assertEqual(world.powerups, [])
        self.assertLess(world.clocks.powerup_spawn, 1.0)

    def test_powerup_rate_accumulates_across_ticks(self):
        world = make_world(config=ARCADE.replace(powerup_rate=1.0, powerup_chance=1.0))
        powerup_spawn_system(world, 600)
        self.assertEqual(world.powerups, [])
        powerup_spawn_system(world, 600)
        self.assertEqual(len(world.powerups), 1)
        self.assertAlmostEqual(world.clocks.powerup_spawn, 0.2)

    def test_no_powerups_when_disabled(self):
        world = make_world(config=CLASSIC.replace(powerup_rate=5.0, powerup_chance=1.0))
        powerup_spawn_system(world, 1000)
        self.assertEqual(world.powerups, [])
        self.assertEqual(world.clocks.powerup_spawn, 0.0)


class TestProgression(unittest.TestCase):

    def test_level_formula(self):
        self.assertEqual(level_for_score(0), 1)
        self.assertEqual(level_for_score(249), 1)
        self.assertEqual(level_for_score(250), 2)
        self.assertEqual(level_for_score(1000), 5)

    def test_boss_spawns_once_at_level_two(self):
        world = make_world()
        session = world.session

        session.score = 240
        level_system(world)
        self.assertIsNone(world.boss())

        session.score = 260
        level_system(world)
        boss = world.boss()
        self.assertIsNotNone(boss)
        self.assertTrue(session.boss_spawned)
        self.assertEqual(boss.hp, QUIET.boss_hp)

        world.enemies.clear()
        session.score = 800
        level_system(world)
        self.assertIsNone(world.boss())
        self.assertEqual(session.level, 4)

    def test_boss_spawn_plays_cue(self):
        backend = RecordingBackend()
        world = make_world(audio=AudioCues(backend))
        world.session.score = 260
        level_system(world)
        self.assertIn(CUES['boss_spawn'], backend.calls)

    def test_classic_has_no_boss(self):
        world = make_world(config=CLASSIC)
        world.session.score = 300
        level_system(world)
        self.assertIsNone(world.boss())

    def test_difficulty_rises_with_level(self):
        world = make_world(config=ARCADE)
        session = world.session
        rate, period = session.spawn_rate, session.enemy_move_ms
        session.score = 2500
        level_system(world)
        self.assertGreater(session.spawn_rate, rate)
        self.assertLess(session.enemy_move_ms, period)
        session.score = 100000
        level_system(world)
        self.assertEqual(session.spawn_rate, ARCADE.max_spawn_rate)
        self.assertEqual(session.enemy_move_ms, ARCADE.min_enemy_move_ms)

    def test_boss_suppresses_spawning(self):
        world = make_world(config=ARCADE.replace(base_spawn_rate=100.0))
        create_boss(world)
        enemy_spawn_system(world, 1000)
        self.assertEqual(len(world.enemies), 1)

    def test_spawning_follows_rate(self):
        world = make_world(config=ARCADE.replace(base_spawn_rate=2.0))
        enemy_spawn_system(world, 1000)
        self.assertEqual(len(world.enemies), 2)
        for enemy in world.enemies:
            self.assertEqual(enemy.y, world.top)
            self.assertIn(enemy.tier, (1, 2))


class TestStarfield(unittest.TestCase):

    def test_star_wraps_to_top(self):
        world = make_world()
        world.stars = [Star(x=5, y=world.height - 1, speed=2), Star(x=6, y=3, speed=1)]
        star_system(world, QUIET.star_drift_ms)
        wrapped, drifting = world.stars
        self.assertEqual(wrapped.y, 0)
        self.assertTrue(0 <= wrapped.x < world.width)
        self.assertIn(wrapped.speed, (1, 2, 3))
        self.assertEqual(drifting.y, 4)

    def test_star_drift_catches_up(self):
        world = make_world()
        world.stars = [Star(x=5, y=0, speed=1)]
        star_system(world, QUIET.star_drift_ms * 3)
        self.assertEqual(world.stars[0].y, 3)


if __name__ == '__main__':
    unittest.main(verbosity=2)
