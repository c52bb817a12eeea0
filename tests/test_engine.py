import numpy as np
import pytest

from constants import MAX_DELTA_TIME
from engine import FrameDriver, ParticleEngine
from settings import SimulationSettings


@pytest.fixture
def engine(rng):
    return ParticleEngine(SimulationSettings(particle_count=50), bounds=(800, 600), rng=rng)


# --- FrameDriver ---

def test_first_delta_is_zero():
    driver = FrameDriver()
    assert driver.next_delta(12345.0) == 0.0


def test_delta_is_elapsed_seconds():
    driver = FrameDriver()
    driver.next_delta(1000.0)
    assert driver.next_delta(1016.0) == pytest.approx(0.016)
    assert driver.next_delta(1049.0) == pytest.approx(0.033)


def test_large_gaps_are_clamped():
    driver = FrameDriver()
    driver.next_delta(0.0)
    assert driver.next_delta(5000.0) == MAX_DELTA_TIME


def test_backwards_timestamps_give_zero():
    driver = FrameDriver()
    driver.next_delta(2000.0)
    assert driver.next_delta(1500.0) == 0.0


def test_restart_forgets_last_timestamp():
    driver = FrameDriver()
    driver.next_delta(0.0)
    driver.restart()
    assert driver.next_delta(50.0) == 0.0


def test_cancel_is_permanent():
    driver = FrameDriver()
    driver.next_delta(0.0)
    driver.cancel()

    assert not driver.running
    assert driver.next_delta(16.0) is None
    driver.restart()
    assert driver.next_delta(32.0) is None


# --- ParticleEngine ---

def test_engine_initializes_with_bounds(engine):
    assert len(engine.particles) == 50
    assert engine.ready
    assert engine.running


def test_engine_waits_for_bounds(rng):
    engine = ParticleEngine(SimulationSettings(particle_count=30), rng=rng)
    assert len(engine.particles) == 0
    assert engine.tick(0.0)

    engine.set_bounds(640, 480)
    assert len(engine.particles) == 30
    assert engine.bounds == (640, 480)


def test_resize_does_not_reinitialize(engine):
    ids = engine.particles.ids.copy()
    engine.set_bounds(1024, 768)
    np.testing.assert_array_equal(engine.particles.ids, ids)


def test_tick_advances_population(engine):
    engine.tick(0.0)
    before = engine.particles.positions.copy()
    engine.tick(16.0)

    assert engine.last_delta == pytest.approx(0.016)
    assert not np.array_equal(engine.particles.positions, before)


def test_first_tick_uses_zero_delta(engine):
    assert engine.tick(99999.0)
    assert engine.last_delta == 0.0


def test_tick_without_area_is_noop(engine):
    engine.set_bounds(0, 0)
    engine.tick(0.0)
    before = engine.particles.positions.copy()

    engine.tick(16.0)

    np.testing.assert_array_equal(engine.particles.positions, before)


def test_update_settings_reconciles_count(engine):
    engine.update_settings(engine.settings.with_changes(particle_count=120))
    assert len(engine.particles) == 120

    engine.update_settings(engine.settings.with_changes(particle_count=10))
    assert len(engine.particles) == 10


def test_update_settings_without_count_change_keeps_population(engine):
    engine.insert_at(100, 100, 5)
    engine.update_settings(engine.settings.with_changes(gravity=0.2, show_trails=False))

    assert len(engine.particles) == 55
    assert engine.settings.gravity == 0.2


def test_inserted_particles_are_dropped_first_on_shrink(engine):
    original = engine.particles.ids.copy()
    engine.insert_at(400, 300)
    assert len(engine.particles) == 60

    engine.update_settings(engine.settings.with_changes(particle_count=40))

    np.testing.assert_array_equal(engine.particles.ids, original[:40])


def test_setting_the_current_count_keeps_inserted_particles(engine):
    engine.insert_at(400, 300)
    engine.update_settings(engine.settings.with_changes(particle_count=50))

    assert len(engine.particles) == 60


def test_count_change_without_area_applies_when_area_returns(engine):
    engine.set_bounds(0, 0)
    engine.update_settings(engine.settings.with_changes(particle_count=20))
    assert len(engine.particles) == 50

    engine.set_bounds(800, 600)
    engine.tick(0.0)
    engine.tick(16.0)

    assert len(engine.particles) == 20
    assert not engine.reconcile_pending


def test_random_colors_survive_later_color_edits(rng):
    engine = ParticleEngine(SimulationSettings(particle_count=30, color_mode="random"),
                            bounds=(800, 600), rng=rng)
    engine.tick(0.0)
    colors = engine.particles.colors.copy()

    engine.update_settings(engine.settings.with_changes(color_mode="solid", base_color="#000000"))
    engine.tick(16.0)
    engine.tick(32.0)

    np.testing.assert_array_equal(engine.particles.colors, colors)


def test_solid_colors_ignore_new_base_color(rng):
    engine = ParticleEngine(SimulationSettings(particle_count=30, color_mode="solid", base_color="#102030"),
                            bounds=(800, 600), rng=rng)
    engine.tick(0.0)

    engine.update_settings(engine.settings.with_changes(base_color="#ff0000"))
    engine.tick(16.0)

    assert np.all(engine.particles.colors == [16, 32, 48])
    # Only particles created afterwards pick up the new base color
    engine.insert_at(100, 100, 3)
    assert np.all(engine.particles.colors[-3:] == [255, 0, 0])


def test_insert_at_defaults_to_ten(engine):
    new_ids = engine.insert_at(400, 300)

    assert len(new_ids) == 10
    assert np.all(engine.particles.positions[-10:] == [400.0, 300.0])


def test_reset_discards_insertions_and_restarts_clock(engine):
    engine.tick(0.0)
    engine.tick(16.0)
    engine.insert_at(10, 10, 7)

    engine.reset()
    assert len(engine.particles) == 50

    engine.tick(500.0)
    assert engine.last_delta == 0.0


def test_settings_apply_on_next_tick(engine):
    engine.tick(0.0)
    engine.tick(16.0)
    assert np.all(engine.particles.trail_lengths == 2)

    engine.update_settings(engine.settings.with_changes(show_trails=False))
    engine.tick(32.0)

    assert np.all(engine.particles.trail_lengths == 0)


def test_cancelled_engine_stops_simulating(engine):
    engine.tick(0.0)
    engine.cancel()
    before = engine.particles.positions.copy()

    assert engine.tick(16.0) is False
    assert not engine.running
    np.testing.assert_array_equal(engine.particles.positions, before)


def test_degenerate_max_speed_gives_stationary_particles(rng):
    settings = SimulationSettings(particle_count=20, max_speed=0, gravity=0.0)
    engine = ParticleEngine(settings, bounds=(800, 600), rng=rng)

    engine.tick(0.0)
    engine.tick(16.0)

    assert np.all(engine.particles.velocities == 0)
    assert np.all(engine.particles.colors == [0, 100, 255])
