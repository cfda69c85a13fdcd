import math

import pytest

import constants
from game_state import GameState
from simulation import Simulation


def boost_ticks(sim, n):
    """Holds boost for up to n ticks, re-pressing every tick like a held key."""
    for _ in range(n):
        sim.boost_start()
        sim.advance()


def test_initial_state(simulation):
    assert simulation.state is GameState.START
    snap = simulation.snapshot()
    assert snap.screen == 'start'
    assert snap.altitude_km == 0
    assert snap.show_rocket


def test_nothing_moves_before_start(simulation):
    stars_before = simulation.background.stars.ys.copy()
    simulation.advance()
    assert simulation.tick == 0
    assert (simulation.background.stars.ys == stars_before).all()


def test_boost_ignored_unless_playing(simulation):
    simulation.boost_start()
    assert not simulation.rocket.is_boosting
    simulation.start_game()
    simulation.boost_start()
    assert simulation.rocket.is_boosting
    simulation.boost_stop()
    assert not simulation.rocket.is_boosting


def test_start_places_rocket_on_ground(simulation, bounds):
    assert simulation.start_game()
    assert simulation.state is GameState.PLAYING
    assert simulation.rocket.y == bounds[1] * 0.8
    assert simulation.snapshot().screen == 'hud'


def test_idle_rocket_stays_on_ground(simulation):
    simulation.start_game()
    for _ in range(500):
        simulation.advance()
        assert simulation.rocket.y <= simulation.ground_y
    assert simulation.rocket.y == simulation.ground_y
    assert simulation.rocket.vy == 0.0
    assert simulation.rocket.altitude == 0.0


def test_boosting_climbs_and_heats(simulation):
    simulation.start_game()
    boost_ticks(simulation, 10)
    rocket = simulation.rocket
    assert rocket.heat == pytest.approx(15.0)
    assert rocket.vy == pytest.approx(-3.0)
    assert rocket.altitude == pytest.approx(0.3 * sum(range(1, 11)))
    assert len(simulation.particles) == 10


def test_overheat_explodes_on_crossing_tick(simulation, scheduler, sim_config):
    simulation.start_game()
    for tick in range(1, 201):
        boost_ticks(simulation, 1)
        if simulation.state is GameState.EXPLODED:
            break
    # 1.5 per tick reaches 100 on tick 67
    assert tick == math.ceil(100 / 1.5)
    assert simulation.rocket.heat == 100
    assert simulation.explosion_particles_emitted == 50
    assert not simulation.rocket.is_boosting
    assert simulation.end_title == constants.OVERHEAT_TITLE
    assert simulation.end_title_color == constants.OVERHEAT_TITLE_COLOR
    assert len(scheduler.pending) == 1
    assert scheduler.pending[0][0] == sim_config['explosion_delay_ms']

    snap = simulation.snapshot()
    assert snap.screen == 'hud'
    assert not snap.show_rocket
    assert snap.final_altitude_km is None


def test_two_hundred_boost_ticks_then_finish_and_restart(simulation, scheduler):
    simulation.start_game()
    boost_ticks(simulation, 200)
    assert simulation.state is GameState.EXPLODED
    assert simulation.rocket.heat == 100

    peak_at_explosion = simulation.rocket.peak_altitude
    scheduler.fire_all()
    assert simulation.state is GameState.FINISHED
    assert simulation.final_altitude_km == math.floor(peak_at_explosion / 100)

    snap = simulation.snapshot()
    assert snap.screen == 'game_over'
    assert snap.final_altitude_km == simulation.final_altitude_km

    assert simulation.start_game()
    rocket = simulation.rocket
    assert simulation.state is GameState.PLAYING
    assert (rocket.heat, rocket.altitude, rocket.peak_altitude) == (0.0, 0.0, 0.0)
    assert len(simulation.particles) == 0
    assert simulation.final_altitude_km is None


def test_debris_keeps_animating_after_explosion(simulation):
    simulation.start_game()
    boost_ticks(simulation, 67)
    assert simulation.state is GameState.EXPLODED
    peak = simulation.rocket.peak_altitude
    rocket_y = simulation.rocket.y
    count = len(simulation.particles)

    for _ in range(60):
        simulation.advance()
    assert len(simulation.particles) < count
    # The rocket itself no longer moves
    assert simulation.rocket.peak_altitude == peak
    assert simulation.rocket.y == rocket_y


def test_start_ignored_while_exploded(simulation):
    simulation.start_game()
    boost_ticks(simulation, 67)
    assert not simulation.start_game()
    assert simulation.state is GameState.EXPLODED


def test_stale_finish_is_a_no_op(simulation, scheduler):
    simulation.start_game()
    first_run = simulation.state_machine.generation
    boost_ticks(simulation, 67)
    scheduler.fire_all()
    simulation.start_game()
    boost_ticks(simulation, 67)
    assert simulation.state is GameState.EXPLODED

    assert not simulation.finish_run(first_run)
    assert simulation.state is GameState.EXPLODED
    scheduler.fire_all()
    assert simulation.state is GameState.FINISHED


def test_finish_after_restart_does_nothing(simulation, scheduler):
    simulation.start_game()
    boost_ticks(simulation, 67)
    scheduler.fire_all()
    simulation.start_game()
    # A duplicate firing of the first run's timer
    assert not simulation.finish_run(1)
    assert simulation.state is GameState.PLAYING


def test_invariants_under_random_input(simulation, rng):
    simulation.start_game()
    previous_peak = 0.0
    for pressed in rng.random(3000) < 0.55:
        if simulation.state is GameState.FINISHED or simulation.state is GameState.EXPLODED:
            simulation.finish_run(simulation.state_machine.generation)
            simulation.start_game()
            previous_peak = 0.0
        if pressed:
            simulation.boost_start()
        else:
            simulation.boost_stop()
        simulation.advance()

        rocket = simulation.rocket
        assert 0.0 <= rocket.heat <= 100.0
        assert rocket.peak_altitude >= previous_peak
        assert 0.0 <= rocket.altitude <= rocket.peak_altitude
        assert rocket.y <= simulation.ground_y
        previous_peak = rocket.peak_altitude


def test_exhaust_alone_never_exceeds_cap(sim_config, rng, bounds, scheduler):
    config = dict(sim_config, max_particles=20, max_heat=10**9)
    sim = Simulation(config, rng, bounds, schedule=scheduler)
    sim.start_game()
    for _ in range(300):
        boost_ticks(sim, 1)
        assert len(sim.particles) <= 20
    assert len(sim.particles) == 20


def test_boost_gauge_danger_threshold(simulation):
    simulation.start_game()
    boost_ticks(simulation, 53)
    snap = simulation.snapshot()
    assert snap.boost_fill == pytest.approx(79.5)
    assert not snap.boost_danger
    boost_ticks(simulation, 1)
    assert simulation.snapshot().boost_danger


def test_sky_starts_at_ground_colors(simulation):
    snap = simulation.snapshot()
    assert snap.alt_factor == 0.0
    assert snap.sky_top == (0x87, 0xCE, 0xEB)
    assert snap.sky_bottom == (0xE0, 0xF6, 0xFF)


def test_sky_reaches_space_colors(simulation):
    simulation.rocket.peak_altitude = 10 * simulation.space_altitude
    snap = simulation.snapshot()
    assert snap.alt_factor == 1.0
    assert snap.sky_top == (0x0B, 0x0E, 0x14)


def test_altitude_display_in_km(simulation):
    simulation.rocket.peak_altitude = 1299.9
    assert simulation.snapshot().altitude_km == 12


def test_share_text(simulation):
    simulation.rocket.peak_altitude = 4321
    assert simulation.share_text() == "I reached 43 km in Rocket Escape! How far can you go?"


def test_return_to_title_only_from_finished(simulation, scheduler):
    assert not simulation.return_to_title()
    simulation.start_game()
    assert not simulation.return_to_title()
    boost_ticks(simulation, 67)
    scheduler.fire_all()
    assert simulation.return_to_title()
    assert simulation.snapshot().screen == 'start'


def test_resize_repopulates_background(simulation):
    simulation.resize((200, 300))
    assert simulation.ground_y == pytest.approx(240)
    assert (simulation.background.stars.xs < 200).all()
    assert (simulation.background.stars.ys < 300).all()


@pytest.mark.parametrize("size", [(0, 100), (100, 0), (-5, -5)])
def test_resize_rejects_empty_viewport(simulation, size):
    with pytest.raises(ValueError):
        simulation.resize(size)


def test_background_survives_restart(simulation):
    simulation.start_game()
    xs = simulation.background.stars.xs.copy()
    simulation.start_game()
    assert (simulation.background.stars.xs == xs).all()


def test_shrinking_viewport_keeps_rocket_above_ground(simulation):
    simulation.resize((200, 300))
    assert simulation.rocket.y == simulation.ground_y
    assert simulation.snapshot().rocket_y <= 300


def test_growing_viewport_leaves_airborne_rocket_alone(simulation):
    simulation.start_game()
    boost_ticks(simulation, 20)
    y = simulation.rocket.y
    simulation.resize((960, 1600))
    assert simulation.rocket.y == y
