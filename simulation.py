# simulation.py

"""
Simulation Core

The Simulation object owns every piece of mutable game state (rocket,
particles, background, state machine) and advances it one fixed logical
tick per call to advance(). It never draws; after each tick the driver asks
for a FrameSnapshot and hands it to the renderer.

Data Contract:
- Inputs:
    - config (dict): the 'simulation' section of config.json.
    - rng (np.random.Generator): shared source of randomness.
    - bounds (tuple): (width, height) of the viewport in pixels.
    - schedule (callable): schedule(delay_ms, callback) runs callback once,
      later, outside of advance(). Used only for EXPLODED -> FINISHED.
- Invariants:
    - Player commands never raise; illegal ones are ignored.
    - A delayed FINISHED transition belonging to an earlier run is a no-op.
    - No delta-time scaling: every advance() is exactly one tick.
"""

import logging
import math
from typing import NamedTuple, Optional

import numpy as np

import constants
from background import BackgroundField
from color import interpolate_color
from game_state import GameState, GameStateMachine
from particle_system import ParticlePool
from rocket import Rocket

logger = logging.getLogger("rocket_escape")

SCREEN_START = 'start'
SCREEN_HUD = 'hud'
SCREEN_GAME_OVER = 'game_over'

SCREEN_FOR_STATE = {
    GameState.START: SCREEN_START,
    GameState.PLAYING: SCREEN_HUD,
    GameState.EXPLODED: SCREEN_HUD,
    GameState.FINISHED: SCREEN_GAME_OVER,
}


class FrameSnapshot(NamedTuple):
    """Everything the presentation layer needs for one frame."""
    state: GameState
    screen: str
    altitude_km: int
    boost_fill: float
    boost_danger: bool
    final_altitude_km: Optional[int]
    end_title: Optional[str]
    end_title_color: Optional[str]
    alt_factor: float
    sky_top: tuple
    sky_bottom: tuple
    show_rocket: bool
    rocket_x: float
    rocket_y: float
    rocket_tilt: float


class Simulation:
    def __init__(self, config: dict, rng: np.random.Generator, bounds: tuple, schedule):
        self.config = config
        self.rng = rng
        self.schedule = schedule
        self.bounds = self._validate_bounds(bounds)

        self.gravity = config['gravity']
        self.thrust_power = config['thrust_power']
        self.max_heat = config['max_heat']
        self.heat_up_rate = config['heat_up_rate']
        self.cool_down_rate = config['cool_down_rate']
        self.danger_threshold = config['heat_danger_threshold']
        self.ground_line_ratio = config['ground_line_ratio']
        self.explosion_delay_ms = config['explosion_delay_ms']
        self.space_altitude = config['space_altitude']
        self.units_per_km = config.get('altitude_units_per_km', 100)
        self.log_interval = config.get('log_interval_ticks', 300)

        self.state_machine = GameStateMachine()
        self.rocket = Rocket(self.ground_y)
        self.particles = ParticlePool(config, rng, self.bounds)
        self.background = BackgroundField(config, rng, self.bounds)

        self.tick = 0
        self.final_altitude_km = None
        self.end_title = None
        self.end_title_color = None
        self.explosion_particles_emitted = 0

        logger.info(f"Simulation created for viewport {self.bounds[0]}x{self.bounds[1]}.")

    @staticmethod
    def _validate_bounds(bounds: tuple) -> tuple:
        width, height = bounds
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must have a positive size, got {width}x{height}")
        return (width, height)

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def ground_y(self) -> float:
        return self.bounds[1] * self.ground_line_ratio

    @property
    def rocket_x(self) -> float:
        return self.bounds[0] / 2

    def to_km(self, altitude: float) -> int:
        return int(math.floor(altitude / self.units_per_km))

    # --- Player Commands ---

    def start_game(self) -> bool:
        """
        Starts a new run (from START, PLAYING or FINISHED): fresh rocket on the
        ground line, no particles. The background is kept.
        Returns False if the command was ignored.
        """
        if not self.state_machine.can_transition(GameState.PLAYING):
            logger.debug(f"Start ignored in state {self.state.value}.")
            return False

        self.state_machine.transition(GameState.PLAYING)
        self.rocket = Rocket(self.ground_y)
        self.particles.clear()
        self.final_altitude_km = None
        self.end_title = None
        self.end_title_color = None
        self.explosion_particles_emitted = 0
        return True

    def return_to_title(self) -> bool:
        if not self.state_machine.can_transition(GameState.START):
            logger.debug(f"Return to title ignored in state {self.state.value}.")
            return False
        self.state_machine.transition(GameState.START)
        return True

    def boost_start(self):
        if self.state is GameState.PLAYING:
            self.rocket.is_boosting = True

    def boost_stop(self):
        self.rocket.is_boosting = False

    def resize(self, bounds: tuple):
        """
        Viewport changed: repopulate the background for the new bounds and keep
        the rocket on or above the new ground line.
        """
        self.bounds = self._validate_bounds(bounds)
        self.rocket.y = min(self.rocket.y, self.ground_y)
        self.particles.resize(self.bounds)
        self.background.populate(self.bounds)
        logger.info(f"Viewport resized to {self.bounds[0]}x{self.bounds[1]}.")

    def share_text(self) -> str:
        return constants.SHARE_TEMPLATE.format(km=self.to_km(self.rocket.peak_altitude))

    # --- Tick ---

    def advance(self):
        """
        Advances the whole simulation by one tick.
        Nothing moves in START or FINISHED.
        """
        state = self.state
        if state is not GameState.PLAYING and state is not GameState.EXPLODED:
            return

        self.tick += 1

        if state is GameState.PLAYING:
            self._update_rocket()

        # Particles and background keep animating while the debris flies
        self.particles.update()
        self.background.update(self.rocket.vy)

        if self.tick % self.log_interval == 0:
            logger.debug(
                f"Tick={self.tick}, "
                f"State={self.state.value}, "
                f"Altitude={self.rocket.altitude:.1f}, "
                f"Peak={self.rocket.peak_altitude:.1f}, "
                f"Heat={self.rocket.heat:.1f}, "
                f"Vy={self.rocket.vy:+.2f}, "
                f"Particles={len(self.particles)}"
            )

    def _update_rocket(self):
        rocket = self.rocket
        overheated = rocket.update_heat(self.thrust_power, self.heat_up_rate, self.cool_down_rate, self.max_heat)

        if rocket.is_boosting:
            self.particles.emit_exhaust(
                self.rocket_x,
                rocket.y + rocket.height / 2,
                hot=rocket.heat > self.danger_threshold
            )

        if overheated:
            self._explode()

        # Physics still completes on the tick the rocket explodes
        rocket.integrate(self.gravity, self.ground_y)

    def _explode(self):
        generation = self.state_machine.transition(GameState.EXPLODED)
        self.rocket.is_boosting = False
        self.end_title = constants.OVERHEAT_TITLE
        self.end_title_color = constants.OVERHEAT_TITLE_COLOR
        self.explosion_particles_emitted = self.particles.emit_explosion(self.rocket_x, self.rocket.y)

        logger.info(
            f"Rocket overheated at tick {self.tick}: peak altitude {self.rocket.peak_altitude:.1f} "
            f"({self.to_km(self.rocket.peak_altitude)} km)."
        )
        self.schedule(self.explosion_delay_ms, lambda: self.finish_run(generation))

    def finish_run(self, generation: int) -> bool:
        """
        Delayed EXPLODED -> FINISHED transition for run `generation`.
        Freezes the final altitude. A call for a run that has since been
        restarted does nothing.
        """
        if not self.state_machine.is_current(generation) or self.state is not GameState.EXPLODED:
            logger.warning(f"Ignoring stale finish for run {generation} (current run "
                           f"{self.state_machine.generation}, state {self.state.value}).")
            return False

        self.state_machine.transition(GameState.FINISHED)
        self.final_altitude_km = self.to_km(self.rocket.peak_altitude)
        logger.info(f"Run {generation} finished at {self.final_altitude_km} km.")
        return True

    # --- Presentation ---

    def snapshot(self) -> FrameSnapshot:
        rocket = self.rocket
        state = self.state
        alt_factor = min(1.0, rocket.peak_altitude / self.space_altitude)
        return FrameSnapshot(
            state=state,
            screen=SCREEN_FOR_STATE[state],
            altitude_km=self.to_km(rocket.peak_altitude),
            boost_fill=min(100.0, rocket.heat),
            boost_danger=rocket.heat > self.danger_threshold,
            final_altitude_km=self.final_altitude_km if state is GameState.FINISHED else None,
            end_title=self.end_title,
            end_title_color=self.end_title_color,
            alt_factor=alt_factor,
            sky_top=interpolate_color(constants.SKY_TOP_GROUND, constants.SKY_TOP_SPACE, alt_factor),
            sky_bottom=interpolate_color(constants.SKY_BOTTOM_GROUND, constants.SKY_BOTTOM_SPACE, alt_factor),
            show_rocket=state is not GameState.EXPLODED and state is not GameState.FINISHED,
            rocket_x=self.rocket_x,
            rocket_y=rocket.y,
            rocket_tilt=rocket.vy * constants.ROCKET_TILT_FACTOR,
        )
