# particle_system.py

import numpy as np
import logging
import numba
import constants
from color import parse_hex_color
from particle import Particle

logger = logging.getLogger("rocket_escape")

# --- JIT-Compiled Particle Kernel ---
# Kept outside the ParticlePool class and operating only on NumPy arrays and
# scalars, as required by Numba's nopython mode.

@numba.jit(nopython=True, fastmath=True)
def _advance_particles_jit(count, positions, velocities, lives, sizes, colors, decay, floor_y):
    """
    Moves every live particle by its velocity, ages it by `decay`, and compacts
    the arrays in place so that survivors occupy [0, new_count) in their
    original order. A particle dies when its life is used up or it has fallen
    below floor_y.
    Returns the new live count.
    """
    write = 0
    for i in range(count):
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]
        lives[i] -= decay

        if lives[i] <= 0.0 or positions[i, 1] > floor_y:
            continue

        if write != i:
            positions[write, 0] = positions[i, 0]
            positions[write, 1] = positions[i, 1]
            velocities[write, 0] = velocities[i, 0]
            velocities[write, 1] = velocities[i, 1]
            lives[write] = lives[i]
            sizes[write] = sizes[i]
            colors[write, 0] = colors[i, 0]
            colors[write, 1] = colors[i, 1]
            colors[write, 2] = colors[i, 2]
        write += 1
    return write


class ParticlePool:
    """
    Bounded pool of exhaust and explosion particles.

    Data Contract:
    - Inputs:
        - config (dict): the 'simulation' section of config.json.
        - rng (np.random.Generator): source of all particle randomness.
        - bounds (tuple): (width, height) of the viewport in pixels.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Manages the lifecycle of all particle data.
    - Invariants:
        - Exhaust is only emitted while fewer than `max_particles` are alive,
          so exhaust alone never grows the pool past that cap.
        - An explosion burst is always emitted in full; the arrays reserve
          room for one burst above the exhaust cap.
        - Live particles occupy indices [0, count) of every array.
    """
    def __init__(self, config: dict, rng: np.random.Generator, bounds: tuple):
        self.rng = rng
        self.bounds = np.array(bounds, dtype=float)
        self.max_particles = config['max_particles']
        self.burst_size = config['explosion_particle_count']
        self.explosion_speed = config['explosion_speed']
        self.decay = config['particle_decay']
        self.floor_margin = config.get('particle_floor_margin', 50)

        # Structure of Arrays, pre-allocated once
        self.capacity = self.max_particles + self.burst_size
        self.positions = np.zeros((self.capacity, 2), dtype=float)
        self.velocities = np.zeros((self.capacity, 2), dtype=float)
        self.lives = np.zeros(self.capacity, dtype=float)
        self.sizes = np.zeros(self.capacity, dtype=float)
        self.colors = np.zeros((self.capacity, 3), dtype=np.uint8)
        self.count = 0

        self._exhaust_color = parse_hex_color(constants.EXHAUST_COLOR)
        self._exhaust_hot_color = parse_hex_color(constants.EXHAUST_HOT_COLOR)
        self._explosion_color = parse_hex_color(constants.EXPLOSION_COLOR)

        logger.info(f"ParticlePool created with exhaust cap {self.max_particles} (capacity {self.capacity}).")

    def __len__(self):
        return self.count

    def __iter__(self):
        for i in range(self.count):
            yield Particle(
                float(self.positions[i, 0]), float(self.positions[i, 1]),
                float(self.velocities[i, 0]), float(self.velocities[i, 1]),
                float(self.lives[i]), float(self.sizes[i]),
                tuple(int(c) for c in self.colors[i])
            )

    def clear(self):
        self.count = 0

    def resize(self, bounds: tuple):
        self.bounds = np.array(bounds, dtype=float)

    def _append(self, x, y, vx, vy, size, color):
        i = self.count
        self.positions[i] = (x, y)
        self.velocities[i] = (vx, vy)
        self.lives[i] = 1.0
        self.sizes[i] = size
        self.colors[i] = color
        self.count += 1

    def emit_exhaust(self, x: float, y: float, hot: bool) -> bool:
        """
        Emits one exhaust particle at the rocket's tail, drifting downward.
        At the cap the particle is simply not created.
        Returns True if a particle was emitted.
        """
        if self.count >= self.max_particles:
            return False

        jitter, vx, vy, size = self.rng.random(4)
        self._append(
            x + (jitter - 0.5) * 10,
            y,
            (vx - 0.5) * 2,
            5 + vy * 5,
            size * 8 + 2,
            self._exhaust_hot_color if hot else self._exhaust_color
        )
        return True

    def emit_explosion(self, x: float, y: float) -> int:
        """
        Emits a full burst of debris at (x, y) with isotropic random velocity
        in [-explosion_speed/2, explosion_speed/2] on each axis.
        Returns the number of particles emitted.
        """
        n = min(self.burst_size, self.capacity - self.count)
        if n < self.burst_size:
            # Only reachable if bursts are stacked without a reset in between
            logger.warning(f"Explosion burst truncated to {n} particles; pool is full.")
        start, end = self.count, self.count + n

        self.positions[start:end] = (x, y)
        self.velocities[start:end] = (self.rng.random((n, 2)) - 0.5) * self.explosion_speed
        self.lives[start:end] = 1.0
        self.sizes[start:end] = self.rng.random(n) * 10 + 5
        self.colors[start:end] = self._explosion_color
        self.count = end
        return n

    def update(self):
        """
        Advances every particle by one tick and removes the dead ones.
        """
        floor_y = self.bounds[1] + self.floor_margin
        self.count = _advance_particles_jit(
            self.count,
            self.positions,
            self.velocities,
            self.lives,
            self.sizes,
            self.colors,
            self.decay,
            floor_y
        )
