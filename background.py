# background.py

import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger("rocket_escape")

# Read-only view of one star or cloud, used by the renderer.
BackgroundEntity = namedtuple('BackgroundEntity', ['x', 'y', 'size', 'drift_speed'])


class EntityLayer:
    """
    One population of drifting decorative entities stored as NumPy arrays.

    Every tick each entity moves by `vessel_vy * parallax + drift_speed`.
    Entities leaving the viewport are wrapped, never destroyed: past the bottom
    edge they reappear `wrap_margin` pixels above the top, above that margin
    they reappear at the bottom edge. Both cases draw a fresh horizontal
    position.

    size_range and speed_range are (minimum, span) pairs; values are drawn
    uniformly from [minimum, minimum + span).
    """
    def __init__(self, name: str, count: int, size_range: tuple, speed_range: tuple,
                 parallax: float, wrap_margin: float, rng: np.random.Generator):
        self.name = name
        self.count = count
        self.size_range = size_range
        self.speed_range = speed_range
        self.parallax = parallax
        self.wrap_margin = wrap_margin
        self.rng = rng

        self.xs = np.zeros(count, dtype=float)
        self.ys = np.zeros(count, dtype=float)
        self.sizes = np.zeros(count, dtype=float)
        self.speeds = np.zeros(count, dtype=float)

    def __len__(self):
        return self.count

    def __iter__(self):
        for i in range(self.count):
            yield BackgroundEntity(float(self.xs[i]), float(self.ys[i]), float(self.sizes[i]), float(self.speeds[i]))

    def populate(self, width: float, height: float):
        """Scatters the whole population uniformly over the viewport."""
        size_min, size_span = self.size_range
        speed_min, speed_span = self.speed_range
        self.xs = self.rng.random(self.count) * width
        self.ys = self.rng.random(self.count) * height
        self.sizes = self.rng.random(self.count) * size_span + size_min
        self.speeds = self.rng.random(self.count) * speed_span + speed_min

    def update(self, vessel_vy: float, width: float, height: float) -> int:
        """
        Vectorized drift and wrap.
        Returns the number of entities that wrapped this tick.
        """
        self.ys += vessel_vy * self.parallax + self.speeds

        below_mask = self.ys > height
        above_mask = self.ys < -self.wrap_margin
        self.ys[below_mask] = -self.wrap_margin
        self.ys[above_mask] = height

        wrapped_mask = below_mask | above_mask
        wrapped = int(np.count_nonzero(wrapped_mask))
        if wrapped:
            self.xs[wrapped_mask] = self.rng.random(wrapped) * width
        return wrapped


class BackgroundField:
    """
    Parallax background: distant stars and near clouds.

    Data Contract:
    - Inputs:
        - config (dict): the 'simulation' section of config.json.
        - rng (np.random.Generator): source of all placement randomness.
        - bounds (tuple): (width, height) of the viewport in pixels.
    - Invariants: Population counts are fixed for the lifetime of the field.
      After every update all entities lie within
      [-wrap_margin, height] vertically.
    """
    def __init__(self, config: dict, rng: np.random.Generator, bounds: tuple):
        self.width, self.height = bounds
        self.stars = EntityLayer(
            'stars', config['star_count'],
            size_range=(0.0, 2.0), speed_range=(0.1, 0.5),
            parallax=config['star_parallax'],
            wrap_margin=config.get('star_wrap_margin', 10),
            rng=rng
        )
        self.clouds = EntityLayer(
            'clouds', config['cloud_count'],
            size_range=(50.0, 100.0), speed_range=(0.5, 1.0),
            parallax=config['cloud_parallax'],
            wrap_margin=config.get('cloud_wrap_margin', 100),
            rng=rng
        )
        self.populate(bounds)

    def populate(self, bounds: tuple):
        """(Re)seeds both populations for a viewport of the given size."""
        self.width, self.height = bounds
        self.stars.populate(self.width, self.height)
        self.clouds.populate(self.width, self.height)
        logger.info(f"Background populated: {len(self.stars)} stars, {len(self.clouds)} clouds "
                    f"for viewport {self.width}x{self.height}.")

    def update(self, vessel_vy: float):
        self.stars.update(vessel_vy, self.width, self.height)
        self.clouds.update(vessel_vy, self.width, self.height)
