# conftest.py

import json
import os

# Must be set before pygame is imported anywhere
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pygame
import pytest

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')


class ManualScheduler:
    """Stands in for the pygame timer: callbacks only run when fired."""
    def __init__(self):
        self.pending = []

    def __call__(self, delay_ms, callback):
        self.pending.append((delay_ms, callback))

    def fire_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    pygame.init()
    pygame.display.set_mode((1, 1))
    yield
    pygame.quit()


@pytest.fixture
def sim_config():
    with open(CONFIG_PATH, 'r') as f:
        return json.load(f)['simulation']


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def bounds():
    return (480, 800)


@pytest.fixture
def simulation(sim_config, rng, bounds, scheduler):
    from simulation import Simulation
    return Simulation(sim_config, rng, bounds, schedule=scheduler)
