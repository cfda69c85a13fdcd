# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from game_state import GameState
from renderer import Renderer
from simulation import Simulation

# Get the application's dedicated logger
logger = logging.getLogger("rocket_escape")

TIMER_EVENT = pygame.USEREVENT + 1
# Left, middle and right; 4 and 5 are the scroll wheel
POINTER_BUTTONS = (1, 2, 3)


class PygameTimer:
    """
    One-shot delayed callbacks on top of pygame.time.set_timer.

    pygame keeps a single timer per event type, so scheduling again replaces
    any callback still pending. Callbacks run from the event loop, never from
    inside a tick.
    """
    def __init__(self, event_type: int = TIMER_EVENT):
        self.event_type = event_type
        self._pending = None

    def __call__(self, delay_ms: int, callback):
        self._pending = callback
        pygame.time.set_timer(self.event_type, int(delay_ms), loops=1)

    def handle(self, event) -> bool:
        if event.type != self.event_type:
            return False
        callback, self._pending = self._pending, None
        if callback is not None:
            callback()
        return True


def step_frame(simulation, renderer, screen, steps: int = 1) -> bool:
    """
    Runs `steps` simulation ticks and draws one frame.

    The update pass and the draw pass are isolated separately: an exception in
    either is logged and swallowed so the loop keeps running.
    Returns True if both passes succeeded.
    """
    ok = True
    try:
        for _ in range(steps):
            simulation.advance()
    except Exception:
        logger.exception(f"Simulation tick {simulation.tick} failed; continuing.")
        ok = False

    try:
        renderer.draw(screen, simulation.snapshot(), simulation.particles, simulation.background)
    except Exception:
        logger.exception(f"Drawing frame for tick {simulation.tick} failed; continuing.")
        ok = False
    return ok


def share(simulation):
    """Copies the share text to the clipboard, if the platform has one."""
    text = simulation.share_text()
    logger.info(f"Share: {text}")
    try:
        if not pygame.scrap.get_init():
            pygame.scrap.init()
        pygame.scrap.put_text(text)
    except (pygame.error, AttributeError) as e:
        logger.warning(f"Clipboard unavailable, share text not copied: {e}")


def handle_event(event, simulation, renderer, timer) -> bool:
    """
    Translates one pygame event into simulation commands.
    Returns False when the game should quit.
    """
    if timer.handle(event):
        return True

    if event.type == pygame.QUIT:
        return False

    if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP) and event.button not in POINTER_BUTTONS:
        return True

    if event.type in (pygame.MOUSEBUTTONDOWN, pygame.FINGERDOWN):
        simulation.boost_start()
    elif event.type in (pygame.MOUSEBUTTONUP, pygame.FINGERUP):
        simulation.boost_stop()
        if simulation.state in (GameState.START, GameState.FINISHED):
            simulation.start_game()
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_SPACE:
            simulation.boost_start()
        elif event.key == pygame.K_RETURN:
            if simulation.state in (GameState.START, GameState.FINISHED):
                simulation.start_game()
        elif event.key == pygame.K_s and simulation.state is GameState.FINISHED:
            share(simulation)
        elif event.key == pygame.K_t:
            simulation.return_to_title()
    elif event.type == pygame.KEYUP:
        if event.key == pygame.K_SPACE:
            simulation.boost_stop()
    elif event.type == pygame.VIDEORESIZE:
        size = (max(1, event.w), max(1, event.h))
        simulation.resize(size)
        renderer.resize(size)
    return True


def run_game_loop(simulation, renderer, clock, timer):
    """
    Fixed-timestep loop: wall-clock time is accumulated and consumed in whole
    ticks, at most MAX_STEPS_PER_FRAME per frame.
    """
    step_ms = 1000.0 / constants.FPS
    accumulator = 0.0
    running = True

    while running:
        for event in pygame.event.get():
            if not handle_event(event, simulation, renderer, timer):
                running = False

        accumulator += clock.tick(constants.FPS)
        steps = min(int(accumulator // step_ms), constants.MAX_STEPS_PER_FRAME)
        accumulator = 0.0 if steps == constants.MAX_STEPS_PER_FRAME else accumulator - steps * step_ms

        screen = pygame.display.get_surface()
        step_frame(simulation, renderer, screen, steps)
        pygame.display.flip()


def main():
    """
    Main function to initialize and run the game.
    """
    with open('config.json', 'r') as f:
        config = json.load(f)
    logger_setup.setup_logging(config)
    sim_config = config['simulation']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()
    timer = PygameTimer()

    bounds = screen.get_size()
    simulation = Simulation(sim_config, rng, bounds, schedule=timer)
    renderer = Renderer(bounds)

    run_game_loop(simulation, renderer, clock, timer)

    logger.info("Application shutting down.")
    pygame.quit()

if __name__ == "__main__":
    main()
