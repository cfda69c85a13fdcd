# game_state.py

import enum
import logging

logger = logging.getLogger("rocket_escape")


class GameState(enum.Enum):
    START = 'START'
    PLAYING = 'PLAYING'
    EXPLODED = 'EXPLODED'
    FINISHED = 'FINISHED'


class IllegalTransitionError(RuntimeError):
    """Raised when a transition is not in the state machine's table."""


# Legal transitions. PLAYING -> PLAYING is a restart mid-run.
TRANSITIONS = {
    GameState.START: {GameState.PLAYING},
    GameState.PLAYING: {GameState.PLAYING, GameState.EXPLODED},
    GameState.EXPLODED: {GameState.FINISHED},
    GameState.FINISHED: {GameState.PLAYING, GameState.START},
}


class GameStateMachine:
    """
    Finite state machine governing which simulation logic runs.

    Each entry into PLAYING starts a new run and increments `generation`.
    Anything scheduled against an older generation (the delayed
    EXPLODED -> FINISHED transition) can compare generations and become a
    no-op once a restart has happened.
    """
    def __init__(self):
        self.state = GameState.START
        self.generation = 0

    def can_transition(self, target: GameState) -> bool:
        return target in TRANSITIONS[self.state]

    def transition(self, target: GameState) -> int:
        """
        Moves to `target`, returning the current run generation.
        Raises IllegalTransitionError for a transition not in TRANSITIONS.
        """
        if not self.can_transition(target):
            raise IllegalTransitionError(f"Illegal transition {self.state.value} -> {target.value}")

        previous = self.state
        self.state = target
        if target is GameState.PLAYING:
            self.generation += 1
        logger.info(f"State {previous.value} -> {target.value} (run {self.generation}).")
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation
