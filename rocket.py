# rocket.py

import constants

class Rocket:
    """
    The player-controlled vessel.

    Only vertical motion is simulated; the rocket is always drawn at the
    horizontal center of the viewport. `altitude` is a camera-relative
    accumulator of upward movement, not the rocket's screen position.

    Invariants:
    - 0 <= heat <= max_heat after every tick.
    - altitude and peak_altitude never decrease and are never negative.
    - peak_altitude >= altitude.
    """
    width = constants.ROCKET_WIDTH
    height = constants.ROCKET_HEIGHT

    def __init__(self, y: float):
        self.y = y
        self.vy = 0.0
        self.altitude = 0.0
        self.peak_altitude = 0.0
        self.heat = 0.0
        self.is_boosting = False

    def __repr__(self):
        return (f"Rocket(y={self.y:.1f}, vy={self.vy:.2f}, altitude={self.altitude:.1f}, "
                f"peak={self.peak_altitude:.1f}, heat={self.heat:.1f}, boosting={self.is_boosting})")

    def update_heat(self, thrust_power: float, heat_up_rate: float, cool_down_rate: float, max_heat: float) -> bool:
        """
        Applies thrust and heats up while boosting, cools down otherwise.
        Returns True if the rocket has reached max_heat this tick.

        The overheat check happens before the upper clamp so that crossing the
        threshold is always reported.
        """
        if self.is_boosting:
            self.vy -= thrust_power
            self.heat += heat_up_rate
        else:
            self.heat -= cool_down_rate

        self.heat = max(0.0, self.heat)
        overheated = self.heat >= max_heat
        self.heat = min(self.heat, max_heat)
        return overheated

    def integrate(self, gravity: float, ground_y: float):
        """
        One explicit Euler step (dt = 1 tick) followed by altitude bookkeeping
        and the ground constraint.
        """
        self.vy += gravity
        self.y += self.vy

        # Negative velocity is upward movement
        self.altitude += max(0.0, -self.vy)
        self.peak_altitude = max(self.peak_altitude, self.altitude)

        if self.y > ground_y:
            self.y = ground_y
            self.vy = 0.0
