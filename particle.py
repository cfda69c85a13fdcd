# particle.py

import pygame

class Particle:
    """
    A single transient visual entity (exhaust puff or explosion debris).

    This is a read-only view produced by ParticlePool, which stores the live
    data as NumPy arrays. Fields are fixed; there is no per-particle behaviour
    beyond drawing.
    """
    __slots__ = ('x', 'y', 'vx', 'vy', 'life', 'size', 'color')

    def __init__(self, x: float, y: float, vx: float, vy: float, life: float, size: float, color: tuple):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.life = life
        self.size = size
        self.color = color

    def __repr__(self):
        return (f"Particle(x={self.x:.1f}, y={self.y:.1f}, vx={self.vx:.2f}, "
                f"vy={self.vy:.2f}, life={self.life:.2f}, size={self.size:.1f})")

    @property
    def alpha(self) -> int:
        """Opacity follows remaining life."""
        return max(0, min(255, int(self.life * 255)))

    def draw(self, surface: pygame.Surface):
        """
        Draws the particle. The surface must have per-pixel alpha for the
        fade to show.
        """
        radius = max(1, int(self.size))
        pygame.draw.circle(surface, (*self.color, self.alpha), (int(self.x), int(self.y)), radius)
