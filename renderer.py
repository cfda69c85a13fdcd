# renderer.py

"""
pygame presentation adapter.

Consumes a FrameSnapshot (plus the particle pool and background field for the
entity positions) and draws one frame onto any pygame.Surface. Holds no game
state of its own, only cached surfaces and fonts.
"""

import logging
import math

import pygame

import constants

logger = logging.getLogger("rocket_escape")

# Used when a color from the snapshot cannot be understood by pygame
FALLBACK_COLOR = constants.WHITE


def to_rgb(color) -> tuple:
    """
    Resolves an (R, G, B) tuple or any color string pygame understands.
    Anything else resolves to FALLBACK_COLOR instead of raising.
    """
    try:
        c = pygame.Color(color)
    except (ValueError, TypeError):
        logger.warning(f"Unusable color {color!r}; drawing with fallback.")
        return FALLBACK_COLOR
    return (c.r, c.g, c.b)


class Renderer:
    def __init__(self, size: tuple):
        self.size = size
        self._gradient_key = None
        self._gradient = None
        self._rocket_sprite = self._build_rocket_sprite()

        self.font_large = pygame.font.Font(None, constants.FONT_SIZE_LARGE)
        self.font_medium = pygame.font.Font(None, constants.FONT_SIZE_MEDIUM)
        self.font_small = pygame.font.Font(None, constants.FONT_SIZE_SMALL)

    def resize(self, size: tuple):
        self.size = size
        self._gradient_key = None

    def _build_rocket_sprite(self) -> pygame.Surface:
        """Body, orange tip and window, pointing up, centered in its surface."""
        w, h = constants.ROCKET_WIDTH, constants.ROCKET_HEIGHT
        sprite = pygame.Surface((w, h), pygame.SRCALPHA)
        cx = w / 2

        body = [(cx, 0), (w, h * 0.55), (w, h), (0, h), (0, h * 0.55)]
        pygame.draw.polygon(sprite, constants.ROCKET_BODY_COLOR, body)
        tip = [(cx, 0), (w * 0.8, h * 0.25), (w * 0.2, h * 0.25)]
        pygame.draw.polygon(sprite, constants.ROCKET_TIP_COLOR, tip)
        pygame.draw.circle(sprite, constants.ROCKET_WINDOW_COLOR, (int(cx), int(h * 0.4)), 5)
        return sprite

    def _sky(self, top, bottom) -> pygame.Surface:
        """
        Vertical gradient, built by smooth-scaling a 1x2 surface.
        Cached until the stops or the size change.
        """
        key = (top, bottom, self.size)
        if key != self._gradient_key:
            seed = pygame.Surface((1, 2), 0, 32)
            seed.set_at((0, 0), to_rgb(top))
            seed.set_at((0, 1), to_rgb(bottom))
            self._gradient = pygame.transform.smoothscale(seed, self.size)
            self._gradient_key = key
        return self._gradient

    def draw(self, screen: pygame.Surface, snapshot, particles, background):
        screen.blit(self._sky(snapshot.sky_top, snapshot.sky_bottom), (0, 0))

        layer = pygame.Surface(self.size, pygame.SRCALPHA)
        self._draw_background(layer, snapshot.alt_factor, background)
        for p in particles:
            p.draw(layer)
        screen.blit(layer, (0, 0))

        if snapshot.show_rocket:
            self._draw_rocket(screen, snapshot)

        if snapshot.screen == 'start':
            self._draw_start_screen(screen)
        elif snapshot.screen == 'hud':
            self._draw_hud(screen, snapshot)
        else:
            self._draw_game_over(screen, snapshot)

    def _draw_background(self, layer: pygame.Surface, alt_factor: float, background):
        # Stars fade in with altitude, clouds fade out
        star_alpha = int(255 * alt_factor)
        cloud_alpha = int(255 * 0.5 * (1 - alt_factor))
        if star_alpha > 0:
            for s in background.stars:
                pygame.draw.circle(layer, (*constants.WHITE, star_alpha), (int(s.x), int(s.y)), max(1, int(s.size)))
        if cloud_alpha > 0:
            for c in background.clouds:
                pygame.draw.circle(layer, (*constants.WHITE, cloud_alpha), (int(c.x), int(c.y)), int(c.size))

    def _draw_rocket(self, screen: pygame.Surface, snapshot):
        # Canvas rotation is clockwise-positive, pygame's is counter-clockwise
        sprite = pygame.transform.rotate(self._rocket_sprite, -math.degrees(snapshot.rocket_tilt))
        rect = sprite.get_rect(center=(int(snapshot.rocket_x), int(snapshot.rocket_y)))
        screen.blit(sprite, rect)

    def _blit_centered(self, screen, font, text, color, y):
        surf = font.render(text, True, color)
        screen.blit(surf, surf.get_rect(center=(self.size[0] // 2, y)))

    def _draw_overlay(self, screen):
        overlay = pygame.Surface(self.size, pygame.SRCALPHA)
        overlay.fill(constants.OVERLAY)
        screen.blit(overlay, (0, 0))

    def _draw_start_screen(self, screen):
        self._draw_overlay(screen)
        mid = self.size[1] // 2
        self._blit_centered(screen, self.font_large, constants.TITLE.upper(), constants.WHITE, mid - 60)
        self._blit_centered(screen, self.font_small, constants.START_HINT, constants.WHITE, mid + 10)
        self._blit_centered(screen, self.font_small, constants.BOOST_HINT, constants.WHITE, mid + 40)

    def _draw_hud(self, screen, snapshot):
        margin = constants.HUD_MARGIN
        altitude = self.font_medium.render(f"{snapshot.altitude_km} km", True, constants.WHITE)
        screen.blit(altitude, (margin, margin))

        frame = pygame.Rect(margin, margin + altitude.get_height() + 8, constants.GAUGE_WIDTH, constants.GAUGE_HEIGHT)
        fill = frame.copy()
        fill.width = int(constants.GAUGE_WIDTH * snapshot.boost_fill / 100)
        color = constants.DANGER_RED if snapshot.boost_danger else constants.GAUGE_COLOR
        if fill.width > 0:
            pygame.draw.rect(screen, color, fill)
        if snapshot.boost_danger:
            # Glow
            pygame.draw.rect(screen, constants.DANGER_RED, frame.inflate(6, 6), 2)
        pygame.draw.rect(screen, constants.WHITE, frame, 1)

    def _draw_game_over(self, screen, snapshot):
        self._draw_overlay(screen)
        mid = self.size[1] // 2
        title_color = to_rgb(snapshot.end_title_color) if snapshot.end_title_color else constants.WHITE
        self._blit_centered(screen, self.font_large, snapshot.end_title or "", title_color, mid - 60)
        final = snapshot.final_altitude_km if snapshot.final_altitude_km is not None else 0
        self._blit_centered(screen, self.font_medium, f"{final} km", constants.WHITE, mid)
        self._blit_centered(screen, self.font_small, constants.RESTART_HINT, constants.WHITE, mid + 50)
