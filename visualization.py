# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.
"""
import logging
import pygame
from typing import Callable, Optional, Tuple

from constants import (
    BACKGROUND_COLOR, FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_CAPTION,
    FPS, SHOW_HUD, HUD_TEXT_COLOR
)
from particle import ParticleSystem

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Inputs:
#       - vis_params: the "visualization" section of config.json.
#         - "window_width", "window_height": int
#         - "fullscreen": bool
#         - "show_hud": bool
#     - Side Effects: Initializes Pygame and creates a resizable display.
#
#   - set_resize_callback(self, callback: Callable[[int, int], None]) -> None:
#     - Side Effects: callback(width, height) is invoked for every window
#       resize handled in draw().
#
#   - draw(self, particles: ParticleSystem, radius: float) -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events, renders every particle as a
#       filled circle and limits the frame rate.


def pixels_per_unit(width: int, height: int) -> float:
    """
    Uniform scale from simulation units to pixels.

    The shorter window side always spans [-1, 1], so wide windows show
    [-aspect, aspect] horizontally and tall windows show extra room vertically.
    """
    return min(width, height) / 2.0


def sim_to_screen(x: float, y: float, width: int, height: int) -> Tuple[int, int]:
    """Converts simulation coordinates (y up) to pixel coordinates (y down)."""
    scale = pixels_per_unit(width, height)
    return (int(round(width / 2.0 + x * scale)), int(round(height / 2.0 - y * scale)))


def to_rgb255(color) -> Tuple[int, int, int]:
    """Converts float channels in [0, 1] to a Pygame color tuple."""
    return tuple(int(round(255 * max(0.0, min(1.0, float(c))))) for c in color)


class Visualizer:
    """
    Renders the particle system state into a resizable Pygame window.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('window_width', WINDOW_WIDTH)
            height = vis_params.get('window_height', WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        self.width, self.height = self.screen.get_size()
        pygame.display.set_caption(WINDOW_CAPTION)
        self.clock = pygame.time.Clock()
        self.show_hud = vis_params.get('show_hud', SHOW_HUD)
        self._resize_callback: Optional[Callable[[int, int], None]] = None

        # SysFont silently substitutes a default for missing fonts.
        if pygame.font.match_font("Segoe UI") is None:
            logging.warning("Segoe UI font not found, falling back to default font.")
            self.font = pygame.font.SysFont(None, 18)
        else:
            self.font = pygame.font.SysFont("Segoe UI", 14)

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    @property
    def aspect_ratio(self) -> float:
        return self.width / float(self.height)

    def set_resize_callback(self, callback: Callable[[int, int], None]) -> None:
        self._resize_callback = callback

    def _handle_resize(self, width: int, height: int):
        self.width, self.height = width, height
        logging.debug(f"Window resized to {width}x{height}.")
        if self._resize_callback is not None:
            self._resize_callback(width, height)

    def _draw_hud(self, particles: ParticleSystem):
        text = f"{len(particles)} particles | {self.clock.get_fps():.0f} FPS"
        text_surf = self.font.render(text, True, HUD_TEXT_COLOR)
        self.screen.blit(text_surf, (10, 10))

    def draw(self, particles: ParticleSystem, radius: float) -> bool:
        """
        Draws all particles and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False

            if event.type == pygame.VIDEORESIZE:
                self._handle_resize(event.w, event.h)

        self.screen.fill(BACKGROUND_COLOR)

        radius_px = max(1, int(round(radius * pixels_per_unit(self.width, self.height))))
        for particle in particles:
            center = sim_to_screen(particle.x, particle.y, self.width, self.height)
            pygame.draw.circle(self.screen, to_rgb255(particle.color), center, radius_px)

        if self.show_hud:
            self._draw_hud(particles)

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
