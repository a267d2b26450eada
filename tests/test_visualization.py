import logging

import pytest

pygame = pytest.importorskip("pygame")

from particle import ParticleSystem
from simulation import Simulation
from visualization import Visualizer, pixels_per_unit, sim_to_screen, to_rgb255


@pytest.fixture
def headless(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def visualizer(headless):
    vis = Visualizer({'window_width': 320, 'window_height': 240, 'show_hud': True})
    yield vis
    vis.close()


@pytest.fixture
def particles():
    return ParticleSystem({'particle_count': 8, 'seed': 0}, 320 / 240)


def test_pixels_per_unit_uses_shorter_side():
    assert pixels_per_unit(800, 600) == 300.0
    assert pixels_per_unit(600, 800) == 300.0


def test_origin_maps_to_window_center():
    assert sim_to_screen(0.0, 0.0, 800, 600) == (400, 300)


def test_y_axis_points_up():
    assert sim_to_screen(0.0, 1.0, 800, 600) == (400, 0)
    assert sim_to_screen(0.0, -1.0, 800, 600) == (400, 600)


def test_horizontal_extent_matches_aspect_ratio():
    aspect_ratio = 800 / 600
    assert sim_to_screen(aspect_ratio, 0.0, 800, 600) == (800, 300)
    assert sim_to_screen(-aspect_ratio, 0.0, 800, 600) == (0, 300)


def test_to_rgb255():
    assert to_rgb255((1.0, 0.0, 1.0)) == (255, 0, 255)
    assert to_rgb255((0.0, 1.0, 0.0)) == (0, 255, 0)


# --- Visualizer under the dummy video driver ---

def test_visualizer_reports_window_aspect_ratio(visualizer):
    assert (visualizer.width, visualizer.height) == (320, 240)
    assert visualizer.aspect_ratio == pytest.approx(320 / 240)


def test_draw_keeps_running_without_events(visualizer, particles):
    pygame.event.clear()
    assert visualizer.draw(particles, 0.05) is True


def test_quit_event_stops_drawing(visualizer, particles):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert visualizer.draw(particles, 0.05) is False


def test_escape_key_stops_drawing(visualizer, particles):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert visualizer.draw(particles, 0.05) is False


def test_resize_event_reaches_every_particle(visualizer, particles):
    sim = Simulation(particles, {})
    visualizer.set_resize_callback(sim.resize)

    pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, w=400, h=800, size=(400, 800)))
    assert visualizer.draw(particles, 0.05) is True

    assert (visualizer.width, visualizer.height) == (400, 800)
    assert all(p.aspect_ratio == 0.5 for p in particles)


def test_missing_font_logs_warning(headless, monkeypatch, caplog):
    monkeypatch.setattr(pygame.font, "match_font", lambda *args, **kwargs: None)
    with caplog.at_level(logging.WARNING):
        vis = Visualizer({'window_width': 160, 'window_height': 120})
    try:
        assert "font not found" in caplog.text
        assert vis.font is not None
    finally:
        vis.close()
