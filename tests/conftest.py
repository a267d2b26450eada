import logging

import numpy as np
import pytest

from particle import Particle


@pytest.fixture
def make_particle():
    """Builds a particle at an exact position and velocity."""
    def _make(x, y, vx=0.0, vy=0.0, aspect_ratio=1.0, mass=1.0):
        return Particle(
            x, y, x, y, vx, vy, vx, vy, aspect_ratio,
            mass=mass, rng=np.random.default_rng(0)
        )
    return _make


@pytest.fixture
def restore_root_logger():
    """Undoes setup_logging's handler replacement after the test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
