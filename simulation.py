# simulation.py
"""
Handles the core simulation loop.

This module defines the Simulation class, which is responsible for
advancing the state of the particle system by one fixed time step:
first resolving every pairwise collision, then integrating every particle.
"""
import logging
import numpy as np
from typing import Dict, Any

from constants import DELTA_TIME
from particle import ParticleSystem
from physics import PhysicsConfig, resolve_all_collisions, integrate_all

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "delta_time": float
#         - "gravity", "damping", "particle_radius", "restitution": float
#     - Outputs: None
#     - Side Effects: Stores a reference to the particles and builds the
#       PhysicsConfig.
#
#   - step(self) -> None:
#     - Inputs: None (operates on internal state).
#     - Outputs: None
#     - Side Effects: Modifies positions and velocities of every particle.
#     - Invariants: Particle count remains constant. All collisions of a
#       frame use pre-integration positions. Positions stay inside the
#       viewport after the step.
#
#   - resize(self, width: int, height: int) -> None:
#     - Side Effects: Pushes width / height to every particle. Ignored for
#       non-positive sizes.


class Simulation:
    """
    Drives the fixed-timestep update cycle of the particle system.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.physics = PhysicsConfig.from_params(params)
        self.delta_time = float(params.get('delta_time', DELTA_TIME))
        self.step_count = 0
        self.elapsed_time = 0.0

        if self.delta_time <= 0:
            msg = f"Configuration error: delta_time must be positive, got {self.delta_time}."
            logging.critical(msg)
            raise ValueError(msg)

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"Fixed timestep {self.delta_time:.4f}s, "
            f"all-pairs collision check over {len(self.particles)} particles."
        )
        logging.debug(f"Physics: {self.physics!r}")

    def step(self):
        """
        Executes one time step of the simulation.
        """
        positions = self.particles.positions
        velocities = self.particles.velocities

        # 1. Collision pass over every unordered pair, before any integration
        resolve_all_collisions(
            positions, velocities, self.particles.masses,
            self.physics.radius, self.physics.restitution, self.physics.epsilon
        )

        # 2. Integration pass: gravity, damping, Euler step, wall reflection
        integrate_all(
            positions, velocities, self.particles.aspect_ratios,
            self.delta_time, self.physics.gravity, self.physics.damping,
            self.physics.radius, self.physics.restitution
        )

        self.particles.set_state(positions, velocities)
        self.step_count += 1
        self.elapsed_time += self.delta_time

    def update_aspect_ratio(self, new_aspect_ratio: float) -> None:
        """Pushes a new aspect ratio to every particle."""
        self.particles.update_aspect_ratio(new_aspect_ratio)
        logging.info(f"Aspect ratio updated to {new_aspect_ratio:.4f}.")

    def resize(self, width: int, height: int) -> None:
        """
        Handles a viewport resize by recomputing the aspect ratio.
        """
        if width <= 0 or height <= 0:
            # A minimized window reports a zero-sized framebuffer.
            logging.warning(f"Ignoring resize to non-positive size {width}x{height}.")
            return
        self.update_aspect_ratio(width / float(height))

    def diagnostics(self) -> Dict[str, Any]:
        """Aggregated metrics for throttled logging."""
        momentum = self.particles.total_momentum()
        mean_speed = 0.0
        if len(self.particles):
            mean_speed = float(np.mean(np.linalg.norm(self.particles.velocities, axis=1)))
        return {
            'step': self.step_count,
            'time': self.elapsed_time,
            'kinetic_energy': self.particles.kinetic_energy(),
            'momentum': (float(momentum[0]), float(momentum[1])),
            'mean_speed': mean_speed,
        }
