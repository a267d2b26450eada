# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the Particle class, which owns one particle's kinematic
state and its physics operations, and the ParticleSystem class, which creates
and holds the fixed population and exposes its state as NumPy arrays.
"""
import logging
import numpy as np
from typing import Dict, Any, Iterator, List, Optional, Sequence, Tuple

from constants import DEFAULT_MASS, DEFAULT_VELOCITY_MIN, DEFAULT_VELOCITY_MAX
from physics import PhysicsConfig, DEFAULT_PHYSICS, collide_pair, integrate_particle

# --- Data Contracts ---
#
# class Particle:
#   - __init__(self, min_x, min_y, max_x, max_y, min_vx, min_vy, max_vx, max_vy,
#              aspect_ratio, mass=1.0, rng=None):
#     - Inputs: closed sampling intervals for position and velocity, the
#       initial aspect ratio and an optional numpy Generator.
#     - Side Effects: Consumes random draws from rng.
#     - Invariants: color channels are 0.0 or 1.0 and never all equal.
#
#   - update(self, dt: float, config: Optional[PhysicsConfig]) -> None:
#     - Side Effects: Applies gravity, damping, integration and wall
#       reflection in place.
#     - Invariants: |x| <= aspect_ratio * (1 - radius), |y| <= 1 - radius.
#
#   - resolve_collision(self, other: Particle, config: Optional[PhysicsConfig]) -> None:
#     - Side Effects: Mutates both particles if they overlap. Must be called
#       once per unordered pair per frame.
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], aspect_ratio: float):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int or null
#         - "particle_count": int
#         - "particle_mass": float
#         - "velocity_min", "velocity_max": [vx, vy]
#         - "position_min", "position_max": [x, y] (default: whole viewport)
#       - aspect_ratio: viewport width / height.
#     - Side Effects: Creates particle_count Particle objects.
#     - Invariants: Particle count never changes after construction.


class Particle:
    """
    A single circular particle in simulation space.

    Vertical coordinates span [-1, 1]; horizontal coordinates span
    [-aspect_ratio, aspect_ratio].
    """
    def __init__(
        self,
        min_x: float, min_y: float, max_x: float, max_y: float,
        min_vx: float, min_vy: float, max_vx: float, max_vy: float,
        aspect_ratio: float,
        mass: float = DEFAULT_MASS,
        rng: Optional[np.random.Generator] = None,
    ):
        if rng is None:
            rng = np.random.default_rng()

        self.aspect_ratio = float(aspect_ratio)
        self.mass = float(mass)

        self.x = float(rng.uniform(min_x, max_x))
        self.y = float(rng.uniform(min_y, max_y))
        self.vx = float(rng.uniform(min_vx, max_vx))
        self.vy = float(rng.uniform(min_vy, max_vy))

        # Reject pure black and pure white so every ball is visible and colorful.
        while True:
            channels = rng.integers(0, 2, size=3)
            if 0 < channels.sum() < 3:
                break
        self.color: Tuple[float, float, float] = tuple(float(c) for c in channels)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.vx, self.vy)

    def update(self, dt: float, config: Optional[PhysicsConfig] = None) -> None:
        """
        Advances the particle by one timestep of dt seconds.

        Gravity is applied to the velocity first, then the position is
        integrated and clamped inside the viewport.
        """
        config = config or DEFAULT_PHYSICS
        self.x, self.y, self.vx, self.vy = integrate_particle(
            self.x, self.y, self.vx, self.vy, self.aspect_ratio,
            float(dt), config.gravity, config.damping, config.radius, config.restitution
        )

    def resolve_collision(self, other: "Particle", config: Optional[PhysicsConfig] = None) -> None:
        """
        Detects and resolves a collision between this particle and another.

        Both particles are modified in place. Calling this twice for the same
        pair within one frame applies the separation twice.
        """
        config = config or DEFAULT_PHYSICS
        (
            self.x, self.y, self.vx, self.vy,
            other.x, other.y, other.vx, other.vy,
        ) = collide_pair(
            self.x, self.y, self.vx, self.vy, self.mass,
            other.x, other.y, other.vx, other.vy, other.mass,
            config.radius, config.restitution, config.epsilon
        )

    def update_aspect_ratio(self, new_aspect_ratio: float) -> None:
        # Out-of-bounds particles are corrected by the next boundary check.
        self.aspect_ratio = float(new_aspect_ratio)

    def __repr__(self):
        return (
            f"Particle(x={self.x:.4f}, y={self.y:.4f}, vx={self.vx:.4f}, "
            f"vy={self.vy:.4f}, color={self.color})"
        )


class ParticleSystem:
    """
    A container for all particles, exposing their state via NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], aspect_ratio: float):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            aspect_ratio (float): The initial viewport aspect ratio.
        """
        self.particle_count = params.get('particle_count', 0)
        self.seed = params.get('seed')
        self.mass = float(params.get('particle_mass', DEFAULT_MASS))

        if self.particle_count < 0:
            msg = f"Configuration error: particle_count must be non-negative, got {self.particle_count}."
            logging.critical(msg)
            raise ValueError(msg)
        if self.mass <= 0:
            msg = f"Configuration error: particle_mass must be positive, got {self.mass}."
            logging.critical(msg)
            raise ValueError(msg)

        # By default particles may start anywhere in the viewport.
        position_min = params.get('position_min', (-aspect_ratio, -1.0))
        position_max = params.get('position_max', (aspect_ratio, 1.0))
        velocity_min = params.get('velocity_min', DEFAULT_VELOCITY_MIN)
        velocity_max = params.get('velocity_max', DEFAULT_VELOCITY_MAX)
        self._check_bounds('position', position_min, position_max)
        self._check_bounds('velocity', velocity_min, velocity_max)

        # All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(self.seed)

        self.particles: List[Particle] = [
            Particle(
                position_min[0], position_min[1], position_max[0], position_max[1],
                velocity_min[0], velocity_min[1], velocity_max[0], velocity_max[1],
                aspect_ratio, mass=self.mass, rng=self.rng
            )
            for _ in range(self.particle_count)
        ]

        logging.info(f"ParticleSystem initialized with {self.particle_count} particles.")
        logging.debug(
            f"Spawn bounds: position {list(position_min)}..{list(position_max)}, "
            f"velocity {list(velocity_min)}..{list(velocity_max)}, "
            f"aspect ratio {aspect_ratio:.4f}, seed {self.seed}."
        )

    @staticmethod
    def _check_bounds(name: str, low: Sequence[float], high: Sequence[float]) -> None:
        if len(low) != 2 or len(high) != 2 or low[0] > high[0] or low[1] > high[1]:
            msg = f"Configuration error: invalid {name} bounds {list(low)}..{list(high)}."
            logging.critical(msg)
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]

    @property
    def positions(self) -> np.ndarray:
        """An (N, 2) float64 copy of all positions."""
        return np.array([p.position for p in self.particles], dtype=np.float64).reshape(-1, 2)

    @property
    def velocities(self) -> np.ndarray:
        """An (N, 2) float64 copy of all velocities."""
        return np.array([p.velocity for p in self.particles], dtype=np.float64).reshape(-1, 2)

    @property
    def masses(self) -> np.ndarray:
        return np.array([p.mass for p in self.particles], dtype=np.float64)

    @property
    def aspect_ratios(self) -> np.ndarray:
        return np.array([p.aspect_ratio for p in self.particles], dtype=np.float64)

    @property
    def colors(self) -> np.ndarray:
        """An (N, 3) float64 array of RGB channels in {0, 1}."""
        return np.array([p.color for p in self.particles], dtype=np.float64).reshape(-1, 3)

    def set_state(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        """Writes array state back into the particle objects."""
        for i, particle in enumerate(self.particles):
            particle.x = float(positions[i, 0])
            particle.y = float(positions[i, 1])
            particle.vx = float(velocities[i, 0])
            particle.vy = float(velocities[i, 1])

    def update_aspect_ratio(self, new_aspect_ratio: float) -> None:
        for particle in self.particles:
            particle.update_aspect_ratio(new_aspect_ratio)

    def kinetic_energy(self) -> float:
        if not self.particles:
            return 0.0
        speed_sq = np.sum(self.velocities ** 2, axis=1)
        return float(0.5 * np.sum(self.masses * speed_sq))

    def total_momentum(self) -> np.ndarray:
        if not self.particles:
            return np.zeros(2, dtype=np.float64)
        return np.sum(self.velocities * self.masses[:, np.newaxis], axis=0)
