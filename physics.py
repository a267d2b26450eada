# physics.py
"""
Physics configuration and the compiled kernels behind every particle update.

The scalar kernels (`integrate_particle`, `collide_pair`) implement one
particle step and one pairwise collision. `Particle` calls them directly, and
the batch kernels (`resolve_all_collisions`, `integrate_all`) call the same
functions over NumPy arrays, so the single-particle API and the simulation
loop can never drift apart.
"""
import logging
import math
from typing import Dict, Any

from numba import jit

from constants import (
    GRAVITY, NO_DAMPING, RESTITUTION, PARTICLE_RADIUS, COLLISION_EPSILON
)

# --- Data Contracts ---
#
# class PhysicsConfig:
#   - __init__(self, gravity, damping, radius, restitution, epsilon):
#     - Inputs: floats. damping in (0, 1], restitution in [0, 1],
#       radius > 0, epsilon >= 0.
#     - Side Effects: None.
#     - Invariants: Values are validated once and never mutated by the kernels.
#
#   - from_params(params: Dict[str, Any]) -> PhysicsConfig:
#     - Inputs: the "simulation_parameters" section of config.json.
#       - "gravity", "damping", "particle_radius", "restitution",
#         "collision_epsilon" (all optional).
#
# collide_pair(...) -> tuple of 8 floats:
#   - Returns the new (x, y, vx, vy) of both particles. Unchanged if the
#     particles do not overlap.
#
# integrate_particle(...) -> tuple of 4 floats:
#   - Returns the new (x, y, vx, vy) after gravity, damping, semi-implicit
#     Euler integration and wall reflection.


class PhysicsConfig:
    """
    Process-wide physics parameters shared by all particles.
    """
    def __init__(
        self,
        gravity: float = GRAVITY,
        damping: float = NO_DAMPING,
        radius: float = PARTICLE_RADIUS,
        restitution: float = RESTITUTION,
        epsilon: float = COLLISION_EPSILON,
    ):
        self.gravity = float(gravity)
        self.damping = float(damping)
        self.radius = float(radius)
        self.restitution = float(restitution)
        self.epsilon = float(epsilon)

        if self.radius <= 0:
            msg = f"Configuration error: particle radius must be positive, got {self.radius}."
            logging.critical(msg)
            raise ValueError(msg)
        if not 0.0 < self.damping <= 1.0:
            msg = f"Configuration error: damping must be in (0, 1], got {self.damping}."
            logging.critical(msg)
            raise ValueError(msg)
        if not 0.0 <= self.restitution <= 1.0:
            msg = f"Configuration error: restitution must be in [0, 1], got {self.restitution}."
            logging.critical(msg)
            raise ValueError(msg)
        if self.epsilon < 0:
            msg = f"Configuration error: collision epsilon must be non-negative, got {self.epsilon}."
            logging.critical(msg)
            raise ValueError(msg)

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "PhysicsConfig":
        """Builds a config from the simulation parameters section."""
        return cls(
            gravity=params.get('gravity', GRAVITY),
            damping=params.get('damping', NO_DAMPING),
            radius=params.get('particle_radius', PARTICLE_RADIUS),
            restitution=params.get('restitution', RESTITUTION),
            epsilon=params.get('collision_epsilon', COLLISION_EPSILON),
        )

    def __repr__(self):
        return (
            f"PhysicsConfig(gravity={self.gravity}, damping={self.damping}, "
            f"radius={self.radius}, restitution={self.restitution}, "
            f"epsilon={self.epsilon})"
        )


DEFAULT_PHYSICS = PhysicsConfig()


@jit(nopython=True)
def reflect_from_walls(x, y, vx, vy, aspect_ratio, radius, restitution):
    """
    Clamps a particle inside the viewport and points its velocity back inward.

    The horizontal extent is [-aspect_ratio, aspect_ratio], so the radius is
    scaled by the aspect ratio on that axis only.
    """
    adjusted_radius_x = radius * aspect_ratio
    x_limit = aspect_ratio - adjusted_radius_x
    y_limit = 1.0 - radius

    if x < -x_limit:
        x = -x_limit
        if vx < 0.0:
            vx = -vx * restitution
    elif x > x_limit:
        x = x_limit
        if vx > 0.0:
            vx = -vx * restitution

    if y < -y_limit:
        y = -y_limit
        if vy < 0.0:
            vy = -vy * restitution
    elif y > y_limit:
        y = y_limit
        if vy > 0.0:
            vy = -vy * restitution

    return x, y, vx, vy


@jit(nopython=True)
def integrate_particle(x, y, vx, vy, aspect_ratio, dt, gravity, damping, radius, restitution):
    """
    Advances one particle by dt. Velocity is updated before position.
    """
    vy = vy + gravity * dt

    if damping != 1.0:
        decay = damping ** dt
        vx = vx * decay
        vy = vy * decay

    x = x + vx * dt
    y = y + vy * dt

    return reflect_from_walls(x, y, vx, vy, aspect_ratio, radius, restitution)


@jit(nopython=True)
def collide_pair(
    x1, y1, vx1, vy1, m1,
    x2, y2, vx2, vy2, m2,
    radius, restitution, epsilon
):
    """
    Resolves a collision between particle 1 and particle 2.

    The impulse is only applied while the particles approach each other
    along the normal, but any penetration is always corrected by pushing
    both particles half the overlap apart.
    """
    dx = x2 - x1
    dy = y2 - y1
    distance = math.sqrt(dx * dx + dy * dy)
    contact_distance = 2.0 * radius

    if distance >= contact_distance:
        return x1, y1, vx1, vy1, x2, y2, vx2, vy2

    # Coincident centers have no defined normal; push particle 2 along +x.
    if distance <= epsilon:
        nx = 1.0
        ny = 0.0
        distance = 0.0
    else:
        nx = dx / distance
        ny = dy / distance

    # Relative velocity of 2 with respect to 1, along the normal
    rel_vel = (vx2 - vx1) * nx + (vy2 - vy1) * ny

    if rel_vel <= 0.0:
        impulse = (1.0 + restitution) * rel_vel / (m1 + m2)
        vx1 = vx1 + impulse * m2 * nx
        vy1 = vy1 + impulse * m2 * ny
        vx2 = vx2 - impulse * m1 * nx
        vy2 = vy2 - impulse * m1 * ny

    overlap = contact_distance - distance
    separation_x = overlap * nx / 2.0
    separation_y = overlap * ny / 2.0

    return (
        x1 - separation_x, y1 - separation_y, vx1, vy1,
        x2 + separation_x, y2 + separation_y, vx2, vy2,
    )


@jit(nopython=True)
def resolve_all_collisions(positions, velocities, masses, radius, restitution, epsilon):
    """
    Calls `collide_pair` once for every unordered pair (i < j), in order.

    This is O(N^2) with no broad phase. Arrays are modified in place.
    """
    particle_count = positions.shape[0]
    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            x1, y1, vx1, vy1, x2, y2, vx2, vy2 = collide_pair(
                positions[i, 0], positions[i, 1], velocities[i, 0], velocities[i, 1], masses[i],
                positions[j, 0], positions[j, 1], velocities[j, 0], velocities[j, 1], masses[j],
                radius, restitution, epsilon
            )
            positions[i, 0] = x1
            positions[i, 1] = y1
            velocities[i, 0] = vx1
            velocities[i, 1] = vy1
            positions[j, 0] = x2
            positions[j, 1] = y2
            velocities[j, 0] = vx2
            velocities[j, 1] = vy2


@jit(nopython=True)
def integrate_all(positions, velocities, aspect_ratios, dt, gravity, damping, radius, restitution):
    """Runs `integrate_particle` for every particle. Arrays are modified in place."""
    for i in range(positions.shape[0]):
        x, y, vx, vy = integrate_particle(
            positions[i, 0], positions[i, 1], velocities[i, 0], velocities[i, 1],
            aspect_ratios[i], dt, gravity, damping, radius, restitution
        )
        positions[i, 0] = x
        positions[i, 1] = y
        velocities[i, 0] = vx
        velocities[i, 1] = vy
