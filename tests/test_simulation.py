import copy

import numpy as np
import pytest

from particle import ParticleSystem
from simulation import Simulation

RADIUS = 0.05


@pytest.fixture
def crowded_params():
    # A small spawn region guarantees plenty of overlapping pairs.
    return {
        'particle_count': 40,
        'seed': 11,
        'position_min': [-0.3, -0.3],
        'position_max': [0.3, 0.3],
        'velocity_min': [-0.5, -0.5],
        'velocity_max': [0.5, 0.5],
        'delta_time': 0.016,
    }


def test_step_matches_sequential_particle_calls(crowded_params):
    system = ParticleSystem(crowded_params, 1.0)
    reference = copy.deepcopy(system)
    sim = Simulation(system, crowded_params)

    for _ in range(5):
        sim.step()

        particles = reference.particles
        for i in range(len(particles)):
            for j in range(i + 1, len(particles)):
                particles[i].resolve_collision(particles[j], sim.physics)
        for particle in particles:
            particle.update(sim.delta_time, sim.physics)

    np.testing.assert_allclose(system.positions, reference.positions, rtol=0, atol=1e-12)
    np.testing.assert_allclose(system.velocities, reference.velocities, rtol=0, atol=1e-12)


def test_collisions_use_pre_integration_positions(crowded_params):
    system = ParticleSystem(crowded_params, 1.0)
    interleaved = copy.deepcopy(system)
    Simulation(system, crowded_params).step()

    # Integrating each particle before its own collision row gives a different frame.
    particles = interleaved.particles
    for i in range(len(particles)):
        particles[i].update(0.016)
        for j in range(i + 1, len(particles)):
            particles[i].resolve_collision(particles[j])

    assert not np.allclose(system.positions, interleaved.positions)


def test_step_keeps_particles_in_bounds():
    params = {'particle_count': 60, 'seed': 5, 'velocity_min': [-1, -1], 'velocity_max': [1, 1]}
    system = ParticleSystem(params, 1.5)
    sim = Simulation(system, params)
    for _ in range(100):
        sim.step()
        positions = system.positions
        assert np.all(np.abs(positions[:, 0]) <= 1.5 - RADIUS * 1.5 + 1e-12)
        assert np.all(np.abs(positions[:, 1]) <= 1.0 - RADIUS + 1e-12)
    assert len(system) == 60
    assert sim.step_count == 100
    assert sim.elapsed_time == pytest.approx(1.6)


def test_step_without_gravity_conserves_momentum_away_from_walls():
    params = {
        'particle_count': 30, 'seed': 2, 'gravity': 0.0,
        'position_min': [-0.2, -0.2], 'position_max': [0.2, 0.2],
        'velocity_min': [-0.1, -0.1], 'velocity_max': [0.1, 0.1],
    }
    system = ParticleSystem(params, 1.0)
    sim = Simulation(system, params)
    before = system.total_momentum()
    sim.step()
    np.testing.assert_allclose(system.total_momentum(), before, atol=1e-12)


def test_step_with_empty_population():
    system = ParticleSystem({'particle_count': 0}, 1.0)
    sim = Simulation(system, {})
    sim.step()
    assert sim.step_count == 1
    assert sim.diagnostics()['mean_speed'] == 0.0


def test_aspect_ratio_propagates_to_all_particles():
    system = ParticleSystem({'particle_count': 10, 'seed': 0}, 1.0)
    sim = Simulation(system, {})
    sim.update_aspect_ratio(1.25)
    assert all(p.aspect_ratio == 1.25 for p in system)


def test_resize_recomputes_aspect_ratio():
    system = ParticleSystem({'particle_count': 10, 'seed': 0}, 1.0)
    sim = Simulation(system, {})
    sim.resize(1600, 800)
    assert all(p.aspect_ratio == 2.0 for p in system)


def test_resize_ignores_minimized_window():
    system = ParticleSystem({'particle_count': 3, 'seed': 0}, 1.0)
    sim = Simulation(system, {})
    sim.resize(0, 0)
    sim.resize(800, 0)
    assert all(p.aspect_ratio == 1.0 for p in system)


def test_resize_does_not_move_particles_until_next_step():
    params = {'particle_count': 20, 'seed': 4, 'gravity': 0.0}
    system = ParticleSystem(params, 2.0)
    sim = Simulation(system, params)
    before = system.positions
    sim.resize(720, 720)
    np.testing.assert_array_equal(system.positions, before)
    sim.step()
    assert np.all(np.abs(system.positions[:, 0]) <= 1.0 - RADIUS + 1e-12)


def test_invalid_delta_time_is_rejected():
    system = ParticleSystem({'particle_count': 1, 'seed': 0}, 1.0)
    with pytest.raises(ValueError):
        Simulation(system, {'delta_time': 0.0})


def test_diagnostics_report_step_metrics():
    params = {'particle_count': 5, 'seed': 9}
    system = ParticleSystem(params, 1.0)
    sim = Simulation(system, params)
    sim.step()
    stats = sim.diagnostics()
    assert stats['step'] == 1
    assert stats['time'] == pytest.approx(0.016)
    assert stats['kinetic_energy'] == pytest.approx(system.kinetic_energy())
    assert stats['mean_speed'] > 0
