# main.py
"""
Main entry point for the particle simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and creates the particles for its aspect ratio.
4. Runs the main simulation loop until the window is closed.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import cProfile
import pstats
import io

def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from particle import ParticleSystem
    from simulation import Simulation
    from visualization import Visualizer

    # --- Component Initialization ---
    # 1. The visualizer opens the window, which determines the aspect ratio.
    visualizer = Visualizer(vis_params)

    # 2. Particles are spread over the whole viewport at startup.
    try:
        particles = ParticleSystem(sim_params, visualizer.aspect_ratio)
        sim = Simulation(particles, sim_params)
    except ValueError:
        visualizer.close()
        return

    # 3. Viewport resizes are relayed to every particle.
    visualizer.set_resize_callback(sim.resize)

    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    max_steps = run_params.get('max_steps', 0) # 0 runs until the window closes
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    step_num = 0

    if profiler:
        profiler.enable()
    while running:
        sim.step()
        step_num += 1

        # The visualizer's draw method returns False once the user quits.
        if not visualizer.draw(particles, sim.physics.radius):
            running = False

        if step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}")
            stats = sim.diagnostics()
            logging.debug(
                f"Step {step_num} | Kinetic Energy: {stats['kinetic_energy']:.4f} | "
                f"Momentum: ({stats['momentum'][0]:.4f}, {stats['momentum'][1]:.4f}) | "
                f"Mean Speed: {stats['mean_speed']:.4f}"
            )

        if max_steps and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info(f"Simulation loop finished after {step_num} steps ({sim.elapsed_time:.2f}s simulated).")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Simulation Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])
