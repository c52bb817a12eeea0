# main.py
"""
Main entry point for the Particle Simulator.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the visualizer and builds the particle engine for its window.
4. Runs the frame loop: events, one engine tick, one draw.
5. Cancels the engine and shuts down cleanly.
"""
import argparse
import cProfile
import io
import logging
import pstats

import numpy as np
import pygame

from constants import FPS
from utils import load_config, setup_logging


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

    logging.info("--- Particle Simulator Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    # Imported late so the heavy modules log through the configured handlers.
    from engine import ParticleEngine
    from settings import SimulationSettings
    from visualization import Visualizer

    settings = SimulationSettings.from_params(sim_params)
    rng = np.random.default_rng(sim_params.get('seed'))

    # --- Component Initialization ---
    # The visualizer decides the window size, which becomes the simulation bounds.
    visualizer = Visualizer(vis_params)
    engine = ParticleEngine(settings, bounds=visualizer.sim_size, rng=rng)

    log_throttle = max(int(run_params.get('log_throttle_steps', 300)), 1)
    max_steps = int(run_params.get('max_steps', 0))
    fps = int(vis_params.get('fps', FPS))

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    step_num = 0
    if profiler:
        profiler.enable()
    while engine.running:
        if not visualizer.handle_events(engine):
            engine.cancel()
            break

        engine.tick(pygame.time.get_ticks())
        visualizer.draw(engine)
        visualizer.clock.tick(fps)
        step_num += 1

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            particles = engine.particles
            logging.info(f"Frame {step_num} | {len(particles)} particles")
            if len(particles) > 0:
                avg_speed = np.mean(np.linalg.norm(particles.velocities, axis=1))
                logging.debug(
                    f"Frame {step_num} | dt: {engine.last_delta:.4f}s | "
                    f"Average Speed: {avg_speed:.2f} | "
                    f"Collisions: {engine.simulation.last_collision_count}"
                )

        if max_steps and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            engine.cancel()
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Simulator Shutting Down ---")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Interactive 2D particle collision simulator.")
    parser.add_argument('--config', default='config.json', help="Path to the JSON configuration file.")
    args = parser.parse_args()
    main(args.config)
