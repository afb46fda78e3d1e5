# main.py
"""
Main entry point for the drifting particles simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the simulation (particles, attractors, brush).
4. Runs the frame loop, with or without a Pygame window.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, get_section
from constants import DEFAULT_SIMULATION_PARAMS, WINDOW_HEIGHT, WINDOW_WIDTH
import cProfile
import pstats
import io

DEFAULT_RUN_CONTROL = {
    "max_steps": 0,
    "log_throttle_steps": 100,
    "headless": False,
}
DEFAULT_VISUALIZATION = {
    "draw_vectors": False,
    "window_width": WINDOW_WIDTH,
    "window_height": WINDOW_HEIGHT,
}


def run(config) -> int:
    """
    Builds the simulation from a loaded config and runs the frame loop.

    Returns:
        int: Number of simulation steps executed.
    """
    sim_params = get_section(config, 'simulation_parameters', DEFAULT_SIMULATION_PARAMS)
    run_params = get_section(config, 'run_control', DEFAULT_RUN_CONTROL)
    vis_params = get_section(config, 'visualization', DEFAULT_VISUALIZATION)

    from simulation import Simulation

    sim = Simulation(sim_params)

    log_throttle = max(1, int(run_params['log_throttle_steps']))
    max_steps = int(run_params['max_steps'])
    headless = bool(run_params['headless'])
    if headless and max_steps <= 0:
        logging.warning("Headless run without max_steps; defaulting to 1000 steps.")
        max_steps = 1000

    visualizer = None
    if not headless:
        from visualization import Visualizer
        visualizer = Visualizer(
            width=vis_params['window_width'],
            height=vis_params['window_height'],
            draw_vectors=vis_params['draw_vectors'],
        )

    steps_run = 0
    running = True
    try:
        while running:
            # A paused window still renders and handles input.
            if visualizer is None or not visualizer.paused:
                sim.step()
                steps_run += 1

                # Rule 2.4: Hot loops must throttle logs
                if sim.step_count % log_throttle == 0:
                    logging.info(f"Simulation step {sim.step_count}")
                    logging.debug(
                        f"Step {sim.step_count} | Mean Velocity: {sim.mean_velocity:.4f} | "
                        f"Attractors: {sim.attractors.count}/{sim.attractors.capacity}"
                    )

            if visualizer is not None and not visualizer.draw(sim):
                running = False

            if max_steps > 0 and steps_run >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False
    finally:
        if visualizer is not None:
            visualizer.close()

    logging.info("Simulation loop finished.")
    return steps_run


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Drifting Particles Simulation Starting ---")

    profiler = cProfile.Profile()
    profiler.enable()
    run(config)
    profiler.disable()

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Drifting Particles Simulation Shutting Down ---")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else 'config.json')
