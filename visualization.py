# visualization.py
"""
Handles the visualization of the drift simulation using Pygame.

The Visualizer reads the particle, attractor and velocity buffers each
frame, and turns keyboard and mouse input into simulation controls and
brush strokes. It never writes simulation state except through the
Simulation and BrushEditor methods.
"""
import logging
import pygame
from constants import (
    ATTRACTOR_ALPHA, ATTRACTOR_COLOR, ATTRACTOR_RADIUS, BACKGROUND_COLOR,
    BRUSH_OUTLINE_COLOR, BRUSH_RADIUS_INCREMENT, BRUSH_RADIUS_RANGE, FPS,
    PARTICLE_COLOR, PARTICLE_RADIUS, SEED_MODULUS, TEMPERATURE_INCREMENT,
    TEMPERATURE_RANGE, TEXT_COLOR, VECTOR_COLOR, VECTOR_SAMPLE_TARGET,
    VECTOR_SCALE, WINDOW_HEIGHT, WINDOW_WIDTH
)
from coords import DEFAULT_BOUNDS, canvas_to_world, clamp, world_to_canvas
from typing import Optional

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, draw_vectors: bool = False):
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, simulation: "Simulation") -> bool:
#     - Inputs:
#       - simulation: The Simulation whose buffers are rendered.
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events (which may reset the simulation,
#       change its parameters, or apply brush strokes), renders, and ticks
#       the frame clock.
#
#   - paused: bool. While True the caller skips Simulation.step() but keeps
#     calling draw().

KEY_HELP = "space run/pause  R reset  N new seed  E edit  X erase  C clear  B reset blue  V vectors  [ ] brush  up/down T"


class Visualizer:
    """
    Renders particles, attractors and drift vectors, and routes user input.
    """
    def __init__(self, width: int = WINDOW_WIDTH, height: int = WINDOW_HEIGHT,
                 draw_vectors: bool = False):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Drifting particles in 2D")
        self.clock = pygame.time.Clock()

        # Translucent layers are drawn on their own alpha surfaces.
        self.attractor_surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self.vector_surface = pygame.Surface((width, height), pygame.SRCALPHA)

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_small = pygame.font.SysFont("Segoe UI", 12)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_small = pygame.font.SysFont(None, 16)

        self.paused = False
        self.draw_vectors = draw_vectors
        self.mouse_pos: Optional[tuple] = None
        self.bounds = DEFAULT_BOUNDS

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _to_world(self, pos):
        return canvas_to_world(pos, self.width, self.height, self.bounds)

    def _to_canvas(self, point):
        x, y = world_to_canvas(point, self.width, self.height, self.bounds)
        return (int(x), int(y))

    def _handle_key(self, key: int, simulation: "Simulation") -> bool:
        brush = simulation.brush
        params = simulation.params

        if key == pygame.K_ESCAPE:
            logging.info("ESC key pressed. Shutting down visualizer.")
            return False
        if key == pygame.K_SPACE:
            self.paused = not self.paused
            logging.info(f"Simulation {'paused' if self.paused else 'running'}.")
        elif key == pygame.K_r:
            simulation.reset()
        elif key == pygame.K_n:
            simulation.reset_seed((params["seed"] + 1) % SEED_MODULUS)
        elif key == pygame.K_e:
            brush.pointer_up()
            brush.enabled = not brush.enabled
            logging.info(f"Attractor editing {'enabled' if brush.enabled else 'disabled'}.")
        elif key == pygame.K_x and brush.enabled:
            brush.erase = not brush.erase
        elif key == pygame.K_c and brush.enabled:
            simulation.clear_attractors()
        elif key == pygame.K_b:
            simulation.reset_attractors()
        elif key == pygame.K_v:
            self.draw_vectors = not self.draw_vectors
        elif key in (pygame.K_LEFTBRACKET, pygame.K_RIGHTBRACKET) and brush.enabled:
            delta = BRUSH_RADIUS_INCREMENT if key == pygame.K_RIGHTBRACKET else -BRUSH_RADIUS_INCREMENT
            radius = clamp(params["brush_radius"] + delta, *BRUSH_RADIUS_RANGE)
            simulation.set_params(brush_radius=round(radius, 2))
        elif key in (pygame.K_UP, pygame.K_DOWN):
            delta = TEMPERATURE_INCREMENT if key == pygame.K_UP else -TEMPERATURE_INCREMENT
            temperature = clamp(params["temperature"] + delta, *TEMPERATURE_RANGE)
            simulation.set_params(temperature=round(temperature, 2))
        return True

    def _handle_events(self, simulation: "Simulation") -> bool:
        brush = simulation.brush
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN:
                if not self._handle_key(event.key, simulation):
                    return False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                brush.pointer_down(self._to_world(event.pos), simulation.rng)
            elif event.type == pygame.MOUSEMOTION:
                self.mouse_pos = event.pos
                brush.pointer_move(self._to_world(event.pos), simulation.rng)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                brush.pointer_up()
        return True

    def _draw_attractors(self, simulation: "Simulation"):
        self.attractor_surface.fill((0, 0, 0, 0))
        color = (*ATTRACTOR_COLOR, ATTRACTOR_ALPHA)
        for point in simulation.attractors.points:
            pygame.draw.circle(self.attractor_surface, color, self._to_canvas(point), ATTRACTOR_RADIUS)
        self.screen.blit(self.attractor_surface, (0, 0))

    def _draw_particles(self, simulation: "Simulation"):
        for point in simulation.particles.positions:
            pygame.draw.circle(self.screen, PARTICLE_COLOR, self._to_canvas(point), PARTICLE_RADIUS)

    def _draw_vectors(self, simulation: "Simulation"):
        positions = simulation.particles.positions
        velocities = simulation.particles.velocities
        stride = max(1, len(positions) // VECTOR_SAMPLE_TARGET)
        self.vector_surface.fill((0, 0, 0, 0))
        for i in range(0, len(positions), stride):
            start = self._to_canvas(positions[i])
            end = self._to_canvas(positions[i] + VECTOR_SCALE * velocities[i])
            pygame.draw.line(self.vector_surface, VECTOR_COLOR, start, end, 1)
        self.screen.blit(self.vector_surface, (0, 0))

    def _draw_status(self, simulation: "Simulation"):
        stats = simulation.stats
        status = (
            f"step={stats['step']}   mean|V|={stats['mean_velocity']:.3f}   "
            f"T={simulation.temperature:.2f}   pos={stats['attractor_count']}"
        )
        if self.paused:
            status += "   (paused)"
        self.screen.blit(self.font_main.render(status, True, TEXT_COLOR), (12, 8))

        brush = simulation.brush
        if brush.enabled:
            mode = "edit: erase" if brush.erase else "edit: draw"
            mode += f"   r={brush.radius:.2f}"
            self.screen.blit(self.font_small.render(mode, True, TEXT_COLOR), (12, 28))
            if self.mouse_pos is not None:
                pixel_radius = int(brush.radius / (self.bounds.max_x - self.bounds.min_x) * self.width)
                pygame.draw.circle(self.screen, BRUSH_OUTLINE_COLOR, self.mouse_pos, max(1, pixel_radius), 1)

        hint = self.font_small.render(KEY_HELP, True, TEXT_COLOR)
        self.screen.blit(hint, (12, self.height - hint.get_height() - 6))

    def draw(self, simulation: "Simulation") -> bool:
        """
        Draws the current frame and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        self.bounds = simulation.bounds
        if not self._handle_events(simulation):
            return False

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_attractors(simulation)
        self._draw_particles(simulation)
        if self.draw_vectors:
            self._draw_vectors(simulation)
        self._draw_status(simulation)

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
