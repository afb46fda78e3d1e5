# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as the world
domain, numeric floors used by the drift kernel, rendering properties,
and the default experimental configuration used when config.json omits
a value.
"""

# --- World Domain ---
# Particles and attractors live in this fixed axis-aligned square.
DOMAIN_MIN_X = -2.5
DOMAIN_MAX_X = 2.5
DOMAIN_MIN_Y = -2.5
DOMAIN_MAX_Y = 2.5
# Particles are initialized uniformly over a symmetric span of this width.
INIT_SPAN = 5.0

# --- Drift Kernel Numerics ---
TEMPERATURE_FLOOR = 1e-6
SOFTMAX_EPSILON = 1e-12
AFFINITY_EPSILON = 1e-24
# Distance assigned to a particle paired with itself in the negative block.
SELF_DISTANCE_SENTINEL = 1e6

# --- Attractor Storage ---
MIN_ATTRACTOR_CAPACITY = 256
CLUSTER_STD = 0.27
CLUSTER_CENTERS = [
    (-1.2, 0.9),
    (1.1, 0.9),
    (-0.2, -1.15),
    (1.25, -0.8),
    (-1.3, -0.2),
    (0.1, 1.2),
    (0.9, -0.1),
    (-0.7, 0.2),
]

# --- Brush ---
# Airbrush ink budget: points per unit area decay as 230 / (1 + 10 r).
SPRAY_DENSITY = 230.0
SPRAY_FALLOFF = 10.0
STROKE_SPACING_FACTOR = 0.35
STROKE_MIN_SPACING = 0.015
STROKE_MAX_STEPS = 40
MIN_BRUSH_RADIUS = 1e-4
BRUSH_RADIUS_RANGE = (0.03, 0.30)
BRUSH_RADIUS_INCREMENT = 0.01

# --- Parameter Ranges (UI control panel) ---
TEMPERATURE_RANGE = (0.05, 1.20)
TEMPERATURE_INCREMENT = 0.01
SEED_MODULUS = 100000

# Default experimental configuration, used for any key missing from
# the "simulation_parameters" section of config.json.
DEFAULT_SIMULATION_PARAMS = {
    "seed": 0,
    "particle_count": 350,
    "temperature": 0.30,
    "step_size": 0.06,
    "noise_scale": 0.0,
    "brush_radius": 0.10,
    "cluster_count": 4,
    "base_attractor_count": 600,
}

# Visualization settings
WINDOW_WIDTH = 900
WINDOW_HEIGHT = 900
FPS = 60
BACKGROUND_COLOR = (241, 245, 249)  # Slate 100
PARTICLE_COLOR = (20, 20, 20)
PARTICLE_RADIUS = 3
ATTRACTOR_COLOR = (50, 110, 255)
ATTRACTOR_ALPHA = 72
ATTRACTOR_RADIUS = 2
VECTOR_COLOR = (0, 0, 0, 56)
TEXT_COLOR = (0, 0, 0)
BRUSH_OUTLINE_COLOR = (50, 110, 255)

# --- Drift Vector Overlay ---
# At most this many vectors are drawn; the rest are skipped by stride.
VECTOR_SAMPLE_TARGET = 140
VECTOR_SCALE = 0.35
