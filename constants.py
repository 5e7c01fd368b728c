# constants.py

"""
Application Constants

This module defines static configuration values for the simulation framework
and the optics model. These are not expected to change between simulation runs.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 900  # Pixels
HEIGHT = 400  # Pixels

# Framerate
FPS = 60  # Frames per second

# Window Title
TITLE = "Color Vision"

# --- Beam geometry ---
# Height of every photon beam. Photons must stay strictly inside (0, BEAM_HEIGHT).
BEAM_HEIGHT = 130  # Simulation units

# Photons travel from the source (x = beam length) towards the eye (x = 0) at a
# constant x-velocity. Only the y-velocity varies, to fan the beam out slightly.
X_VELOCITY = -240  # Simulation units / second

# Amount of fanning of photons leaving a source.
FAN_FACTOR = 1.05

RGB_BEAM_LENGTH = 180  # Simulation units
SINGLE_BEAM_LENGTH = 300  # Simulation units

# x-position of the filter on the single bulb beam.
FILTER_OFFSET = 140  # Simulation units

# --- Spectrum ---
MIN_WAVELENGTH = 380  # nm
MAX_WAVELENGTH = 780  # nm
DEFAULT_WAVELENGTH = 570  # nm, yellow

# Gamma applied to the wavelength color channels.
SPECTRUM_GAMMA = 0.8

# --- Filter transmission model ---
# Full width of the filter's transmission window. Transmission falls linearly
# from 1 at the filter wavelength to 0 at +/- GAUSSIAN_WIDTH / 2.
GAUSSIAN_WIDTH = 50  # nm

# White photons pass any filter with this fixed probability.
WHITE_TRANSMISSION = 0.3

# Colored photons that pass the filter never drop below this intensity.
MIN_VISIBLE_INTENSITY = 0.2

# --- Timing ---
MAX_DT = 0.5  # Seconds. Upper bound on a single step after a stall.
MANUAL_STEP_DT = 1 / 60  # Seconds. One frame at 60fps.

# Photons created per second by each RGB beam.
RGB_PHOTON_RATE = 120  # Events / second

# Filtered beam emission, used when the config does not override it.
SINGLE_PHOTON_RATE = 180  # Photons / second
MAX_PHOTONS_PER_TICK = 30

# --- Particle pool ---
# Logging the pool size with every beam at full blast showed 10-35 idle photons,
# so 50 is a comfortable upper bound.
PHOTON_POOL_SIZE = 50

# --- Settings values ---
LIGHT_WHITE = "white"
LIGHT_COLORED = "colored"
LIGHT_TYPES = (LIGHT_WHITE, LIGHT_COLORED)

BEAM_SOLID = "beam"
BEAM_PHOTON = "photon"
BEAM_TYPES = (BEAM_SOLID, BEAM_PHOTON)

# Colors (RGB)
BACKGROUND = (0, 0, 0)
FILTER_OUTLINE = (200, 200, 200)

# Radius used when drawing a photon.
PHOTON_RADIUS = 2  # Pixels
