# photon.py

import numpy as np

import constants
from spectrum import WHITE, Color


def _vector(values) -> np.ndarray:
    return np.array(values, dtype=float)


class RGBPhoton:
    """
    A photon of one RGB channel.

    Data Contract:
    - position, velocity: float arrays of shape (2,), velocity in units / second.
    - intensity: channel level 0-255. An intensity of 0 marks a black sentinel
      photon that only exists to drive the perceived intensity to zero; it is
      never drawn.
    """
    def __init__(self, position, velocity, intensity: int):
        self.position = _vector(position)
        self.velocity = _vector(velocity)
        self.intensity = intensity

    def reinitialize(self, position, velocity, intensity: int):
        """Overwrites every field of a recycled photon in place."""
        self.position[:] = position
        self.velocity[:] = velocity
        self.intensity = intensity
        return self

    def next_position(self, dt: float) -> np.ndarray:
        return self.position + dt * self.velocity

    def advance(self, new_position: np.ndarray):
        self.position[:] = new_position

    @property
    def is_renderable(self) -> bool:
        return self.intensity != 0

    def to_state(self) -> dict:
        return {
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'intensity': self.intensity,
        }

    @classmethod
    def from_state(cls, state: dict) -> "RGBPhoton":
        return cls(state['position'], state['velocity'], state['intensity'])

    def __repr__(self):
        return f"RGBPhoton(position={self.position.tolist()}, velocity={self.velocity.tolist()}, intensity={self.intensity})"


class FilteredPhoton:
    """
    A photon of the single bulb beam, which may pass through a filter.

    The "was_white" flag remembers the photon's original kind: white photons
    that pass the filter take on the filter's color but keep full intensity,
    while colored photons lose intensity instead.

    A photon whose color is fully transparent is a black sentinel and is never drawn.
    """
    def __init__(self, position, velocity, intensity: float, color: Color, is_white: bool, wavelength=None):
        self.position = _vector(position)
        self.velocity = _vector(velocity)
        self._assign(intensity, color, is_white, wavelength)

    def _assign(self, intensity, color, is_white, wavelength):
        self.intensity = intensity
        self.color = color
        self.is_white = self.was_white = is_white
        self.wavelength = wavelength
        self.passed_filter = False

    def reinitialize(self, position, velocity, intensity: float, color: Color, is_white: bool, wavelength=None):
        self.position[:] = position
        self.velocity[:] = velocity
        self._assign(intensity, color, is_white, wavelength)
        return self

    def next_position(self, dt: float) -> np.ndarray:
        return self.position + dt * self.velocity

    def advance(self, new_position: np.ndarray):
        self.position[:] = new_position

    @property
    def is_renderable(self) -> bool:
        return not self.color.is_transparent

    def arrival_color(self) -> Color:
        """
        The color the eye registers when this photon reaches it.
        White photons register as opaque white. Colored photons carry their
        intensity as alpha, unless they started out white and were tinted by the filter.
        """
        if self.is_white:
            return WHITE
        if self.was_white:
            return self.color
        return self.color.with_alpha(self.intensity)

    def to_state(self) -> dict:
        return {
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'intensity': self.intensity,
            'color': list(self.color),
            'is_white': self.is_white,
            'was_white': self.was_white,
            'wavelength': self.wavelength,
            'passed_filter': self.passed_filter,
        }

    @classmethod
    def from_state(cls, state: dict) -> "FilteredPhoton":
        photon = cls(
            state['position'],
            state['velocity'],
            state['intensity'],
            Color(*state['color']),
            state['is_white'],
            state.get('wavelength'),
        )
        photon.was_white = state.get('was_white', photon.is_white)
        photon.passed_filter = state.get('passed_filter', False)
        return photon

    def __repr__(self):
        return (f"FilteredPhoton(position={self.position.tolist()}, color={tuple(self.color)}, "
                f"intensity={self.intensity:.2f}, white={self.is_white}/{self.was_white}, "
                f"passed_filter={self.passed_filter})")


def in_beam_bounds(position: np.ndarray) -> bool:
    """A photon is live while 0 < x and 0 < y < BEAM_HEIGHT."""
    return position[0] > 0 and 0 < position[1] < constants.BEAM_HEIGHT


def fan_out(rng: np.random.Generator, x: float, time_elapsed: float = 0.0):
    """
    Start position and velocity for a photon leaving a source at `x`.

    The y-velocity is drawn uniformly within the fan factor, and the start y is
    offset in proportion to it, so photons appear to diverge from a point
    rather than from a line. `time_elapsed` moves the photon along its path as
    if it had been emitted that long ago.
    """
    y_velocity = (rng.random() * constants.FAN_FACTOR - constants.FAN_FACTOR / 2) * 60
    initial_y = y_velocity * (25 / 60) + constants.BEAM_HEIGHT / 2
    y = initial_y + y_velocity * time_elapsed
    return (x, y), (constants.X_VELOCITY, y_velocity)
