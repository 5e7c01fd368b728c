# spectrum.py

from typing import NamedTuple

import numba
import numpy as np

import constants


class Color(NamedTuple):
    """
    An RGBA color. Channels are integers in 0-255, alpha is a fraction in 0-1.
    Immutable, so it can be compared and shared freely between photons.
    """
    r: int
    g: int
    b: int
    a: float = 1.0

    def with_alpha(self, alpha: float) -> "Color":
        return self._replace(a=float(alpha))

    @property
    def is_black(self) -> bool:
        """Opaque black, the color the eye sees when no light reaches it."""
        return self == BLACK

    @property
    def is_transparent(self) -> bool:
        return self.a == 0

    def to_rgba255(self) -> tuple:
        """Converts to the 4-component integer tuple pygame expects."""
        return (self.r, self.g, self.b, int(round(self.a * 255)))


BLACK = Color(0, 0, 0, 1.0)
WHITE = Color(255, 255, 255, 1.0)
TRANSPARENT_BLACK = Color(0, 0, 0, 0.0)


# --- JIT-Compiled Optics Functions ---
# Scalar kernels shared by the beams and the perception derivation, so the
# particle and beam views of the same settings agree exactly.

@numba.jit(nopython=True)
def _wavelength_to_rgb_jit(wavelength, gamma):
    """
    Piecewise-linear visible spectrum (violet -> blue -> cyan -> green ->
    yellow -> red) with a linear intensity falloff at both edges of vision.
    Each piece meets its neighbours, so the curve has no jumps.
    """
    if wavelength < 440.0:
        r = (440.0 - wavelength) / (440.0 - 380.0)
        g = 0.0
        b = 1.0
    elif wavelength < 490.0:
        r = 0.0
        g = (wavelength - 440.0) / (490.0 - 440.0)
        b = 1.0
    elif wavelength < 510.0:
        r = 0.0
        g = 1.0
        b = (510.0 - wavelength) / (510.0 - 490.0)
    elif wavelength < 580.0:
        r = (wavelength - 510.0) / (580.0 - 510.0)
        g = 1.0
        b = 0.0
    elif wavelength < 645.0:
        r = 1.0
        g = (645.0 - wavelength) / (645.0 - 580.0)
        b = 0.0
    else:
        r = 1.0
        g = 0.0
        b = 0.0

    # Intensity falls off near the limits of vision
    if wavelength < 420.0:
        factor = 0.3 + 0.7 * (wavelength - 380.0) / (420.0 - 380.0)
    elif wavelength > 700.0:
        factor = 0.3 + 0.7 * (780.0 - wavelength) / (780.0 - 700.0)
    else:
        factor = 1.0

    return (
        _gamma_channel_jit(r * factor, gamma),
        _gamma_channel_jit(g * factor, gamma),
        _gamma_channel_jit(b * factor, gamma),
    )


@numba.jit(nopython=True)
def _gamma_channel_jit(value, gamma):
    """Scales a 0-1 channel to 0-255 after gamma correction."""
    if value <= 0.0:
        return 0
    return int(255.0 * value ** gamma + 0.5)


@numba.jit(nopython=True)
def _transmission_probability_jit(wavelength, filter_wavelength, half_width):
    """
    Linear transmission window: 1 at the filter wavelength, falling to 0 at
    +/- half_width, and 0 everywhere outside the window.
    """
    if wavelength < filter_wavelength - half_width or wavelength > filter_wavelength + half_width:
        return 0.0
    return 1.0 - abs(filter_wavelength - wavelength) / half_width


def clamp_wavelength(wavelength: float) -> float:
    """Clamps a wavelength into the visible range."""
    return float(np.clip(wavelength, constants.MIN_WAVELENGTH, constants.MAX_WAVELENGTH))


def wavelength_to_color(wavelength: float) -> Color:
    """
    Maps a visible wavelength in nm to an opaque Color.

    Out-of-range input is clamped rather than rejected.
    """
    r, g, b = _wavelength_to_rgb_jit(clamp_wavelength(wavelength), constants.SPECTRUM_GAMMA)
    return Color(int(r), int(g), int(b), 1.0)


def transmission_probability(wavelength: float, filter_wavelength: float, half_width: float) -> float:
    """
    Probability that a photon of `wavelength` passes a filter centered on
    `filter_wavelength` whose transmission window is +/- `half_width` nm wide.
    """
    return float(_transmission_probability_jit(float(wavelength), float(filter_wavelength), float(half_width)))


def validate_gaussian_width(gaussian_width: float) -> float:
    if gaussian_width <= 0:
        raise ValueError(f"gaussian_width must be positive, got {gaussian_width}")
    return float(gaussian_width)
