# perception.py

"""
Perceived Color

Derives the single color the eye perceives from the current settings. These are
pure functions: models call them again after any input changes.
"""

import constants
from spectrum import BLACK, WHITE, Color, transmission_probability, wavelength_to_color


def perceived_color(flashlight_wavelength: float, filter_wavelength: float, flashlight_on: bool,
                    filter_enabled: bool, light_type: str, beam_type: str, last_photon_color: Color,
                    half_width: float) -> Color:
    """
    Color perceived by the eye on the single bulb screen.

    In photon mode the beam simulates each photon, so the eye simply sees the
    last photon to arrive. In beam mode the same outcome is computed directly,
    using the transmission model the photon filter uses, so both modes settle
    on the same color.
    """
    if beam_type == constants.BEAM_PHOTON:
        return last_photon_color

    if not flashlight_on:
        return BLACK

    is_white = light_type == constants.LIGHT_WHITE
    if filter_enabled and not is_white:
        alpha = transmission_probability(flashlight_wavelength, filter_wavelength, half_width)
        return wavelength_to_color(flashlight_wavelength).with_alpha(alpha)
    if filter_enabled and is_white:
        return wavelength_to_color(filter_wavelength)
    if is_white:
        return WHITE
    return wavelength_to_color(flashlight_wavelength)


def rgb_perceived_color(red: int, green: int, blue: int) -> Color:
    """Color perceived on the RGB screen from the three perceived channel intensities."""
    return Color(int(red), int(green), int(blue), 1.0)
