# settings.py

"""
Control settings of the single bulb screen, as supplied by the UI layer.
"""

from dataclasses import dataclass

import constants
from spectrum import clamp_wavelength


@dataclass
class BulbSettings:
    flashlight_on: bool = False
    flashlight_wavelength: float = constants.DEFAULT_WAVELENGTH  # nm
    filter_enabled: bool = False
    filter_wavelength: float = constants.DEFAULT_WAVELENGTH  # nm
    light_type: str = constants.LIGHT_COLORED
    beam_type: str = constants.BEAM_SOLID

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Rejects unknown light/beam types and clamps both wavelengths into the
        visible range.
        """
        if self.light_type not in constants.LIGHT_TYPES:
            raise ValueError(f"Unknown light type {self.light_type!r}, expected one of {constants.LIGHT_TYPES}")
        if self.beam_type not in constants.BEAM_TYPES:
            raise ValueError(f"Unknown beam type {self.beam_type!r}, expected one of {constants.BEAM_TYPES}")
        self.flashlight_wavelength = clamp_wavelength(self.flashlight_wavelength)
        self.filter_wavelength = clamp_wavelength(self.filter_wavelength)

    @property
    def is_white(self) -> bool:
        return self.light_type == constants.LIGHT_WHITE

    @classmethod
    def from_config(cls, config: dict) -> "BulbSettings":
        return cls(
            flashlight_on=config.get('flashlight_on', False),
            flashlight_wavelength=config.get('flashlight_wavelength', constants.DEFAULT_WAVELENGTH),
            filter_enabled=config.get('filter_enabled', False),
            filter_wavelength=config.get('filter_wavelength', constants.DEFAULT_WAVELENGTH),
            light_type=config.get('light_type', constants.LIGHT_COLORED),
            beam_type=config.get('beam_type', constants.BEAM_SOLID),
        )
