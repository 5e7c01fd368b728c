# single_bulb_model.py

import logging
from dataclasses import fields, replace

import numpy as np

import constants
from filtered_beam import FilteredPhotonBeam
from perception import perceived_color
from settings import BulbSettings
from spectrum import TRANSPARENT_BLACK, Color, validate_gaussian_width

logger = logging.getLogger("color_vision")


class SingleBulbModel:
    """
    Model of the single bulb screen: a flashlight, an optional filter and an eye.

    Data Contract:
    - Inputs:
        - config (dict): The 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: `photon_beam.photons` and `perceived_color`.
    - Side Effects: Listeners registered with `add_listener` are called with the
      new perceived color whenever it changes.
    - Invariants: `perceived_color` always equals the perception function applied
      to the current settings and `last_photon_color`.
    """
    def __init__(self, config: dict, rng: np.random.Generator):
        self.config = config
        gaussian_width = validate_gaussian_width(config.get('gaussian_width', constants.GAUSSIAN_WIDTH))
        self.half_width = gaussian_width / 2

        self.initial_settings = BulbSettings.from_config(config)
        self.settings = replace(self.initial_settings)
        self.playing = True
        self.last_photon_color = TRANSPARENT_BLACK
        self._listeners = []
        self._setting_names = {f.name for f in fields(BulbSettings)}

        self.photon_beam = FilteredPhotonBeam(
            rng,
            beam_length=config.get('beam_length', constants.SINGLE_BEAM_LENGTH),
            filter_offset=config.get('filter_offset', constants.FILTER_OFFSET),
            gaussian_width=gaussian_width,
            emission_rate=config.get('emission_rate', constants.SINGLE_PHOTON_RATE),
            max_photons_per_tick=config.get('max_photons_per_tick', constants.MAX_PHOTONS_PER_TICK),
        )
        self.perceived_color = self._derive_perceived_color()

        logger.info(f"SingleBulbModel created with settings: {self.settings}")

    def add_listener(self, callback):
        """Registers callback(color), called whenever the perceived color changes."""
        self._listeners.append(callback)

    def update_settings(self, **changes):
        """
        Applies new control settings, then recomputes the perceived color.

        Turning the flashlight off sends a black photon down the beam, so in
        photon mode the eye goes dark once the photons already in flight land.
        """
        for name in changes:
            if name not in self._setting_names:
                raise ValueError(f"Unknown setting {name!r}")

        was_on = self.settings.flashlight_on
        new_settings = replace(self.settings, **changes)
        self.settings = new_settings

        if was_on and not new_settings.flashlight_on:
            self.photon_beam.emit_black_photon(self.photon_beam.beam_length)

        self._refresh()

    def step(self, dt: float):
        # Cap dt so a stall can't flood the beam with photons
        dt = float(np.clip(dt, 0.0, constants.MAX_DT))
        if self.playing:
            self._advance(dt)

    def manual_step(self):
        """Steps one frame, assuming 60fps."""
        self._advance(constants.MANUAL_STEP_DT)

    def _advance(self, dt: float):
        self.photon_beam.update(dt, self.settings, self.perceived_color)
        if self.photon_beam.last_photon_color != self.last_photon_color:
            self.last_photon_color = self.photon_beam.last_photon_color
            self._refresh()

    def _derive_perceived_color(self) -> Color:
        s = self.settings
        return perceived_color(
            s.flashlight_wavelength,
            s.filter_wavelength,
            s.flashlight_on,
            s.filter_enabled,
            s.light_type,
            s.beam_type,
            self.last_photon_color,
            self.half_width,
        )

    def _refresh(self):
        color = self._derive_perceived_color()
        if color != self.perceived_color:
            self.perceived_color = color
            for callback in self._listeners:
                callback(color)

    @property
    def photons(self):
        """Photons the renderer should draw this frame."""
        return self.photon_beam.renderable_photons()

    def reset(self):
        """Returns to the default controls: colored light, beam mode, everything off."""
        self.settings = BulbSettings()
        self.playing = True
        self.photon_beam.reset()
        self.last_photon_color = self.photon_beam.last_photon_color
        self._refresh()
        logger.info("SingleBulbModel reset.")
