# rgb_model.py

import logging

import numpy as np

import constants
from event_timer import EventTimer
from perception import rgb_perceived_color
from rgb_beam import RGBPhotonBeam

logger = logging.getLogger("color_vision")

CHANNELS = ('red', 'green', 'blue')


class RGBModel:
    """
    Model of the RGB screen: three independent colored bulbs whose photons mix
    at the eye.

    Data Contract:
    - Inputs:
        - config (dict): The 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: per-beam photons and `perceived_color`.
    - Invariants: every beam receives one photon per timer event, so channels
      stay in step with each other.
    """
    def __init__(self, config: dict, rng: np.random.Generator):
        self.config = config
        beam_length = config.get('rgb_beam_length', constants.RGB_BEAM_LENGTH)
        self.beams = {name: RGBPhotonBeam(name, rng, beam_length) for name in CHANNELS}
        self.initial_intensities = tuple(config.get('rgb_intensities', (0, 0, 0)))
        self.playing = True
        self._listeners = []

        self.event_timer = EventTimer(config.get('rgb_photon_rate', constants.RGB_PHOTON_RATE), self._create_photons)

        self._apply_intensities(self.initial_intensities)
        self.perceived_color = self._derive_perceived_color()

        logger.info(
            f"RGBModel created: beam length={beam_length}, "
            f"photon rate={1.0 / self.event_timer.period:.0f}/s, intensities={self.initial_intensities}."
        )

    def add_listener(self, callback):
        self._listeners.append(callback)

    def set_intensity(self, channel: str, intensity: int):
        """Sets a bulb's intensity; values are clipped to the 0-255 channel range."""
        if channel not in self.beams:
            raise ValueError(f"Unknown channel {channel!r}, expected one of {CHANNELS}")
        self.beams[channel].intensity = int(np.clip(intensity, 0, 255))

    def _apply_intensities(self, intensities):
        for channel, intensity in zip(CHANNELS, intensities):
            self.set_intensity(channel, intensity)

    def _create_photons(self, time_elapsed: float):
        for beam in self.beams.values():
            beam.create_photon(time_elapsed)

    def step(self, dt: float):
        dt = float(np.clip(dt, 0.0, constants.MAX_DT))
        if self.playing:
            for beam in self.beams.values():
                beam.update(dt)
            self.event_timer.step(dt)
            self._refresh()

    def manual_step(self):
        """Steps one frame, assuming 60fps."""
        for beam in self.beams.values():
            beam.update(constants.MANUAL_STEP_DT)
        self.event_timer.manual_step()
        self._refresh()

    def _derive_perceived_color(self):
        return rgb_perceived_color(*(self.beams[name].perceived_intensity for name in CHANNELS))

    def _refresh(self):
        color = self._derive_perceived_color()
        if color != self.perceived_color:
            self.perceived_color = color
            for callback in self._listeners:
                callback(color)

    @property
    def photons(self):
        """(channel, photon) pairs the renderer should draw this frame."""
        return [(name, photon) for name, beam in self.beams.items() for photon in beam.renderable_photons()]

    def reset(self):
        for beam in self.beams.values():
            beam.reset()
        self.event_timer.reset()
        self._apply_intensities(self.initial_intensities)
        self.playing = True
        self._refresh()
        logger.info("RGBModel reset.")
