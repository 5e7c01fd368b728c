# rgb_beam.py

import logging

import numpy as np

import constants
from photon import RGBPhoton, fan_out, in_beam_bounds
from photon_pool import PhotonPool

logger = logging.getLogger("color_vision")


class RGBPhotonBeam:
    """
    One channel (red, green or blue) of the RGB screen, made of individual photons.

    Data Contract:
    - Inputs:
        - name (str): channel name, used for logging.
        - rng (np.random.Generator): seeded generator for the fan angle.
        - beam_length (float): x at which photons are emitted.
    - Outputs: `photons` (live photons, creation order) and
      `perceived_intensity` (intensity of the last photon to reach the eye).
    - Invariants: after `update`, every live photon is inside the beam bounds.
    """
    def __init__(self, name: str, rng: np.random.Generator, beam_length: float = constants.RGB_BEAM_LENGTH):
        self.name = name
        self.rng = rng
        self.beam_length = beam_length
        self.intensity = 0
        self.perceived_intensity = 0
        self.photons = []
        self.pool = PhotonPool(
            RGBPhoton,
            ((0.0, 0.0), (constants.X_VELOCITY, 0.0), 0),
            initial_size=constants.PHOTON_POOL_SIZE,
        )

    def update(self, dt: float):
        """
        Moves every live photon, retiring those that leave the beam. Retiring a
        photon hands its intensity to the eye.
        """
        survivors = []
        for photon in self.photons:
            new_position = photon.next_position(dt)
            if in_beam_bounds(new_position):
                photon.advance(new_position)
                survivors.append(photon)
            else:
                self.perceived_intensity = photon.intensity
                self.pool.release(photon)
        self.photons = survivors

        # Only photons reaching the eye change the perceived intensity, so a
        # dark source still needs a black photon to carry "nothing" to the eye.
        if self.intensity == 0 and dt > 0:
            self.photons.append(self.pool.acquire(
                (self.beam_length, constants.BEAM_HEIGHT / 2),
                (constants.X_VELOCITY, 0.0),
                0,
            ))

    def create_photon(self, time_elapsed: float):
        """
        Emits one photon, placed where it would be had it left the source
        `time_elapsed` seconds ago. Does nothing while the channel is off.
        """
        if self.intensity <= 0:
            return

        x = self.beam_length + constants.X_VELOCITY * time_elapsed
        position, velocity = fan_out(self.rng, x, time_elapsed)
        self.photons.append(self.pool.acquire(position, velocity, self.intensity))

    def renderable_photons(self):
        return [photon for photon in self.photons if photon.is_renderable]

    def reset(self):
        for photon in self.photons:
            self.pool.release(photon)
        self.photons = []
        self.perceived_intensity = 0
        logger.debug(f"{self.name} beam reset. Pool size: {self.pool.size}.")
