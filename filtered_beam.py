# filtered_beam.py

import logging

import numpy as np

import constants
from photon import FilteredPhoton, fan_out, in_beam_bounds
from photon_pool import PhotonPool
from settings import BulbSettings
from spectrum import (
    TRANSPARENT_BLACK,
    Color,
    transmission_probability,
    validate_gaussian_width,
    wavelength_to_color,
)

logger = logging.getLogger("color_vision")


class FilteredPhotonBeam:
    """
    The single bulb beam: one flashlight, an optional wavelength filter, and
    the eye at x = 0.

    Data Contract:
    - Inputs:
        - rng (np.random.Generator): seeded generator for emission, fan angles,
          white photon colors and filter transmission draws.
        - beam_length (float): x at which photons leave the flashlight.
        - filter_offset (float): x of the filter, 0 < filter_offset < beam_length.
        - gaussian_width (float): full width of the filter transmission window, nm.
        - emission_rate (float): mean photons emitted per second.
        - max_photons_per_tick (int): cap on photons emitted in a single update.
    - Outputs: `photons` and `last_photon_color`, the color of the last photon
      to reach the eye.
    - Invariants: after `update`, every live photon is inside the beam bounds,
      and each photon is evaluated against the filter at most once.
    """
    def __init__(self, rng: np.random.Generator, beam_length: float = constants.SINGLE_BEAM_LENGTH,
                 filter_offset: float = constants.FILTER_OFFSET, gaussian_width: float = constants.GAUSSIAN_WIDTH,
                 emission_rate: float = constants.SINGLE_PHOTON_RATE,
                 max_photons_per_tick: int = constants.MAX_PHOTONS_PER_TICK):
        if not 0 < filter_offset < beam_length:
            raise ValueError(f"filter_offset must lie inside the beam (0, {beam_length}), got {filter_offset}")
        self.rng = rng
        self.beam_length = beam_length
        self.filter_offset = filter_offset
        self.half_width = validate_gaussian_width(gaussian_width) / 2
        self.emission_rate = emission_rate
        self.max_photons_per_tick = max_photons_per_tick

        self.photons = []
        self.last_photon_color = TRANSPARENT_BLACK
        # Set when a photon hit the filter this tick and had no chance of passing
        self.filter_blocked_all = False
        self.pool = PhotonPool(
            FilteredPhoton,
            ((0.0, 0.0), (constants.X_VELOCITY, 0.0), 1.0, TRANSPARENT_BLACK, False, None),
            initial_size=constants.PHOTON_POOL_SIZE,
        )

        logger.info(
            f"FilteredPhotonBeam created: length={beam_length}, filter at x={filter_offset}, "
            f"half width={self.half_width}nm, emission rate={emission_rate}/s."
        )

    def update(self, dt: float, settings: BulbSettings, perceived_color: Color):
        """
        Advances the beam by dt seconds.

        Order within a tick:
        1. Each photon's next position is computed. If that move takes it past
           the filter, it is filtered first, at most once, even when the same
           move also carries it out of the beam.
        2. Photons leaving the beam are retired, which updates `last_photon_color`.
        3. New photons are emitted while the flashlight is on.
        4. If the filter let nothing through, a black photon is sent from the
           filter so the eye goes dark once the last transmitted photon lands.
        """
        self.filter_blocked_all = False

        survivors = []
        for photon in self.photons:
            # Photons parked at x = 0 by reset() leave without reaching the eye
            if photon.position[0] <= 0:
                self.pool.release(photon)
                continue

            new_position = photon.next_position(dt)
            if not self.cross_filter(photon, settings, new_position[0]):
                self.pool.release(photon)
                continue

            if not in_beam_bounds(new_position):
                self.last_photon_color = photon.arrival_color()
                self.pool.release(photon)
                continue

            photon.advance(new_position)
            survivors.append(photon)
        self.photons = survivors

        if settings.flashlight_on:
            self._emit_photons(dt, settings)

        if self.filter_blocked_all and settings.filter_enabled and not perceived_color.is_black:
            self.emit_black_photon(self.filter_offset)

    def cross_filter(self, photon: FilteredPhoton, settings: BulbSettings, x: float = None) -> bool:
        """
        Applies the filter to a photon moving to `x` (its current x by default).

        Returns False when the photon is absorbed, True otherwise. Once a
        photon is past the filter it is marked `passed_filter` and later calls
        leave it untouched.
        """
        if x is None:
            x = photon.position[0]
        if x >= self.filter_offset:
            return True

        if settings.filter_enabled and not photon.passed_filter:
            photon.passed_filter = True
            probability = self.photon_transmission(photon, settings)

            if self.rng.random() >= probability:
                if probability == 0:
                    self.filter_blocked_all = True
                return False

            if photon.is_white:
                # The filter imposes its own color on white light
                photon.color = wavelength_to_color(settings.filter_wavelength)
                photon.is_white = False
            else:
                photon.intensity = max(probability, constants.MIN_VISIBLE_INTENSITY)

        photon.passed_filter = True
        return True

    def photon_transmission(self, photon: FilteredPhoton, settings: BulbSettings) -> float:
        """White light partially passes any filter at a fixed rate."""
        if photon.was_white:
            return constants.WHITE_TRANSMISSION
        return transmission_probability(photon.wavelength, settings.filter_wavelength, self.half_width)

    def _emit_photons(self, dt: float, settings: BulbSettings):
        count = min(int(self.rng.poisson(self.emission_rate * dt)), self.max_photons_per_tick)
        for _ in range(count):
            if settings.is_white:
                color, wavelength = self._random_color(), None
            else:
                color, wavelength = wavelength_to_color(settings.flashlight_wavelength), settings.flashlight_wavelength

            position, velocity = fan_out(self.rng, self.beam_length)
            photon = self.pool.acquire(position, velocity, 1.0, color, settings.is_white, wavelength)

            # Stagger start positions so photons emitted in the same tick don't band
            photon.position[0] += self.rng.random() * photon.velocity[0] * dt
            self.photons.append(photon)

    def _random_color(self) -> Color:
        r, g, b = self.rng.integers(0, 256, size=3)
        return Color(int(r), int(g), int(b), 1.0)

    def emit_black_photon(self, x: float):
        """
        Sends a transparent black photon from `x` to the eye. It bypasses the
        filter and turns the perceived color black when it arrives.
        """
        photon = self.pool.acquire((x, constants.BEAM_HEIGHT / 2), (constants.X_VELOCITY, 0.0), 1.0,
                                   TRANSPARENT_BLACK, False, None)
        photon.passed_filter = True
        self.photons.append(photon)
        logger.debug(f"Black photon emitted at x={x}.")

    def renderable_photons(self):
        return [photon for photon in self.photons if photon.is_renderable and photon.position[0] > 0]

    def reset(self):
        """
        Parks every live photon at x = 0. The next update returns them all to the pool.
        """
        for photon in self.photons:
            photon.position[0] = 0
        self.last_photon_color = TRANSPARENT_BLACK
        self.filter_blocked_all = False
        logger.debug(f"FilteredPhotonBeam reset, {len(self.photons)} photon(s) parked for removal.")
