# test_filtered_beam.py

import json

import numpy as np
import pytest

import constants
from filtered_beam import FilteredPhotonBeam
from photon import FilteredPhoton
from settings import BulbSettings
from spectrum import BLACK, TRANSPARENT_BLACK, WHITE, Color, wavelength_to_color

OFFSET = constants.FILTER_OFFSET


def photon_before_filter(wavelength=550, is_white=False):
    color = WHITE if is_white else wavelength_to_color(wavelength)
    return FilteredPhoton((OFFSET - 1.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, color, is_white,
                          None if is_white else wavelength)


def assert_in_bounds(beam):
    for photon in beam.photons:
        assert photon.position[0] > 0
        assert 0 < photon.position[1] < constants.BEAM_HEIGHT


@pytest.fixture
def filter_on():
    return BulbSettings(filter_enabled=True, filter_wavelength=550)


def test_colored_photon_passes_with_reduced_intensity(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.1))
    photon = photon_before_filter(wavelength=562.5)  # half width 25nm, probability 0.5

    assert beam.cross_filter(photon, filter_on)
    assert photon.passed_filter
    assert photon.intensity == pytest.approx(0.5)
    assert photon.arrival_color() == wavelength_to_color(562.5).with_alpha(0.5)


def test_passed_intensity_has_a_visible_floor(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.01))
    photon = photon_before_filter(wavelength=572.5)  # probability 0.1

    assert beam.cross_filter(photon, filter_on)
    assert photon.intensity == constants.MIN_VISIBLE_INTENSITY


def test_photon_is_blocked_when_draw_exceeds_probability(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.9))
    photon = photon_before_filter(wavelength=562.5)

    assert not beam.cross_filter(photon, filter_on)
    assert not beam.filter_blocked_all


def test_photon_outside_window_is_always_blocked(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.0))
    photon = photon_before_filter(wavelength=600)

    assert not beam.cross_filter(photon, filter_on)
    assert beam.filter_blocked_all


def test_white_photon_takes_filter_color(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.1))
    photon = photon_before_filter(is_white=True)

    assert beam.cross_filter(photon, filter_on)
    assert not photon.is_white
    assert photon.was_white
    assert photon.color == wavelength_to_color(550)
    assert photon.intensity == 1.0
    assert photon.arrival_color() == wavelength_to_color(550)


@pytest.mark.parametrize("filter_wavelength", [380, 550, 700, 780])
def test_white_photons_use_fixed_transmission(rng, filter_wavelength):
    beam = FilteredPhotonBeam(rng)
    settings = BulbSettings(filter_enabled=True, filter_wavelength=filter_wavelength)
    assert beam.photon_transmission(photon_before_filter(is_white=True), settings) == constants.WHITE_TRANSMISSION


def test_white_transmission_rate(rng, filter_on):
    beam = FilteredPhotonBeam(rng)
    passed = sum(beam.cross_filter(photon_before_filter(is_white=True), filter_on) for _ in range(4000))
    assert passed / 4000 == pytest.approx(constants.WHITE_TRANSMISSION, abs=0.03)


def test_filter_crossing_is_idempotent(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.1))
    photon = photon_before_filter(wavelength=562.5)
    beam.cross_filter(photon, filter_on)
    state = photon.to_state()

    beam.rng = fixed_random(0.99)
    assert beam.cross_filter(photon, filter_on)
    assert photon.to_state() == state


def test_photons_before_filter_are_untouched(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.99))
    photon = FilteredPhoton((OFFSET + 1.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, wavelength_to_color(600), False, 600)

    assert beam.cross_filter(photon, filter_on)
    assert not photon.passed_filter


def test_disabled_filter_marks_photon_without_filtering(fixed_random):
    beam = FilteredPhotonBeam(fixed_random(0.99))
    photon = photon_before_filter(wavelength=700)

    assert beam.cross_filter(photon, BulbSettings(filter_enabled=False))
    assert photon.passed_filter
    assert photon.intensity == 1.0


def test_blocked_filter_sends_black_photon(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.5))
    beam.photons.append(photon_before_filter(wavelength=600))

    beam.update(1 / 60, filter_on, TRANSPARENT_BLACK)

    assert len(beam.photons) == 1
    sentinel = beam.photons[0]
    assert sentinel.passed_filter
    assert sentinel.position[0] == OFFSET
    assert not sentinel.is_renderable
    assert sentinel.arrival_color() == BLACK


def test_no_black_photon_once_eye_is_black(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.5))
    beam.photons.append(photon_before_filter(wavelength=600))

    beam.update(1 / 60, filter_on, BLACK)
    assert beam.photons == []


def test_arrival_updates_last_photon_color(rng):
    beam = FilteredPhotonBeam(rng)
    photon = FilteredPhoton((2.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, wavelength_to_color(480), False, 480)
    beam.photons.append(photon)

    beam.update(1 / 60, BulbSettings(), TRANSPARENT_BLACK)
    assert beam.photons == []
    assert beam.last_photon_color == wavelength_to_color(480)


def test_white_photon_arrives_as_white(rng):
    beam = FilteredPhotonBeam(rng)
    beam.photons.append(FilteredPhoton((2.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, Color(12, 200, 90), True))

    beam.update(1 / 60, BulbSettings(), TRANSPARENT_BLACK)
    assert beam.last_photon_color == WHITE


def test_emission_is_proportional_to_dt(rng):
    settings = BulbSettings(flashlight_on=True)
    beam = FilteredPhotonBeam(rng, emission_rate=180)
    beam.update(0.0, settings, BLACK)
    assert beam.photons == []

    beam.update(0.1, settings, BLACK)
    assert 0 < len(beam.photons) <= constants.MAX_PHOTONS_PER_TICK


def test_emission_is_capped_per_tick(rng):
    beam = FilteredPhotonBeam(rng, emission_rate=10000, max_photons_per_tick=12)
    beam.update(0.5, BulbSettings(flashlight_on=True), BLACK)
    assert len(beam.photons) == 12


def test_emitted_photon_kinds(rng):
    beam = FilteredPhotonBeam(rng, emission_rate=600)
    beam.update(0.1, BulbSettings(flashlight_on=True, flashlight_wavelength=480), BLACK)
    assert all(p.color == wavelength_to_color(480) and p.wavelength == 480 and not p.is_white for p in beam.photons)

    beam = FilteredPhotonBeam(rng, emission_rate=600)
    beam.update(0.1, BulbSettings(flashlight_on=True, light_type=constants.LIGHT_WHITE), BLACK)
    assert all(p.is_white and p.was_white and p.wavelength is None for p in beam.photons)


def test_photons_stay_in_bounds(rng):
    beam = FilteredPhotonBeam(rng)
    settings = BulbSettings(flashlight_on=True, filter_enabled=True, filter_wavelength=560,
                            flashlight_wavelength=570, light_type=constants.LIGHT_WHITE)
    for i, dt in enumerate(np.tile([0.0, 1 / 60, 0.2, 0.5, 0.01], 30)):
        if i == 60:
            settings = BulbSettings(flashlight_on=True, filter_enabled=True, filter_wavelength=560,
                                    flashlight_wavelength=570)
        beam.update(dt, settings, beam.last_photon_color)
        assert_in_bounds(beam)


def test_reset_sweeps_photons_into_pool(rng):
    beam = FilteredPhotonBeam(rng)
    on = BulbSettings(flashlight_on=True)
    for _ in range(60):
        beam.update(1 / 60, on, BLACK)
    live = len(beam.photons)
    assert live > 0

    beam.reset()
    assert beam.renderable_photons() == []
    assert beam.last_photon_color == TRANSPARENT_BLACK

    beam.update(1 / 60, BulbSettings(), BLACK)
    assert beam.photons == []
    assert beam.pool.size == beam.pool.max_size
    # Swept photons never reach the eye
    assert beam.last_photon_color == TRANSPARENT_BLACK


def test_snapshot_is_a_flat_record():
    photon = photon_before_filter(wavelength=520)
    photon.passed_filter = True
    state = json.loads(json.dumps(photon.to_state()))

    restored = FilteredPhoton.from_state(state)
    assert restored.to_state() == photon.to_state()
    assert restored.color == wavelength_to_color(520)


def test_filter_offset_must_lie_inside_beam(rng):
    with pytest.raises(ValueError):
        FilteredPhotonBeam(rng, beam_length=300, filter_offset=400)


def test_gaussian_width_must_be_positive(rng):
    with pytest.raises(ValueError):
        FilteredPhotonBeam(rng, gaussian_width=0)


def test_photon_crossing_filter_and_leaving_beam_is_still_filtered(fixed_random, filter_on):
    # A filter close to the eye: one capped step carries the photon past both
    beam = FilteredPhotonBeam(fixed_random(0.0), filter_offset=100)
    photon = FilteredPhoton((110.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, wavelength_to_color(650), False, 650)
    beam.photons.append(photon)

    beam.update(constants.MAX_DT, filter_on, TRANSPARENT_BLACK)

    assert beam.last_photon_color == TRANSPARENT_BLACK
    assert beam.filter_blocked_all
    assert [p.color for p in beam.photons] == [TRANSPARENT_BLACK]


def test_passed_photon_crossing_filter_and_leaving_beam_arrives_filtered(fixed_random, filter_on):
    beam = FilteredPhotonBeam(fixed_random(0.1), filter_offset=100)
    beam.photons.append(
        FilteredPhoton((110.0, 65.0), (constants.X_VELOCITY, 0.0), 1.0, wavelength_to_color(562.5), False, 562.5))

    beam.update(constants.MAX_DT, filter_on, TRANSPARENT_BLACK)

    assert beam.photons == []
    assert beam.last_photon_color == wavelength_to_color(562.5).with_alpha(0.5)
