# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from rgb_model import RGBModel
from single_bulb_model import SingleBulbModel

# Get the application's dedicated logger
logger = logging.getLogger("color_vision")

# Screen placement of the beam. Beam x runs from the eye (0) to the source.
BEAM_ORIGIN = (160, (constants.HEIGHT - constants.BEAM_HEIGHT) // 2)
EYE_RECT = pygame.Rect(40, BEAM_ORIGIN[1], 100, constants.BEAM_HEIGHT)

RGB_DRAW_COLORS = {
    'red': (255, 0, 0),
    'green': (0, 255, 0),
    'blue': (0, 0, 255),
}


def build_model(sim_config: dict, rng: np.random.Generator):
    """Creates the model for the configured screen and applies its initial settings."""
    screen_name = sim_config.get('screen', 'single_bulb')
    if screen_name == 'single_bulb':
        return SingleBulbModel(sim_config, rng)
    if screen_name == 'rgb':
        return RGBModel(sim_config, rng)
    raise ValueError(f"Unknown screen {screen_name!r}, expected 'single_bulb' or 'rgb'")


def to_screen(position) -> tuple:
    return (int(BEAM_ORIGIN[0] + position[0]), int(BEAM_ORIGIN[1] + position[1]))


def draw(screen: pygame.Surface, model):
    """Paints the photons in flight and the color the eye perceives."""
    screen.fill(constants.BACKGROUND)

    if isinstance(model, SingleBulbModel):
        if model.settings.filter_enabled:
            filter_x = BEAM_ORIGIN[0] + model.photon_beam.filter_offset
            pygame.draw.line(screen, constants.FILTER_OUTLINE, (filter_x, BEAM_ORIGIN[1]),
                             (filter_x, BEAM_ORIGIN[1] + constants.BEAM_HEIGHT))
        if model.settings.beam_type == constants.BEAM_PHOTON:
            for photon in model.photons:
                color = photon.color.with_alpha(photon.intensity)
                pygame.draw.circle(screen, color.to_rgba255(), to_screen(photon.position), constants.PHOTON_RADIUS)
    else:
        for name, photon in model.photons:
            pygame.draw.circle(screen, RGB_DRAW_COLORS[name], to_screen(photon.position), constants.PHOTON_RADIUS)

    # The eye color is blended over black so alpha reads as brightness.
    eye_surface = pygame.Surface(EYE_RECT.size, pygame.SRCALPHA)
    eye_surface.fill(model.perceived_color.to_rgba255())
    screen.blit(eye_surface, EYE_RECT.topleft)


def run_simulation_loop(model, screen, clock):
    """
    The main loop: advances the model by the real frame time and repaints.
    """
    running = True
    tick = 0

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        # --- Physics & Logic Update ---
        dt = clock.tick(constants.FPS) / 1000.0
        model.step(dt)

        # --- Logging (throttled) ---
        if tick % 100 == 0:
            logger.debug(
                f"Tick={tick}, "
                f"dt={dt:.4f}, "
                f"LivePhotons={len(model.photons)}, "
                f"PerceivedColor={tuple(model.perceived_color)}"
            )

        # --- Drawing ---
        draw(screen, model)
        pygame.display.flip()
        tick += 1


def main():
    """
    Main function to initialize and run the simulation.
    """
    # --- Setup ---
    logger_setup.setup_logging()

    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()

    model = build_model(sim_config, rng)

    run_simulation_loop(model, screen, clock)

    logger.info("Application shutting down.")
    pygame.quit()

if __name__ == "__main__":
    main()
