# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from particle_system import ParticleSystem
from renderer import PygameRenderer

# Get the application's dedicated logger
logger = logging.getLogger("gas_sim")


def draw_button(screen, font, button_rect):
    """Draws the Explode button."""
    pygame.draw.rect(screen, constants.BUTTON_COLOR, button_rect, border_radius=4)
    label = font.render(constants.BUTTON_LABEL, True, constants.BUTTON_TEXT_COLOR)
    screen.blit(label, label.get_rect(center=button_rect.center))


def run_simulation_loop(particle_system, screen, clock, diagnostics_interval):
    """
    The main loop. Acts as the frame scheduler: one advance_frame() per
    display refresh, with the Explode button and keyboard as the control
    surface. Runs until the window is closed.
    """
    renderer = PygameRenderer(screen)
    button_rect = pygame.Rect(constants.BUTTON_RECT)
    font = pygame.font.Font(None, 22)

    running = True
    tick = 0
    while running:
        # Event handling
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if button_rect.collidepoint(event.pos):
                    particle_system.trigger_explosion()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_e:
                    particle_system.trigger_explosion()
                elif event.key == pygame.K_r:
                    particle_system.initialize()

        # --- Physics & Drawing ---
        screen.fill(constants.BACKGROUND)
        particle_system.advance_frame(renderer)
        draw_button(screen, font, button_rect)

        # --- Logging (throttled) ---
        if tick % diagnostics_interval == 0:
            ke = particle_system.get_total_kinetic_energy()
            px, py = particle_system.get_total_momentum()
            logger.debug(
                f"Tick={tick}, "
                f"SystemTick={particle_system.tick}, "
                f"Kinetic={ke:.4f}, "
                f"Momentum=({px:+.3f}, {py:+.3f})"
            )

        pygame.display.flip()
        clock.tick(constants.FPS)
        tick += 1


def main():
    """
    Main function to initialize and run the gas simulation.
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

    particle_system = ParticleSystem(config=sim_config, rng=rng)
    particle_system.initialize()

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((int(particle_system.width), int(particle_system.height)))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()

    try:
        run_simulation_loop(
            particle_system,
            screen,
            clock,
            particle_system.config['diagnostics_interval'],
        )
    finally:
        logger.info("Application shutting down.")
        pygame.quit()

if __name__ == "__main__":
    main()
