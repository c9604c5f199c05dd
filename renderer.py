# renderer.py

"""
Render adapter.

The simulation core draws through any object with a

    draw_circle(center, radius, fill_color, stroke_color, stroke_width)

method, called once per particle per frame. It only reads particle state.
PygameRenderer is the implementation used by the application window.
"""

import pygame


class PygameRenderer:
    """
    Draws particles onto a pygame Surface as filled, outlined circles.
    """
    def __init__(self, surface: pygame.Surface):
        self.surface = surface

    def draw_circle(self, center, radius: float, fill_color, stroke_color, stroke_width: float):
        position = (int(center[0]), int(center[1]))
        pygame.draw.circle(self.surface, fill_color, position, radius)
        pygame.draw.circle(self.surface, stroke_color, position, radius, max(1, int(stroke_width)))
