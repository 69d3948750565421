"""
Species Palette Module

Maps species to display colors, so that a game can tint each agent with the
color of its species. Colors play no part in evolution.

Classes:
    SpeciesPalette: Issues well-separated random colors, one per species ID
"""

import random

from loguru import logger

Color = tuple[float, float, float]

class SpeciesPalette:
    """
    Assigns every species ID a random RGB color (channels in [0, 1]).

    A new color must differ from every color currently in use by more than
    'min_distance' on at least one channel. After 'max_draws' unsuccessful
    draws the best-separated candidate seen so far is used instead.

    Public Methods:
        color_of(species_id): The color of a species (assigned on first request)
        release(species_id):  Free the color of a removed species
    """

    def __init__(self, min_distance: float = 0.12, max_draws: int = 100):
        self._min_distance = min_distance
        self._max_draws    = max_draws
        self._colors: dict[int, Color] = {}   # species ID => color

    def __len__(self):
        return len(self._colors)

    def __contains__(self, species_id):
        return species_id in self._colors

    def _separation(self, color: Color) -> float:
        """Smallest (over colors in use) of the largest per-channel difference."""
        if not self._colors:
            return float('inf')
        return min(max(abs(c1 - c2) for c1, c2 in zip(color, taken))
                   for taken in self._colors.values())

    def color_of(self, species_id: int) -> Color:
        if species_id in self._colors:
            return self._colors[species_id]

        best_color, best_separation = None, -1.0
        for _ in range(self._max_draws):
            color = (random.random(), random.random(), random.random())
            separation = self._separation(color)
            if separation > self._min_distance:
                best_color = color
                break
            if separation > best_separation:
                best_color, best_separation = color, separation
        else:
            logger.debug("[SpeciesPalette] no well-separated color left for species {}", species_id)

        self._colors[species_id] = best_color
        return best_color

    def release(self, species_id: int) -> None:
        self._colors.pop(species_id, None)
