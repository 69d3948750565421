"""
Headless stand-in for the kittener game.

Agents stand at the bottom of a field and can move left, stay, or move right.
Hazards fall from the top; an agent that is hit is out for the rest of the
episode. Every tick each living agent senses the horizontal offset and height
of the nearest hazard and its own position, and the population picks its move
(arg-max of the network outputs). The score of an agent is the number of ticks
it survived.

Usage:
    python dodge_game.py [num_episodes]
"""

import random
import sys

from loguru import logger

from kittener import Config, Population

FIELD_WIDTH   = 10.0
FALL_SPEED    = 1.0
SPAWN_HEIGHT  = 12.0
HIT_DISTANCE  = 0.8
MAX_TICKS     = 400
MOVES         = (-1.0, 0.0, 1.0)

class Agent:

    def __init__(self):
        self.x     = FIELD_WIDTH / 2
        self.alive = True
        self.score = 0

class DodgeGame:

    def __init__(self, population: Population):
        self.population = population

    def _sense(self, agent: Agent, hazard: tuple[float, float]) -> list[float]:
        hazard_x, hazard_y = hazard
        return [(hazard_x - agent.x) / FIELD_WIDTH, hazard_y / SPAWN_HEIGHT, agent.x / FIELD_WIDTH]

    def play_episode(self) -> list[Agent]:
        agents = [Agent() for _ in range(len(self.population))]
        hazard = (random.uniform(0, FIELD_WIDTH), SPAWN_HEIGHT)

        for _ in range(MAX_TICKS):
            living = [index for index, agent in enumerate(agents) if agent.alive]
            if not living:
                break

            for index in living:
                agent   = agents[index]
                outputs = self.population.get_output(index, self._sense(agent, hazard))
                move    = MOVES[max(range(len(MOVES)), key=lambda i: outputs[i])]
                agent.x = min(max(agent.x + move, 0.0), FIELD_WIDTH)
                agent.score += 1

            hazard_x, hazard_y = hazard[0], hazard[1] - FALL_SPEED
            if hazard_y <= 0:
                for index in living:
                    if abs(agents[index].x - hazard_x) < HIT_DISTANCE:
                        agents[index].alive = False
                hazard = (random.uniform(0, FIELD_WIDTH), SPAWN_HEIGHT)
            else:
                hazard = (hazard_x, hazard_y)

        return agents

    def run(self, num_episodes: int):
        for _ in range(num_episodes):
            agents = self.play_episode()
            for index, agent in enumerate(agents):
                self.population.assign_fitness(index, agent.score)

            best = max(agents, key=lambda agent: agent.score)
            colors = {self.population.color_of(index) for index in range(len(agents))}
            logger.info("[DodgeGame] generation {:3d}  best score {:3d}  species colors {}",
                        self.population.current_generation(), best.score, len(colors))

            self.population.advance_generation()

if __name__ == '__main__':
    config = Config()
    config.population_size = 50
    config.num_inputs      = 3
    config.num_outputs     = len(MOVES)

    num_episodes = int(sys.argv[1]) if len(sys.argv) > 1 else 30
    DodgeGame(Population(config)).run(num_episodes)
