# particle.py

import numpy as np
import numba

from collision import resolve_collision_jit
from geometry import distance


@numba.jit(nopython=True)
def _step_particle_jit(i, candidates, positions, velocities, masses, radii, width, height):
    """
    One frame of motion for particle i.
    1. Resolve contacts with every candidate j != i.
    2. Reflect off the enclosure walls (both axes checked independently,
       so a corner contact flips both components).
    3. Integrate: p_new = p_old + v (one time unit per frame).
    """
    radius = radii[i, 0]
    for k in range(candidates.shape[0]):
        j = candidates[k]
        if j == i:
            continue
        if distance(positions[i], positions[j]) - (radius + radii[j, 0]) < 0:
            resolve_collision_jit(i, j, positions, velocities, masses)

    x = positions[i, 0]
    y = positions[i, 1]
    if x - radius <= 0 or x + radius >= width:
        velocities[i, 0] = -velocities[i, 0]
    if y - radius <= 0 or y + radius >= height:
        velocities[i, 1] = -velocities[i, 1]

    positions[i, 0] += velocities[i, 0]
    positions[i, 1] += velocities[i, 1]


class Particle:
    """
    Represents a single particle in the simulation.

    A Particle is a view onto one slot of its ParticleSystem's arrays, so
    reading or writing position and velocity goes straight to the shared
    state. Identity is the index: two views with the same system and index
    are the same particle.

    Data Contract:
    - Inputs: system (ParticleSystem), index (int) within [0, len(system)).
    - Invariants: radius > 0 and mass > 0; both are fixed after creation.
    """
    __slots__ = ("system", "index")

    def __init__(self, system, index: int):
        self.system = system
        self.index = int(index)

    @property
    def position(self) -> np.ndarray:
        return self.system.positions[self.index]

    @position.setter
    def position(self, value):
        self.system.positions[self.index] = value

    @property
    def velocity(self) -> np.ndarray:
        return self.system.velocities[self.index]

    @velocity.setter
    def velocity(self, value):
        self.system.velocities[self.index] = value

    @property
    def radius(self) -> float:
        return float(self.system.radii[self.index, 0])

    @property
    def mass(self) -> float:
        return float(self.system.masses[self.index, 0])

    @property
    def fill_color(self) -> tuple:
        return self.system.fill_color

    @property
    def stroke_color(self) -> tuple:
        return self.system.stroke_color

    def __eq__(self, other):
        if not isinstance(other, Particle):
            return NotImplemented
        return self.system is other.system and self.index == other.index

    def __hash__(self):
        return hash((id(self.system), self.index))

    def __repr__(self):
        x, y = self.position
        vx, vy = self.velocity
        return (
            f"Particle(index={self.index}, pos=({x:.2f}, {y:.2f}), "
            f"vel=({vx:.2f}, {vy:.2f}), radius={self.radius}, mass={self.mass})"
        )

    def draw(self, renderer):
        """
        Draws the particle through the render adapter.
        """
        renderer.draw_circle(
            self.position.copy(),
            self.radius,
            self.fill_color,
            self.stroke_color,
            self.system.stroke_width,
        )

    def step(self, neighbors=None, renderer=None):
        """
        Advances this particle by one frame: draw, collide, reflect, move.

        - Inputs:
            - neighbors: candidate indices (or Particle views) to test for
              contact. Defaults to the system's neighbor query.
            - renderer: optional render adapter; drawn before moving.
        - Side Effects: may change the velocities of colliding neighbors.
        """
        if renderer is not None:
            self.draw(renderer)

        system = self.system
        if neighbors is None:
            candidates = system.neighbor_query.candidates(self.index)
        else:
            candidates = np.array(
                [n.index if isinstance(n, Particle) else n for n in neighbors],
                dtype=np.int64,
            )

        _step_particle_jit(
            self.index,
            candidates,
            system.positions,
            system.velocities,
            system.masses,
            system.radii,
            system.width,
            system.height,
        )
