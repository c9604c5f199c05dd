# particle_system.py

import logging
import numbers

import numpy as np

import constants
from exceptions import CapacityExceeded, InvalidConfiguration
from neighbors import make_neighbor_query
from particle import Particle

logger = logging.getLogger("gas_sim")

# Defaults for the 'simulation' config section. Any key missing from the
# config falls back to these values.
DEFAULT_SIMULATION_CONFIG = {
    'particle_count': 400,
    'radius': 4.0,
    'width': 500.0,
    'height': 400.0,
    'mass': 1.0,
    'base_speed': 0.8,
    'explode_speed': 0.8,
    'max_placement_attempts': 10000,
    'neighbor_query': 'all_pairs',
    'grid_cell_size_multiplier': 2.0,
    'fill_color_index': 3,
    'stroke_color_index': 2,
    'diagnostics_interval': 100,
}


def _validated_settings(config: dict) -> dict:
    """
    Merges the config over the defaults and checks every value.
    Raises InvalidConfiguration on the first bad value, so that bad input
    fails here instead of surfacing as NaNs mid-simulation.
    """
    settings = dict(DEFAULT_SIMULATION_CONFIG)
    settings.update(config)

    def number(key):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidConfiguration(f"'{key}' must be a number, got {value!r}.")
        if not np.isfinite(value):
            raise InvalidConfiguration(f"'{key}' must be finite, got {value!r}.")
        return value

    def integer(key, minimum):
        value = number(key)
        if int(value) != value or value < minimum:
            raise InvalidConfiguration(f"'{key}' must be an integer >= {minimum}, got {value!r}.")
        return int(value)

    settings['particle_count'] = integer('particle_count', 1)
    settings['max_placement_attempts'] = integer('max_placement_attempts', 1)
    settings['diagnostics_interval'] = integer('diagnostics_interval', 1)

    for key in ('radius', 'width', 'height', 'mass', 'grid_cell_size_multiplier'):
        if number(key) <= 0:
            raise InvalidConfiguration(f"'{key}' must be positive, got {settings[key]!r}.")
        settings[key] = float(settings[key])

    if settings['grid_cell_size_multiplier'] < 1:
        raise InvalidConfiguration(
            f"'grid_cell_size_multiplier' must be at least 1, got {settings['grid_cell_size_multiplier']!r}."
        )

    for key in ('base_speed', 'explode_speed'):
        if number(key) < 0:
            raise InvalidConfiguration(f"'{key}' must not be negative, got {settings[key]!r}.")
        settings[key] = float(settings[key])

    diameter = 2.0 * settings['radius']
    if settings['width'] < diameter or settings['height'] < diameter:
        raise InvalidConfiguration(
            f"Enclosure {settings['width']}x{settings['height']} cannot hold a particle "
            f"of radius {settings['radius']}."
        )

    for key in ('fill_color_index', 'stroke_color_index'):
        index = integer(key, 0)
        if index >= len(constants.PALETTE):
            raise InvalidConfiguration(
                f"'{key}' must index the {len(constants.PALETTE)}-color palette, got {index}."
            )
        settings[key] = index

    return settings


class ParticleSystem:
    """
    Owns every particle and drives the simulation.

    Particle state is kept as NumPy arrays (Structure of Arrays) and
    Particle objects are views onto a row, so pairwise collisions always
    mutate the shared state by index.

    Data Contract:
    - Inputs:
        - config (dict): The 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
        - neighbor_query (optional): overrides the query named in the config.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Manages the lifecycle of all particle data.
    - Invariants: positions, velocities, masses and radii always have the
      same length. Particles are only created or destroyed en masse by
      initialize().
    """
    def __init__(self, config: dict, rng: np.random.Generator, neighbor_query=None):
        self.config = _validated_settings(config)
        self.rng = rng

        self.num_particles_requested = self.config['particle_count']
        self.radius = self.config['radius']
        self.width = self.config['width']
        self.height = self.config['height']
        self.bounds = np.array((self.width, self.height))
        self.mass = self.config['mass']
        self.base_speed = self.config['base_speed']
        self.explode_speed = self.config['explode_speed']
        self.max_placement_attempts = self.config['max_placement_attempts']

        self.fill_color = constants.PALETTE[self.config['fill_color_index']]
        self.stroke_color = constants.PALETTE[self.config['stroke_color_index']]
        self.stroke_width = constants.STROKE_WIDTH

        if neighbor_query is None:
            try:
                neighbor_query = make_neighbor_query(
                    self.config['neighbor_query'],
                    (self.width, self.height),
                    self.config['grid_cell_size_multiplier'],
                )
            except ValueError as exc:
                raise InvalidConfiguration(str(exc)) from exc
        self.neighbor_query = neighbor_query

        self.tick = 0
        self._allocate(0)

        logger.info(
            f"ParticleSystem created: {self.width:g}x{self.height:g} enclosure, "
            f"neighbor query '{getattr(self.neighbor_query, 'name', type(self.neighbor_query).__name__)}'."
        )

    @classmethod
    def from_arrays(cls, positions, velocities, bounds: tuple, radius=4.0, masses=None,
                    neighbor_query=None, rng=None):
        """
        Builds a system around explicit particle state instead of random
        placement. Used for scripted scenarios and tests.

        - Inputs:
            - positions, velocities: array-likes of shape (n, 2).
            - bounds: (width, height) of the enclosure.
            - radius: a scalar or one value per particle.
            - masses: a scalar, one value per particle, or None for unit mass.
        """
        positions = np.array(positions, dtype=float).reshape(-1, 2)
        velocities = np.array(velocities, dtype=float).reshape(-1, 2)
        n = positions.shape[0]
        if velocities.shape[0] != n:
            raise InvalidConfiguration("positions and velocities must have the same length.")

        radii = np.broadcast_to(np.asarray(radius, dtype=float).reshape(-1, 1), (n, 1)).copy()
        if masses is None:
            masses = 1.0
        masses = np.broadcast_to(np.asarray(masses, dtype=float).reshape(-1, 1), (n, 1)).copy()
        if np.any(radii <= 0) or np.any(masses <= 0):
            raise InvalidConfiguration("Every particle needs a positive radius and mass.")

        config = {
            'particle_count': max(n, 1),
            'radius': float(radii.min()) if n else float(radius),
            'width': float(bounds[0]),
            'height': float(bounds[1]),
        }
        system = cls(config, rng if rng is not None else np.random.default_rng(), neighbor_query)
        system.positions = positions
        system.velocities = velocities
        system.masses = masses
        system.radii = radii
        system.num_particles = n
        system.neighbor_query.rebuild(system.positions, system.radii, system.velocities, system.masses)
        return system

    def _allocate(self, num_particles: int):
        self.num_particles = num_particles
        self.positions = np.zeros((num_particles, 2), dtype=float)
        self.velocities = np.zeros((num_particles, 2), dtype=float)
        self.masses = np.full((num_particles, 1), self.mass, dtype=float)
        self.radii = np.full((num_particles, 1), self.radius, dtype=float)

    def __len__(self):
        return self.num_particles

    @property
    def particles(self) -> list:
        return [Particle(self, i) for i in range(self.num_particles)]

    def initialize(self, explode: bool = False):
        """
        Re-populates the system from scratch.

        Positions are drawn uniformly from [radius, dimension - radius] and
        resampled while they overlap an already-placed particle. Velocities
        point in a random direction at base_speed or, when explode is set,
        radially away from the enclosure center at explode_speed.

        Explode applies to this call only; the next plain initialize() is
        random again.

        - Raises: CapacityExceeded if one particle cannot be placed within
          max_placement_attempts draws. The system is left empty.
        """
        count = self.num_particles_requested
        self._allocate(0)
        self.tick = 0

        positions = self._place_particles(count)
        if explode:
            velocities = self._radial_velocities(positions, self.explode_speed)
        else:
            angles = self.rng.uniform(0.0, 2.0 * np.pi, count)
            velocities = self.base_speed * np.column_stack((np.cos(angles), np.sin(angles)))

        self._allocate(count)
        self.positions[:] = positions
        self.velocities[:] = velocities
        self.neighbor_query.rebuild(self.positions, self.radii, self.velocities, self.masses)

        logger.info(
            f"Initialized {count} particles ({'explode' if explode else 'random'} velocities)."
        )

    def trigger_explosion(self):
        """Restarts the simulation with every particle moving away from the center."""
        logger.info("Explosion triggered.")
        self.initialize(explode=True)

    def _place_particles(self, count: int) -> np.ndarray:
        """
        Rejection sampling of non-overlapping centers.
        """
        low = np.array((self.radius, self.radius))
        high = np.array((self.width - self.radius, self.height - self.radius))
        min_dist_sq = (2.0 * self.radius) ** 2
        warn_threshold = self.max_placement_attempts // 2

        positions = np.zeros((count, 2), dtype=float)
        total_attempts = 0
        worst_attempts = 0
        for k in range(count):
            for attempt in range(1, self.max_placement_attempts + 1):
                candidate = self.rng.uniform(low, high)
                dist_sq = np.sum((positions[:k] - candidate) ** 2, axis=1)
                if not np.any(dist_sq < min_dist_sq):
                    break
            else:
                logger.error(
                    f"Placement failed: particle {k} of {count} still overlapped after "
                    f"{self.max_placement_attempts} attempts."
                )
                raise CapacityExceeded(k, count, self.max_placement_attempts)

            positions[k] = candidate
            total_attempts += attempt
            worst_attempts = max(worst_attempts, attempt)

        if worst_attempts > warn_threshold:
            logger.warning(
                f"Enclosure is crowded: one particle needed {worst_attempts} of "
                f"{self.max_placement_attempts} allowed placement attempts."
            )
        logger.debug(
            f"Placed {count} particles in {total_attempts} draws "
            f"(worst particle: {worst_attempts})."
        )
        return positions

    def _radial_velocities(self, positions: np.ndarray, speed: float) -> np.ndarray:
        """
        Unit vectors from the enclosure center to each position, scaled by
        speed. A particle exactly at the center is sent along +x.
        """
        offsets = positions - self.bounds / 2.0
        norms = np.sqrt(np.sum(offsets ** 2, axis=1, keepdims=True))
        directions = np.zeros_like(offsets)
        directions[:, 0] = 1.0
        np.divide(offsets, norms, out=directions, where=norms > 0)
        return speed * directions

    def advance_frame(self, renderer=None):
        """
        Runs one frame: every particle, in index order, is drawn (when a
        renderer is given), collided against its neighbors, reflected off
        the walls and moved.

        Collisions resolved during particle i's step change the velocities
        of its partners before their own step, so the outcome of dense
        multi-body contacts depends on index order.
        """
        self.neighbor_query.rebuild(self.positions, self.radii, self.velocities, self.masses)
        for particle in self.particles:
            particle.step(renderer=renderer)
        self.tick += 1

    def get_total_kinetic_energy(self):
        """
        Calculates the total kinetic energy of the system.
        KE = sum(0.5 * m * v^2)
        """
        vel_sq = np.sum(self.velocities**2, axis=1, keepdims=True)
        return float(np.sum(0.5 * self.masses * vel_sq))

    def get_total_momentum(self) -> np.ndarray:
        """
        Total linear momentum sum(m * v). Walls do not conserve it; pairwise
        collisions do.
        """
        return np.sum(self.masses * self.velocities, axis=0)
