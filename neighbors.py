# neighbors.py

"""
Neighbor queries for the per-frame collision scan.

A neighbor query is rebuilt once per frame from the current positions and
then answers, for a particle index, which other indices are worth testing
for contact. The collision kernel still does the exact distance test, so a
query only has to return a superset of the touching particles.

Data Contract:
- rebuild(positions, radii, velocities=None, masses=None): positions and
  velocities are (n, 2), radii and masses are (n, 1).
- candidates(i) -> np.ndarray[int64] of indices (may include i itself).
"""

import logging

import numpy as np

logger = logging.getLogger("gas_sim")


class AllPairsNeighbors:
    """
    Every particle is a candidate for every other: the plain O(n^2) scan.
    Adequate for a few hundred particles.
    """
    name = "all_pairs"

    def __init__(self):
        self._all_indices = np.zeros(0, dtype=np.int64)

    def rebuild(self, positions: np.ndarray, radii: np.ndarray, velocities=None, masses=None):
        n = positions.shape[0]
        if self._all_indices.shape[0] != n:
            self._all_indices = np.arange(n, dtype=np.int64)

    def candidates(self, i: int) -> np.ndarray:
        return self._all_indices


class SpatialGridNeighbors:
    """
    Uniform grid broad phase.

    A particle's candidates are the particles in its own cell and the 8
    adjacent cells, as bucketed at rebuild time. Every particle moves once
    per frame after the rebuild, by at most the fastest speed kinetic energy
    allows. The cell side is therefore at least the contact distance plus
    twice that speed, so a pair that touches at any point in the frame was
    already in adjacent cells at rebuild time. cell_size_multiplier (>= 1)
    only widens cells beyond 2 * max_radius.

    The grid is kept in a flattened format: grid_offsets[c] is the start of
    cell c in grid_indices, and the count of cell c is
    grid_offsets[c + 1] - grid_offsets[c].
    """
    name = "grid"

    def __init__(self, bounds: tuple, cell_size_multiplier: float = 2.0):
        if cell_size_multiplier < 1:
            raise ValueError(
                f"Grid cell size multiplier must be at least 1, got {cell_size_multiplier!r}."
            )
        self.bounds = np.array(bounds, dtype=float)
        self.cell_size_multiplier = cell_size_multiplier
        self.cell_size = 0.0
        self.grid_width = 0
        self.grid_height = 0
        self.grid_offsets = np.zeros(1, dtype=np.int64)
        self.grid_indices = np.zeros(0, dtype=np.int64)
        self._particle_cells = np.zeros(0, dtype=np.int64)

    @staticmethod
    def speed_bound(velocities, masses) -> float:
        """
        Upper bound on any single particle's speed for the rest of the run.
        Elastic collisions and wall reflections keep total kinetic energy
        fixed, and one particle can hold at most all of it:
        |v_i| <= sqrt(sum(m v^2) / min(m)).
        """
        if velocities is None or velocities.shape[0] == 0:
            return 0.0
        if masses is None:
            return float(np.sqrt(np.sum(velocities ** 2)))
        return float(np.sqrt(np.sum(masses * velocities ** 2) / masses.min()))

    def rebuild(self, positions: np.ndarray, radii: np.ndarray, velocities=None, masses=None):
        """
        Populates the grid in three passes:
        1. Count particles per cell.
        2. Calculate the starting offset for each cell in the flat array.
        3. Populate the flat array with particle indices.
        """
        num_particles = positions.shape[0]
        max_radius = float(radii.max()) if num_particles else 1.0
        travel = 2.0 * self.speed_bound(velocities, masses)
        cell_size = max(2.0 * max_radius * self.cell_size_multiplier, 2.0 * max_radius + travel)

        grid_width = max(1, int(np.ceil(self.bounds[0] / cell_size)))
        grid_height = max(1, int(np.ceil(self.bounds[1] / cell_size)))
        if (grid_width, grid_height) != (self.grid_width, self.grid_height):
            logger.debug(
                f"Spatial grid resized: cell size {cell_size:.2f} "
                f"({grid_width}x{grid_height} cells)."
            )
        self.cell_size = cell_size
        self.grid_width = grid_width
        self.grid_height = grid_height
        num_cells = self.grid_width * self.grid_height

        # 1. Determine cell index for each particle, clamped to the grid
        cell_xs = np.floor(positions[:, 0] / self.cell_size).astype(np.int64)
        cell_ys = np.floor(positions[:, 1] / self.cell_size).astype(np.int64)
        np.clip(cell_xs, 0, self.grid_width - 1, out=cell_xs)
        np.clip(cell_ys, 0, self.grid_height - 1, out=cell_ys)
        self._particle_cells = cell_ys * self.grid_width + cell_xs

        # 2. Count particles in each cell and calculate offsets
        counts = np.bincount(self._particle_cells, minlength=num_cells)
        self.grid_offsets = np.zeros(num_cells + 1, dtype=np.int64)
        self.grid_offsets[1:] = np.cumsum(counts)

        # 3. A stable sort by cell keeps indices ascending within each cell
        self.grid_indices = np.argsort(self._particle_cells, kind="stable").astype(np.int64)

    def candidates(self, i: int) -> np.ndarray:
        """
        Indices in the 3x3 block of cells around particle i, ascending, so
        contacts are resolved in the same order as the all-pairs scan.
        """
        cell = self._particle_cells[i]
        cell_x = cell % self.grid_width
        cell_y = cell // self.grid_width

        chunks = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                check_x, check_y = cell_x + dx, cell_y + dy
                if 0 <= check_x < self.grid_width and 0 <= check_y < self.grid_height:
                    cell_idx = check_y * self.grid_width + check_x
                    start = self.grid_offsets[cell_idx]
                    end = self.grid_offsets[cell_idx + 1]
                    if end > start:
                        chunks.append(self.grid_indices[start:end])
        if not chunks:
            return np.zeros(0, dtype=np.int64)
        return np.sort(np.concatenate(chunks))


def make_neighbor_query(name: str, bounds: tuple, cell_size_multiplier: float = 2.0):
    """Builds the neighbor query named in the config."""
    if name == AllPairsNeighbors.name:
        return AllPairsNeighbors()
    if name == SpatialGridNeighbors.name:
        return SpatialGridNeighbors(bounds, cell_size_multiplier)
    raise ValueError(f"Unknown neighbor query: {name!r}")
