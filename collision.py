# collision.py

"""
Elastic collision resolution between two particles.

The kernel works on the particle arena (Structure of Arrays) by index so a
pair is always mutated in place, with no aliasing between particle objects.
resolve_collision() is the object-level entry point for Particle views.
"""

import numpy as np
import numba

from geometry import rotate


@numba.jit(nopython=True)
def resolve_collision_jit(i, j, positions, velocities, masses):
    """
    Perfectly elastic collision response for the pair (i, j).
    Modifies velocities[i] and velocities[j] in place.

    The velocities are rotated into the contact frame, where the line of
    centers is the x-axis. Along that axis the pair undergoes a 1-D elastic
    collision: in the center-of-mass frame each velocity simply reverses, so
    v = 2*u_com - u. The tangential (y) components are untouched. The result
    is rotated back into world coordinates.

    Pairs that are already separating are skipped, so a contact that
    lasts several frames is only resolved once.
    """
    x_dist = positions[j, 0] - positions[i, 0]
    y_dist = positions[j, 1] - positions[i, 1]
    x_vel_diff = velocities[i, 0] - velocities[j, 0]
    y_vel_diff = velocities[i, 1] - velocities[j, 1]

    if x_vel_diff * x_dist + y_vel_diff * y_dist < 0:
        return

    # atan2(0, 0) is 0, so coincident centers resolve along the x-axis
    angle = -np.arctan2(y_dist, x_dist)

    m1 = masses[i, 0]
    m2 = masses[j, 0]
    total_mass = m1 + m2

    u1 = rotate(velocities[i], angle)
    u2 = rotate(velocities[j], angle)

    v1 = np.empty(2)
    v2 = np.empty(2)
    v1[0] = u1[0] * (m1 - m2) / total_mass + u2[0] * 2 * m2 / total_mass
    v1[1] = u1[1]
    v2[0] = u2[0] * (m2 - m1) / total_mass + u1[0] * 2 * m1 / total_mass
    v2[1] = u2[1]

    final1 = rotate(v1, -angle)
    final2 = rotate(v2, -angle)

    velocities[i, 0] = final1[0]
    velocities[i, 1] = final1[1]
    velocities[j, 0] = final2[0]
    velocities[j, 1] = final2[1]


def resolve_collision(a, b):
    """
    Resolves a collision between two Particle views of the same system.

    - Inputs: a, b (Particle) - distinct particles sharing one arena.
    - Side Effects: overwrites a.velocity and b.velocity.
    """
    if a.system is not b.system:
        raise ValueError("Particles must belong to the same ParticleSystem.")
    if a.index == b.index:
        raise ValueError("A particle cannot collide with itself.")
    system = a.system
    resolve_collision_jit(a.index, b.index, system.positions, system.velocities, system.masses)
