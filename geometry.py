# geometry.py

"""
Vector helpers shared by the collision kernels.

Vectors are length-2 NumPy arrays [x, y]. Both functions are compiled with
Numba so they can be called from other nopython kernels as well as from
plain Python.
"""

import numpy as np
import numba


@numba.jit(nopython=True)
def distance(a, b):
    """Euclidean distance between two points."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    return np.sqrt(dx * dx + dy * dy)


@numba.jit(nopython=True)
def rotate(v, angle):
    """
    Applies the standard 2-D rotation matrix to v and returns a new vector.
    Used to move a velocity into the frame where the line of centers of two
    colliding particles is the x-axis, and back out of it.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    rotated = np.empty(2)
    rotated[0] = v[0] * c - v[1] * s
    rotated[1] = v[0] * s + v[1] * c
    return rotated
