# exceptions.py

"""
Errors raised by the simulation core.

Both concrete errors also derive from the matching built-in so callers that
only catch ValueError or RuntimeError keep working.
"""


class SimulationError(Exception):
    """Base class for all simulation errors."""


class InvalidConfiguration(SimulationError, ValueError):
    """The 'simulation' config section cannot produce a valid world."""


class CapacityExceeded(SimulationError, RuntimeError):
    """
    Non-overlapping placement gave up for one particle.

    Raised when the enclosure is too crowded for the requested particle
    count, instead of retrying forever.
    """

    def __init__(self, placed: int, requested: int, attempts: int):
        self.placed = placed
        self.requested = requested
        self.attempts = attempts
        super().__init__(
            f"Placed {placed} of {requested} particles; particle {placed} "
            f"still overlapped after {attempts} attempts."
        )
