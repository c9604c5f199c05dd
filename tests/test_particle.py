import numpy as np
import pytest

import constants
from particle_system import ParticleSystem


def _system(positions, velocities, radius=5, masses=None):
    return ParticleSystem.from_arrays(positions, velocities, bounds=(500, 400), radius=radius, masses=masses)


def test_particle_is_a_view_onto_the_system():
    system = _system([[100, 200]], [[1, 0]])
    particle = system.particles[0]
    particle.velocity[1] = 0.5
    particle.position = [120, 210]
    np.testing.assert_array_equal(system.velocities[0], [1.0, 0.5])
    np.testing.assert_array_equal(system.positions[0], [120.0, 210.0])
    assert particle.radius == 5.0
    assert particle.mass == 1.0


def test_particle_identity_is_system_and_index():
    system = _system([[100, 200], [300, 200]], [[0, 0], [0, 0]])
    assert system.particles[0] == system.particles[0]
    assert system.particles[0] != system.particles[1]
    assert len({system.particles[0], system.particles[0], system.particles[1]}) == 2


def test_step_integrates_position():
    system = _system([[100, 200]], [[0.8, -0.3]])
    system.particles[0].step(neighbors=[])
    np.testing.assert_allclose(system.positions[0], [100.8, 199.7])


def test_step_skips_itself():
    system = _system([[100, 200]], [[1, 0]])
    particle = system.particles[0]
    particle.step(neighbors=[particle])
    np.testing.assert_allclose(particle.velocity, [1.0, 0.0])
    np.testing.assert_allclose(particle.position, [101.0, 200.0])


def test_step_resolves_overlapping_neighbor():
    system = _system([[100, 200], [109, 200]], [[1, 0], [-1, 0]])
    first, second = system.particles
    first.step(neighbors=[first, second])
    np.testing.assert_allclose(first.velocity, [-1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(second.velocity, [1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(first.position, [99.0, 200.0], atol=1e-12)
    # the partner only moves during its own step
    np.testing.assert_allclose(second.position, [109.0, 200.0])


def test_step_ignores_particles_that_only_touch():
    system = _system([[100, 200], [110, 200]], [[1, 0], [-1, 0]])
    system.particles[0].step(neighbors=[1])
    np.testing.assert_allclose(system.velocities, [[1.0, 0.0], [-1.0, 0.0]])


def test_step_accepts_index_neighbors():
    system = _system([[100, 200], [109, 200]], [[1, 0], [-1, 0]])
    system.particles[0].step(neighbors=np.array([0, 1]))
    np.testing.assert_allclose(system.velocities, [[-1.0, 0.0], [1.0, 0.0]], atol=1e-12)


@pytest.mark.parametrize(
    "position, velocity, expected_velocity",
    [
        ([5, 200], [-1, 0], [1, 0]),      # left wall
        ([495, 200], [1, 0], [-1, 0]),    # right wall
        ([250, 5], [0, -1], [0, 1]),      # top wall
        ([250, 395], [0, 1], [0, -1]),    # bottom wall
        ([5, 5], [-1, -1], [1, 1]),       # corner flips both axes
    ],
)
def test_step_reflects_off_walls(position, velocity, expected_velocity):
    system = _system([position], [velocity])
    system.particles[0].step(neighbors=[])
    np.testing.assert_allclose(system.velocities[0], expected_velocity)
    np.testing.assert_allclose(system.positions[0], np.add(position, expected_velocity))


def test_step_draws_before_moving(renderer):
    system = _system([[100, 200]], [[1, 0]])
    system.particles[0].step(neighbors=[], renderer=renderer)
    assert renderer.calls == [
        ((100.0, 200.0), 5.0, system.fill_color, system.stroke_color, constants.STROKE_WIDTH)
    ]


def test_draw_uses_configured_palette(renderer):
    system = _system([[100, 200]], [[0, 0]])
    system.particles[0].draw(renderer)
    _, _, fill, stroke, _ = renderer.calls[0]
    assert fill == constants.PALETTE[3]
    assert stroke == constants.PALETTE[2]
