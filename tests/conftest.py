"""
Pytest configuration and shared fixtures for test isolation.
"""
import pytest

from holarchy.particles import Particle


# Reset global config between tests
@pytest.fixture(autouse=True)
def reset_config():
    """Restore Config defaults after each test so mutations don't leak."""
    from holarchy.config import Config
    snapshot = Config.to_dict()

    yield

    Config.from_dict(snapshot, apply_env_overrides=False)


@pytest.fixture
def still_pair():
    """Two unit masses at rest, well within the default emergence threshold."""
    return [
        Particle(id="a", position=(0.0, 0.0, 0.0), mass=1.0),
        Particle(id="b", position=(0.05, 0.0, 0.0), mass=1.0),
    ]


@pytest.fixture
def layered_particles():
    """Particles on levels {0, 0, 1}."""
    return [
        Particle(id="q1", position=(1.0, 0.0, 0.0), mass=1.0, energy=0.5),
        Particle(id="q2", position=(-1.0, 0.0, 0.0), mass=3.0, energy=0.25),
        Particle(id="atom", position=(0.0, 2.0, 0.0), mass=2.0, level=1, energy=1.0),
    ]
