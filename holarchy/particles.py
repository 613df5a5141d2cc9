# holarchy/particles.py
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional
import numpy as np

from .vectors import frozen_vec3, dot

# Level palette: quantum, atomic, molecular, cellular, organism
HOLARCHY_COLORS = [
    "#6366f1",  # Level 0 - Indigo
    "#22d3ee",  # Level 1 - Cyan
    "#10b981",  # Level 2 - Emerald
    "#fbbf24",  # Level 3 - Amber
    "#f472b6",  # Level 4 - Pink
]


def level_color(level: int) -> str:
    return HOLARCHY_COLORS[level % len(HOLARCHY_COLORS)]


class InvalidParticleError(ValueError):
    """Raised when a particle violates its construction invariants."""


class IdSequence:
    """Monotonic identifier source: prefix_1, prefix_2, ..."""

    def __init__(self, prefix: str, start: int = 1, taken: Iterable[str] = ()):
        self.prefix = prefix
        self._next = start
        self.reserve(*taken)

    def next(self) -> str:
        value = f"{self.prefix}_{self._next}"
        self._next += 1
        return value

    __next__ = next

    def __iter__(self):
        return self

    def reserve(self, *ids: str):
        """Skip past ids already in use so they are never issued."""
        marker = f"{self.prefix}_"
        for id_ in ids:
            suffix = id_[len(marker):] if id_.startswith(marker) else ""
            if suffix.isdigit():
                self._next = max(self._next, int(suffix) + 1)


@dataclass(eq=False)
class Particle:
    """
    A point mass in extended phase space.

    Vectors are stored as read-only arrays; every pipeline stage derives a
    new Particle with `dataclasses.replace` instead of editing one in place.
    """
    id: str
    position: np.ndarray
    momentum: np.ndarray = field(default_factory=lambda: np.zeros(3))
    mass: float = 1.0
    charge: float = 0.0
    level: int = 0
    energy: float = 0.0  # kinetic energy of the last step, display only
    color: Optional[str] = None

    def __post_init__(self):
        self.position = frozen_vec3(self.position)
        self.momentum = frozen_vec3(self.momentum)
        self.mass = float(self.mass)
        if not self.mass > 0:
            raise InvalidParticleError(f"particle {self.id!r} has non-positive mass {self.mass}")
        if self.level < 0:
            raise InvalidParticleError(f"particle {self.id!r} has negative level {self.level}")
        if self.color is None:
            self.color = level_color(self.level)

    @property
    def velocity(self) -> np.ndarray:
        return self.momentum / self.mass

    def kinetic_energy(self) -> float:
        return dot(self.momentum, self.momentum) / (2.0 * self.mass)

    def evolve(self, **changes: Any) -> "Particle":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.tolist(),
            "momentum": self.momentum.tolist(),
            "mass": self.mass,
            "charge": self.charge,
            "level": self.level,
            "energy": self.energy,
            "color": self.color,
        }


def spawn_random_particles(
    count: int,
    ids: IdSequence,
    rng: np.random.Generator,
    depth: int,
    spread: float = 5.0,
    momentum_range: float = 2.0,
    min_mass: float = 1.0,
    mass_range: float = 2.0,
    max_levels: int = 5,
) -> List[Particle]:
    """
    Scatter `count` particles in a cube of side `spread` around the origin.

    Levels are drawn uniformly from [0, min(depth, max_levels)); charges are
    +1 or -1 with equal odds.
    """
    n_levels = max(1, min(depth, max_levels))
    particles = []
    for _ in range(count):
        level = int(rng.integers(0, n_levels))
        particles.append(Particle(
            id=ids.next(),
            position=(rng.random(3) - 0.5) * spread,
            momentum=(rng.random(3) - 0.5) * momentum_range,
            mass=min_mass + rng.random() * mass_range,
            charge=1.0 if rng.random() > 0.5 else -1.0,
            level=level,
        ))
    return particles
