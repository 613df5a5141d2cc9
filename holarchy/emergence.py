# holarchy/emergence.py
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from .config import Config
from .events import log_event
from .particles import IdSequence, Particle, level_color
from .vectors import length, separation


@dataclass
class HolarchyParams:
    depth: int = 3
    emergence_threshold: float = 0.7
    # None -> emergence_threshold doubles as the relative-velocity bound
    emergence_velocity_threshold: Optional[float] = None
    constraint_strength: float = 0.0

    @property
    def velocity_threshold(self) -> float:
        if self.emergence_velocity_threshold is None:
            return self.emergence_threshold
        return self.emergence_velocity_threshold

    @classmethod
    def from_config(cls) -> "HolarchyParams":
        h = Config.holarchy
        return cls(
            depth=h.DEPTH,
            emergence_threshold=h.EMERGENCE_THRESHOLD,
            emergence_velocity_threshold=h.EMERGENCE_VELOCITY_THRESHOLD,
            constraint_strength=h.CONSTRAINT_STRENGTH,
        )


def merge_particles(a: Particle, b: Particle, new_id: str) -> Particle:
    """
    Fuse two same-level particles into one particle a level higher.
    Mass, momentum and charge add; position is the mass-weighted centroid.
    """
    new_mass = a.mass + b.mass
    new_position = (a.position * a.mass + b.position * b.mass) / new_mass
    new_level = a.level + 1
    return Particle(
        id=new_id,
        position=new_position,
        momentum=a.momentum + b.momentum,
        mass=new_mass,
        charge=a.charge + b.charge,
        level=new_level,
        energy=0.0,
        color=level_color(new_level),
    )


def check_holarchic_emergence(
    particles: Sequence[Particle],
    emergence_threshold: float,
    max_level: int,
    ids: Optional[IdSequence] = None,
    velocity_threshold: Optional[float] = None,
) -> List[Particle]:
    """
    Merge close, co-moving pairs at the same level into higher-level particles.

    Pairs are scanned in ascending index order and a particle takes part in
    at most one merge per pass. Returns the untouched particles in their
    original order followed by the merge products in creation order.
    Merge products never reuse an id held by the incoming population.
    """
    if ids is None:
        ids = IdSequence("p")
    ids.reserve(*(p.id for p in particles))
    if velocity_threshold is None:
        velocity_threshold = emergence_threshold

    merged: Set[int] = set()
    created: List[Particle] = []
    n = len(particles)

    for i in range(n):
        pi = particles[i]
        if i in merged:
            continue
        for j in range(i + 1, n):
            pj = particles[j]
            if j in merged:
                continue
            if pi.level != pj.level or pi.level >= max_level - 1:
                continue

            _, distance = separation(pi.position, pj.position)
            if distance >= emergence_threshold:
                continue
            rel_velocity = length(pj.momentum - pi.momentum) / (pi.mass + pj.mass)
            if rel_velocity >= velocity_threshold:
                continue

            merged.add(i)
            merged.add(j)
            product = merge_particles(pi, pj, ids.next())
            created.append(product)
            log_event("EMERGENCE", f"'{pi.id}' + '{pj.id}' -> '{product.id}'",
                      {"level": product.level, "mass": f"{product.mass:.2f}"})
            break

    survivors = [p for k, p in enumerate(particles) if k not in merged]
    return survivors + created
