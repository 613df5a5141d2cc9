# holarchy/hamiltonian.py
"""
Hamiltonian dynamics engine.

H(q, p) = T(p) + V(q), where
  T(p) = sum(p^2 / 2m)
  V(q) = sum(0.5 k |q|^2) + pairwise gravity + level-modulated Coulomb

Positions and momenta are advanced with velocity Verlet, which is
symplectic and time-reversible for the conservative part of the force.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from .config import Config
from .particles import Particle
from .vectors import frozen_vec3, separation, zeros

# --- Constants ---
MIN_PAIR_DISTANCE = 0.1       # pairwise terms vanish below this separation
ATTRACTOR_MIN_DISTANCE = 0.1
ATTRACTOR_MAX_DISTANCE = 10.0
ATTRACTOR_STRENGTH = 5.0


@dataclass
class PhysicsParams:
    spring_constant: float = 0.5
    damping_factor: float = 0.02
    gravitational_constant: float = 0.1
    coupling_strength: float = 0.3
    time_scale: float = 1.0

    @classmethod
    def from_config(cls) -> "PhysicsParams":
        p = Config.physics
        return cls(
            spring_constant=p.SPRING_CONSTANT,
            damping_factor=p.DAMPING_FACTOR,
            gravitational_constant=p.GRAVITATIONAL_CONSTANT,
            coupling_strength=p.COUPLING_STRENGTH,
            time_scale=p.TIME_SCALE,
        )


class AttractorMode(str, Enum):
    ATTRACT = "attract"
    REPEL = "repel"
    SPAWN = "spawn"      # host-side population edit, no force
    DESTROY = "destroy"  # host-side population edit, no force


@dataclass
class Attractor:
    """External influence point, e.g. driven by a pointer."""
    position: np.ndarray
    mode: AttractorMode = AttractorMode.ATTRACT

    def __post_init__(self):
        self.position = frozen_vec3(self.position)
        self.mode = AttractorMode(self.mode)


@dataclass
class EnergyResult:
    kinetic: float = 0.0
    potential: float = 0.0
    total: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.kinetic, self.potential, self.total)

    def to_dict(self) -> Dict[str, float]:
        return {"kinetic": self.kinetic, "potential": self.potential, "total": self.total}


# Extra force field evaluated alongside the Hamiltonian force,
# e.g. top-down holarchic constraints. Maps particle id -> force.
ForceField = Callable[[Sequence[Particle]], Mapping[str, np.ndarray]]


def holarchic_modifier(level_a: int, level_b: int) -> float:
    """Same level couples fully; otherwise 0.5 / (1 + |dl|)."""
    level_diff = abs(level_a - level_b)
    return 1.0 if level_diff == 0 else 0.5 / (1 + level_diff)


def pair_force(a: Particle, b: Particle, params: PhysicsParams) -> np.ndarray:
    """Gravitational plus charge-coupling force exerted on `a` by `b`."""
    diff, distance = separation(a.position, b.position)
    if distance < MIN_PAIR_DISTANCE:
        return zeros()
    direction = diff / distance
    inv_r2 = 1.0 / (distance * distance)

    # F_grav = G m1 m2 / r^2, towards the other particle
    grav = params.gravitational_constant * a.mass * b.mass * inv_r2
    # Coulomb-like, like charges repel
    coulomb = params.coupling_strength * a.charge * b.charge * inv_r2
    coulomb *= holarchic_modifier(a.level, b.level)

    return direction * (grav - coulomb)


def attractor_force(particle: Particle, attractor: Optional[Attractor]) -> np.ndarray:
    if attractor is None:
        return zeros()
    diff, distance = separation(particle.position, attractor.position)
    if not (ATTRACTOR_MIN_DISTANCE < distance < ATTRACTOR_MAX_DISTANCE):
        return zeros()
    strength = ATTRACTOR_STRENGTH / (distance * distance)
    direction = diff / distance
    if attractor.mode == AttractorMode.ATTRACT:
        return direction * strength
    if attractor.mode == AttractorMode.REPEL:
        return direction * -strength
    return zeros()


def compute_force(
    particle: Particle,
    particles: Sequence[Particle],
    params: PhysicsParams,
    attractor: Optional[Attractor] = None,
) -> np.ndarray:
    """
    Net force on one particle from the full population.

    F = -k q - gamma p/m + sum_j pair_force(i, j) + attractor
    """
    # Harmonic central potential: F_spring = -k r
    force = particle.position * -params.spring_constant
    # Dissipation: F_damp = -gamma v
    force = force - particle.velocity * params.damping_factor

    for other in particles:
        if other is particle:
            continue
        force = force + pair_force(particle, other, params)

    return force + attractor_force(particle, attractor)


def compute_forces(
    particles: Sequence[Particle],
    params: PhysicsParams,
    attractor: Optional[Attractor] = None,
    extra: Optional[ForceField] = None,
) -> List[np.ndarray]:
    forces = [compute_force(p, particles, params, attractor) for p in particles]
    if extra is not None:
        field = extra(particles)
        forces = [f + field[p.id] if p.id in field else f for p, f in zip(particles, forces)]
    return forces


def kinetic_energy(particles: Sequence[Particle]) -> float:
    """T = sum(p^2 / 2m)"""
    return float(sum(p.kinetic_energy() for p in particles))


def potential_energy(particles: Sequence[Particle], params: PhysicsParams) -> float:
    """Spring potential plus pairwise gravity and level-modulated Coulomb."""
    potential = 0.0
    for p in particles:
        potential += 0.5 * params.spring_constant * float(np.dot(p.position, p.position))

    n = len(particles)
    for i in range(n):
        pi = particles[i]
        for j in range(i + 1, n):
            pj = particles[j]
            _, distance = separation(pi.position, pj.position)
            if distance < MIN_PAIR_DISTANCE:
                continue
            # V = -G m1 m2 / r
            potential -= params.gravitational_constant * pi.mass * pj.mass / distance
            # V = k q1 q2 / r, holarchically modified
            potential += (params.coupling_strength * pi.charge * pj.charge
                          * holarchic_modifier(pi.level, pj.level) / distance)
    return potential


def system_energies(particles: Sequence[Particle], params: PhysicsParams) -> EnergyResult:
    kinetic = kinetic_energy(particles)
    potential = potential_energy(particles, params)
    return EnergyResult(kinetic=kinetic, potential=potential, total=kinetic + potential)


def integrate_hamiltonian(
    particles: Sequence[Particle],
    params: PhysicsParams,
    dt: float,
    attractor: Optional[Attractor] = None,
    extra: Optional[ForceField] = None,
) -> Tuple[List[Particle], EnergyResult]:
    """
    One velocity-Verlet step.

    1. q(t+dt) = q(t) + p(t)/m dt + 0.5 F(t)/m dt^2
    2. F(t+dt) at the new positions (damping still sees p(t))
    3. p(t+dt) = p(t) + 0.5 (F(t) + F(t+dt)) dt

    `dt` is scaled by params.time_scale. A non-positive step returns the
    population unchanged together with its current energies.
    """
    particles = list(particles)
    time_step = dt * params.time_scale
    if dt <= 0 or time_step <= 0:
        return particles, system_energies(particles, params)

    forces = compute_forces(particles, params, attractor, extra)

    moved = []
    for p, f in zip(particles, forces):
        acceleration = f / p.mass
        new_position = p.position + p.velocity * time_step + 0.5 * acceleration * time_step * time_step
        moved.append(p.evolve(position=new_position))

    new_forces = compute_forces(moved, params, attractor, extra)

    final = []
    for p, f_old, f_new in zip(moved, forces, new_forces):
        new_momentum = p.momentum + 0.5 * (f_old + f_new) * time_step
        # per-particle kinetic energy, used for display only
        energy = float(np.dot(new_momentum, new_momentum)) / (2.0 * p.mass)
        final.append(p.evolve(momentum=new_momentum, energy=energy))

    return final, system_energies(final, params)
