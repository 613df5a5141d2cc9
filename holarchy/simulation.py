# holarchy/simulation.py
"""
Simulation context.

Owns the particle population, the memory forest and the parameters for
one running simulation, and advances them one frame at a time:

  integrate -> emergence -> (build tree if empty) -> update memory

Each stage returns new collections; the context swaps them in wholesale.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from .config import Config
from .coupling import holarchic_constraints, synchronization_forces
from .emergence import HolarchyParams, check_holarchic_emergence
from .events import log_event
from .frame import Frame
from .hamiltonian import (
    Attractor,
    AttractorMode,
    EnergyResult,
    ForceField,
    PhysicsParams,
    integrate_hamiltonian,
    system_energies,
)
from .memory import MemoryNode, MemoryParams, build_holarchic_tree, update_memory_nodes
from .particles import IdSequence, InvalidParticleError, Particle, spawn_random_particles
from .recognition import coherence_summary, holarchic_coherence, recognize_pattern
from .vectors import VectorLike

logger = logging.getLogger(__name__)


@dataclass
class SpawnParams:
    spread: float = 5.0
    momentum_range: float = 2.0
    min_mass: float = 1.0
    mass_range: float = 2.0
    max_levels: int = 5

    @classmethod
    def from_config(cls) -> "SpawnParams":
        s = Config.spawn
        return cls(
            spread=s.SPREAD,
            momentum_range=s.MOMENTUM_RANGE,
            min_mass=s.MIN_MASS,
            mass_range=s.MASS_RANGE,
            max_levels=s.MAX_SPAWN_LEVELS,
        )


@dataclass
class SimulationParams:
    physics: PhysicsParams = field(default_factory=PhysicsParams)
    holarchy: HolarchyParams = field(default_factory=HolarchyParams)
    memory: MemoryParams = field(default_factory=MemoryParams)
    spawn: SpawnParams = field(default_factory=SpawnParams)
    max_delta_time: float = 0.05

    @classmethod
    def from_config(cls) -> "SimulationParams":
        return cls(
            physics=PhysicsParams.from_config(),
            holarchy=HolarchyParams.from_config(),
            memory=MemoryParams.from_config(),
            spawn=SpawnParams.from_config(),
            max_delta_time=Config.core.MAX_DELTA_TIME,
        )


class Simulation:
    """One running holarchic simulation. Not shared across threads."""

    def __init__(self, params: Optional[SimulationParams] = None, seed: Optional[int] = None):
        self.params = params if params is not None else SimulationParams.from_config()
        self.seed = Config.core.SEED if seed is None else seed
        self.rng = np.random.default_rng(self.seed)
        self.particle_ids = IdSequence("p")
        self.node_ids = IdSequence("mem")

        self.particles: List[Particle] = []
        self.memory_nodes: List[MemoryNode] = []
        self.energies = EnergyResult()
        self.attractor: Optional[Attractor] = None
        self.is_running = True
        self.step_count = 0

    # --- Frame loop ---
    def step(self, delta_time: float) -> Frame:
        """Advance one frame. Paused, empty or non-positive frames do no work."""
        if not self.is_running or not self.particles:
            return self.frame()
        dt = min(delta_time, self.params.max_delta_time)
        if dt <= 0:
            return self.frame()

        particles, energies = integrate_hamiltonian(
            self.particles,
            self.params.physics,
            dt,
            attractor=self.attractor,
            extra=self._constraint_field(),
        )

        holarchy = self.params.holarchy
        particles = check_holarchic_emergence(
            particles,
            holarchy.emergence_threshold,
            holarchy.depth,
            ids=self.particle_ids,
            velocity_threshold=holarchy.velocity_threshold,
        )

        nodes = self.memory_nodes
        if not nodes:
            nodes = build_holarchic_tree(particles, holarchy.depth, ids=self.node_ids)
        nodes = update_memory_nodes(nodes, particles, self.params.memory, dt)

        self.particles = particles
        self.memory_nodes = nodes
        self.energies = energies
        self.step_count += 1
        return self.frame()

    def run(self, steps: int, delta_time: float = 0.016) -> Frame:
        frame = self.frame()
        for _ in range(steps):
            frame = self.step(delta_time)
        return frame

    def frame(self) -> Frame:
        return Frame(
            step=self.step_count,
            particles=list(self.particles),
            memory_nodes=list(self.memory_nodes),
            energies=self.energies,
        )

    def _constraint_field(self) -> Optional[ForceField]:
        strength = self.params.holarchy.constraint_strength
        if strength <= 0 or not self.memory_nodes:
            return None
        nodes = self.memory_nodes
        return lambda particles: holarchic_constraints(particles, nodes, strength)

    # --- Population edits (host side) ---
    def spawn_random_particles(self, count: int) -> List[Particle]:
        spawn = self.params.spawn
        new_particles = spawn_random_particles(
            count,
            self.particle_ids,
            self.rng,
            depth=self.params.holarchy.depth,
            spread=spawn.spread,
            momentum_range=spawn.momentum_range,
            min_mass=spawn.min_mass,
            mass_range=spawn.mass_range,
            max_levels=spawn.max_levels,
        )
        self.particles = self.particles + new_particles
        logger.debug(f"Spawned {count} particle(s), population now {len(self.particles)}")
        return new_particles

    def add_particle(
        self,
        position: VectorLike,
        momentum: VectorLike = (0.0, 0.0, 0.0),
        mass: float = 1.0,
        charge: float = 0.0,
        level: int = 0,
        particle_id: Optional[str] = None,
    ) -> Particle:
        """Insert one particle; ids must be unique and levels below the configured depth."""
        depth = self.params.holarchy.depth
        if level >= depth:
            raise InvalidParticleError(f"level {level} is outside the holarchy depth {depth}")
        if particle_id is None:
            particle_id = self.particle_ids.next()
        elif any(p.id == particle_id for p in self.particles):
            raise InvalidParticleError(f"particle id {particle_id!r} is already in use")
        self.particle_ids.reserve(particle_id)

        particle = Particle(
            id=particle_id,
            position=position,
            momentum=momentum,
            mass=mass,
            charge=charge,
            level=level,
        )
        self.particles = self.particles + [particle]
        return particle

    def remove_particle(self, particle_id: str) -> bool:
        remaining = [p for p in self.particles if p.id != particle_id]
        removed = len(remaining) < len(self.particles)
        self.particles = remaining
        return removed

    def add_memory_node(self, node: MemoryNode):
        if any(n.id == node.id for n in self.memory_nodes):
            raise ValueError(f"memory node id {node.id!r} is already in use")
        self.node_ids.reserve(node.id)
        self.memory_nodes = self.memory_nodes + [node]

    def set_attractor(self, position: VectorLike, mode: AttractorMode = AttractorMode.ATTRACT):
        self.attractor = Attractor(position=position, mode=mode)

    def clear_attractor(self):
        self.attractor = None

    def pause(self):
        self.is_running = False

    def resume(self):
        self.is_running = True

    def reset(self):
        log_event("RESET", "Simulation cleared",
                  {"particles": len(self.particles), "memory_nodes": len(self.memory_nodes)})
        self.particles = []
        self.memory_nodes = []
        self.energies = EnergyResult()
        self.is_running = True
        self.step_count = 0

    # --- On-demand queries ---
    def recognize(self, level: int) -> Optional[MemoryNode]:
        return recognize_pattern(self.particles, self.memory_nodes, level)

    def coherence(self) -> float:
        return holarchic_coherence(self.particles, self.memory_nodes)

    def synchronization_forces(self) -> Dict[str, np.ndarray]:
        return synchronization_forces(self.memory_nodes, self.params.memory)

    def constraint_forces(self, constraint_strength: Optional[float] = None) -> Dict[str, np.ndarray]:
        if constraint_strength is None:
            constraint_strength = self.params.holarchy.constraint_strength
        return holarchic_constraints(self.particles, self.memory_nodes, constraint_strength)

    def current_energies(self) -> EnergyResult:
        """Energies of the current state, recomputed rather than cached."""
        return system_energies(self.particles, self.params.physics)

    def summary(self) -> Dict[str, Any]:
        threshold = self.params.memory.activation_threshold
        summary = {
            "step": self.step_count,
            "particles": len(self.particles),
            "memory_nodes": len(self.memory_nodes),
            "active_nodes": sum(1 for n in self.memory_nodes if n.is_active(threshold)),
            "energies": self.energies.to_dict(),
        }
        summary.update(coherence_summary(self.particles, self.memory_nodes))
        return summary
