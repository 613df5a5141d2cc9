"""Public package interface for the holarchic N-body simulation core."""

from .hamiltonian import Attractor, AttractorMode, EnergyResult, PhysicsParams, integrate_hamiltonian
from .emergence import HolarchyParams, check_holarchic_emergence
from .memory import MemoryNode, MemoryParams, build_holarchic_tree, update_memory_nodes
from .particles import IdSequence, InvalidParticleError, Particle
from .simulation import Simulation, SimulationParams

__all__ = [
    "Attractor",
    "AttractorMode",
    "EnergyResult",
    "HolarchyParams",
    "IdSequence",
    "InvalidParticleError",
    "MemoryNode",
    "MemoryParams",
    "Particle",
    "PhysicsParams",
    "Simulation",
    "SimulationParams",
    "build_holarchic_tree",
    "check_holarchic_emergence",
    "integrate_hamiltonian",
    "update_memory_nodes",
]
