# holarchy/coupling.py
"""
Lateral and top-down couplings of the memory layer.

- Synchronization: same-level memory nodes pull towards each other,
  weighted by their mutual memory strength.
- Constraints: higher-level memory nodes pull lower-level particles
  towards their stored pattern.
"""
from typing import Dict, List, Sequence

import numpy as np

from .memory import MemoryNode, MemoryParams
from .particles import Particle
from .vectors import separation, zeros

MIN_COUPLING_DISTANCE = 0.01


def _group_nodes_by_level(nodes: Sequence[MemoryNode]) -> Dict[int, List[MemoryNode]]:
    groups: Dict[int, List[MemoryNode]] = {}
    for node in nodes:
        groups.setdefault(node.level, []).append(node)
    return groups


def synchronization_forces(
    nodes: Sequence[MemoryNode],
    params: MemoryParams,
) -> Dict[str, np.ndarray]:
    """
    Pairwise attraction between memory nodes of the same level.

    |F| = sync * s_i * s_j / d, directed at the peer. Only nodes with at
    least one peer appear in the result.
    """
    forces: Dict[str, np.ndarray] = {}

    for group in _group_nodes_by_level(nodes).values():
        if len(group) < 2:
            continue
        for node in group:
            force = zeros()
            for other in group:
                if other is node:
                    continue
                diff, distance = separation(node.position, other.position)
                if distance < MIN_COUPLING_DISTANCE:
                    continue
                coupling = params.synchronization_strength * node.memory_strength * other.memory_strength
                force += (diff / distance) * (coupling / distance)
            forces[node.id] = force

    return forces


def holarchic_constraints(
    particles: Sequence[Particle],
    nodes: Sequence[MemoryNode],
    constraint_strength: float,
) -> Dict[str, np.ndarray]:
    """
    Top-down pull of higher-level memory on each particle.

    Every node above the particle's level contributes
    strength * s_node / (1 + level gap) along the unit vector to the node.
    """
    constraints: Dict[str, np.ndarray] = {}

    for particle in particles:
        constraint = zeros()
        for node in nodes:
            if node.level <= particle.level:
                continue
            diff, distance = separation(particle.position, node.position)
            if distance < MIN_COUPLING_DISTANCE:
                continue
            level_diff = node.level - particle.level
            strength = constraint_strength * node.memory_strength / (1 + level_diff)
            constraint += (diff / distance) * strength
        constraints[particle.id] = constraint

    return constraints
