# holarchy/memory.py
"""
Holarchic memory.

Each memory node is a holon: a compressed summary (mass-weighted centroid,
activation, strength) of the particles at one holarchy level. Nodes
remember their level's pattern bottom-up, decay when unreinforced, and
are dropped once their strength fades to the pruning floor.
"""
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

import numpy as np

from .config import Config
from .events import log_event
from .particles import IdSequence, Particle
from .vectors import frozen_vec3, length, weighted_centroid

logger = logging.getLogger(__name__)

PRUNE_THRESHOLD = 0.01     # nodes at or below this strength are forgotten
LEARNING_RATE = 0.01       # fraction of the way a node moves towards its pattern per tick
REINFORCEMENT_GAIN = 0.1   # strength gained per unit similarity


@dataclass
class MemoryParams:
    decay_rate: float = 0.01
    synchronization_strength: float = 0.5
    activation_threshold: float = 0.5

    @classmethod
    def from_config(cls) -> "MemoryParams":
        m = Config.memory
        return cls(
            decay_rate=m.DECAY_RATE,
            synchronization_strength=m.SYNCHRONIZATION_STRENGTH,
            activation_threshold=m.ACTIVATION_THRESHOLD,
        )


@dataclass(eq=False)
class MemoryNode:
    id: str
    level: int
    position: np.ndarray
    children: FrozenSet[str] = field(default_factory=frozenset)
    parent: Optional[str] = None  # weak back-reference, may dangle after pruning
    activation_energy: float = 0.0
    memory_strength: float = 1.0

    def __post_init__(self):
        self.position = frozen_vec3(self.position)
        self.children = frozenset(self.children)

    def evolve(self, **changes: Any) -> "MemoryNode":
        return replace(self, **changes)

    def is_active(self, threshold: float) -> bool:
        return self.activation_energy >= threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level,
            "position": self.position.tolist(),
            "children": sorted(self.children),
            "parent": self.parent,
            "activation_energy": self.activation_energy,
            "memory_strength": self.memory_strength,
        }


def mass_centroid(particles: Sequence[Particle]) -> np.ndarray:
    return weighted_centroid((p.position for p in particles), (p.mass for p in particles))


def group_by_level(particles: Iterable[Particle]) -> Dict[int, List[Particle]]:
    """Level -> particles, levels in order of first appearance."""
    groups: Dict[int, List[Particle]] = {}
    for p in particles:
        groups.setdefault(p.level, []).append(p)
    return groups


def create_memory_node(
    particles: Sequence[Particle],
    level: int,
    node_id: str,
    parent: Optional[str] = None,
) -> MemoryNode:
    """Compress a non-empty particle ensemble into a fresh memory node."""
    return MemoryNode(
        id=node_id,
        level=level,
        position=mass_centroid(particles),
        children=frozenset(p.id for p in particles),
        parent=parent,
        activation_energy=float(sum(p.energy for p in particles)),
        memory_strength=1.0,
    )


def build_holarchic_tree(
    particles: Sequence[Particle],
    max_depth: int,
    ids: Optional[IdSequence] = None,
) -> List[MemoryNode]:
    """
    One memory node per populated level, linked into a forest.

    Nodes are sorted by level; each node's parent is the nearest earlier
    node with a strictly lower level, and the parent lists the child's id
    among its children.
    """
    if ids is None:
        ids = IdSequence("mem")

    groups = group_by_level(particles)
    too_deep = [level for level in groups if level >= max_depth]
    if too_deep:
        logger.warning(f"Levels {sorted(too_deep)} exceed configured depth {max_depth}")

    nodes = [create_memory_node(group, level, ids.next()) for level, group in groups.items()]
    nodes.sort(key=lambda n: n.level)

    for i in range(1, len(nodes)):
        current = nodes[i]
        for j in range(i - 1, -1, -1):
            candidate = nodes[j]
            if candidate.level < current.level:
                nodes[i] = current.evolve(parent=candidate.id)
                nodes[j] = candidate.evolve(children=candidate.children | {current.id})
                break

    if nodes:
        log_event("TREE", f"Built {len(nodes)} memory node(s)",
                  {"levels": [n.level for n in nodes]})
    return nodes


def matching_particles(node: MemoryNode, particles: Iterable[Particle]) -> List[Particle]:
    """Particles the node absorbed as children OR that share its level."""
    return [p for p in particles if p.id in node.children or p.level == node.level]


def update_memory_node(
    node: MemoryNode,
    particles: Sequence[Particle],
    params: MemoryParams,
    dt: float,
) -> MemoryNode:
    strength = node.memory_strength * (1 - params.decay_rate * dt)

    matches = matching_particles(node, particles)
    if not matches:
        return node.evolve(memory_strength=strength)

    centroid = mass_centroid(matches)
    distance = length(centroid - node.position)
    similarity = math.exp(-distance)
    strength = min(1.0, strength + similarity * REINFORCEMENT_GAIN)

    return node.evolve(
        position=node.position + (centroid - node.position) * LEARNING_RATE,
        memory_strength=strength,
        activation_energy=float(sum(p.energy for p in matches)),
    )


def update_memory_nodes(
    nodes: Sequence[MemoryNode],
    particles: Sequence[Particle],
    params: MemoryParams,
    dt: float,
) -> List[MemoryNode]:
    """Decay, reinforce and adapt every node, then forget the faded ones."""
    updated = [update_memory_node(node, particles, params, dt) for node in nodes]
    kept = [n for n in updated if n.memory_strength > PRUNE_THRESHOLD]
    if len(kept) < len(updated):
        faded = [n.id for n in updated if n.memory_strength <= PRUNE_THRESHOLD]
        log_event("PRUNE", f"Forgot {len(faded)} memory node(s)", {"ids": faded})
    return kept


def resolve_parent(node: MemoryNode, nodes: Iterable[MemoryNode]) -> Optional[MemoryNode]:
    """Follow the weak parent reference; None if absent or pruned."""
    if node.parent is None:
        return None
    for candidate in nodes:
        if candidate.id == node.parent:
            return candidate
    return None
