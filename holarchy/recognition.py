# holarchy/recognition.py
"""Read-only queries over the particle population and its memory."""
import math
from typing import Any, Dict, Optional, Sequence

from .memory import MemoryNode, group_by_level, mass_centroid
from .particles import Particle
from .vectors import length

RECOGNITION_THRESHOLD = 0.1


def recognize_pattern(
    particles: Sequence[Particle],
    nodes: Sequence[MemoryNode],
    level: int,
) -> Optional[MemoryNode]:
    """
    Memory node best matching the current pattern at `level`.

    Score = memory_strength * exp(-distance to the level's centroid).
    The first node reaching the best score wins; None if nothing scores
    above the recognition threshold.
    """
    level_particles = [p for p in particles if p.level == level]
    if not level_particles:
        return None

    centroid = mass_centroid(level_particles)
    best_match = None
    best_similarity = -1.0

    for node in nodes:
        if node.level != level:
            continue
        distance = length(centroid - node.position)
        similarity = node.memory_strength * math.exp(-distance)
        if similarity > best_similarity:
            best_similarity = similarity
            best_match = node

    return best_match if best_similarity > RECOGNITION_THRESHOLD else None


def holarchic_coherence(particles: Sequence[Particle], nodes: Sequence[MemoryNode]) -> float:
    """
    Mean of exp(-distance) * memory_strength over every (node, same-level
    particle) pair. 0.0 when there is nothing to compare.
    """
    if not particles or not nodes:
        return 0.0

    by_level = group_by_level(particles)
    total = 0.0
    count = 0
    for node in nodes:
        for particle in by_level.get(node.level, []):
            distance = length(particle.position - node.position)
            total += math.exp(-distance) * node.memory_strength
            count += 1

    return total / count if count > 0 else 0.0


def coherence_summary(particles: Sequence[Particle], nodes: Sequence[MemoryNode]) -> Dict[str, Any]:
    """Aggregate coherence plus the recognized node per populated level."""
    levels = sorted(group_by_level(particles))
    per_level = {}
    for level in levels:
        level_nodes = [n for n in nodes if n.level == level]
        match = recognize_pattern(particles, level_nodes, level)
        per_level[level] = {
            "coherence": round(holarchic_coherence(particles, level_nodes), 4),
            "recognized": match.id if match is not None else None,
        }
    return {
        "coherence": round(holarchic_coherence(particles, nodes), 4),
        "levels": per_level,
    }
