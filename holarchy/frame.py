# holarchy/frame.py
from dataclasses import dataclass, field
from typing import List, Dict, Any
import json

from .hamiltonian import EnergyResult
from .memory import MemoryNode
from .particles import Particle


@dataclass
class Frame:
    """
    Output of one simulation tick: the particle population, the memory
    nodes and the energy triple. Handed to the host for rendering.
    """
    step: int
    particles: List[Particle]
    memory_nodes: List[MemoryNode]
    energies: EnergyResult = field(default_factory=EnergyResult)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "particles": [p.to_dict() for p in self.particles],
            "memory_nodes": [n.to_dict() for n in self.memory_nodes],
            "energies": self.energies.to_dict(),
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def to_text_block(self) -> str:
        """Dense, human-readable rendering for consoles and logs."""
        e = self.energies
        lines = [
            "### HOLARCHIC FRAME ###",
            f"Step: {self.step}",
            f"Energy: kinetic={e.kinetic:.4f} potential={e.potential:.4f} total={e.total:.4f}",
            "",
            "#### PARTICLES",
        ]

        if not self.particles:
            lines.append("(No particles)")
        else:
            counts: Dict[int, int] = {}
            for p in self.particles:
                counts[p.level] = counts.get(p.level, 0) + 1
            for level in sorted(counts):
                lines.append(f"- level {level}: {counts[level]}")

        lines.append("")
        lines.append("#### MEMORY NODES")
        if not self.memory_nodes:
            lines.append("(No memory nodes)")
        else:
            for n in self.memory_nodes:
                parent = n.parent or "-"
                lines.append(f"- {n.id} (level={n.level}, strength={n.memory_strength:.3f}, "
                             f"activation={n.activation_energy:.3f}, parent={parent})")

        return "\n".join(lines)
