#!/usr/bin/env python3
"""
Demo: Reinforcement-Based Memory Decay

Shows how a memory node whose level is still populated keeps its
strength, while a node whose level has emptied fades and is forgotten.
"""

from holarchy.memory import MemoryNode, MemoryParams, update_memory_nodes
from holarchy.particles import Particle

def main():
    print("="*70)
    print("REINFORCEMENT-BASED MEMORY DECAY")
    print("="*70)

    particles = [
        Particle(id="q1", position=(0.5, 0.0, 0.0)),
        Particle(id="q2", position=(-0.5, 0.0, 0.0)),
    ]
    nodes = [
        MemoryNode(id="reinforced", level=0, position=(0.0, 0.2, 0.0)),
        MemoryNode(id="abandoned", level=2, position=(3.0, 0.0, 0.0)),
    ]
    params = MemoryParams(decay_rate=0.5)

    print("\n[Simulation] 200 frames at dt=0.05")
    print("  → 'reinforced' has live level-0 particles")
    print("  → 'abandoned' has no particles left at level 2\n")

    for frame in range(1, 201):
        nodes = update_memory_nodes(nodes, particles, params, dt=0.05)
        if frame % 20 == 0:
            status = ", ".join(f"{n.id}={n.memory_strength:.3f}" for n in nodes)
            print(f"  Frame {frame:3d}: {status or '(all forgotten)'}")

    print("\n" + "="*70)
    print("RESULTS")
    print("="*70)
    survivors = {n.id for n in nodes}
    print(f"\n✓ reinforced: {'kept' if 'reinforced' in survivors else 'forgotten'}")
    print(f"✗ abandoned:  {'kept' if 'abandoned' in survivors else 'forgotten'}")

    print("\n" + "="*70)
    print("KEY INSIGHT:")
    print("Memory decays every frame; only a level that keeps matching")
    print("its stored pattern earns enough reinforcement to persist.")
    print("="*70)

if __name__ == "__main__":
    main()
