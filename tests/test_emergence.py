import numpy as np
import pytest

from holarchy.emergence import HolarchyParams, check_holarchic_emergence, merge_particles
from holarchy.particles import HOLARCHY_COLORS, IdSequence, Particle


class TestEmergence:

    def test_close_still_pair_merges(self, still_pair):
        """Two unit masses 0.05 apart at rest become one level-1 particle."""
        result = check_holarchic_emergence(still_pair, emergence_threshold=0.7, max_level=3)
        assert len(result) == 1
        merged = result[0]
        assert merged.level == 1
        assert merged.mass == pytest.approx(2.0)
        np.testing.assert_allclose(merged.position, [0.025, 0.0, 0.0])
        np.testing.assert_allclose(merged.momentum, [0.0, 0.0, 0.0])
        assert merged.energy == 0.0
        assert merged.color == HOLARCHY_COLORS[1]
        assert {"a", "b"}.isdisjoint(p.id for p in result)

    def test_merge_conserves_mass_momentum_charge(self):
        a = Particle(id="a", position=(0, 0, 0), momentum=(0.3, -0.1, 0.2), mass=1.5, charge=1.0)
        b = Particle(id="b", position=(0.2, 0, 0), momentum=(0.1, 0.4, -0.2), mass=2.5, charge=-1.0)
        result = check_holarchic_emergence([a, b], 0.7, 3)
        assert len(result) == 1
        merged = result[0]
        assert merged.mass == a.mass + b.mass
        np.testing.assert_array_equal(merged.momentum, a.momentum + b.momentum)
        assert merged.charge == 0.0
        np.testing.assert_allclose(merged.position, [0.2 * 2.5 / 4.0, 0.0, 0.0])

    def test_far_pair_survives(self):
        a = Particle(id="a", position=(0, 0, 0))
        b = Particle(id="b", position=(1.0, 0, 0))
        result = check_holarchic_emergence([a, b], 0.7, 3)
        assert [p.id for p in result] == ["a", "b"]

    def test_fast_pair_survives(self):
        a = Particle(id="a", position=(0, 0, 0), momentum=(1.0, 0, 0))
        b = Particle(id="b", position=(0.1, 0, 0), momentum=(-1.0, 0, 0))
        # |dp| / (m1 + m2) = 2 / 2 = 1.0 >= 0.7
        result = check_holarchic_emergence([a, b], 0.7, 3)
        assert len(result) == 2

    def test_separate_velocity_threshold(self):
        a = Particle(id="a", position=(0, 0, 0), momentum=(1.0, 0, 0))
        b = Particle(id="b", position=(0.1, 0, 0), momentum=(-1.0, 0, 0))
        result = check_holarchic_emergence([a, b], 0.7, 3, velocity_threshold=1.5)
        assert len(result) == 1

    def test_different_levels_never_merge(self):
        a = Particle(id="a", position=(0, 0, 0), level=0)
        b = Particle(id="b", position=(0.05, 0, 0), level=1)
        assert len(check_holarchic_emergence([a, b], 0.7, 3)) == 2

    def test_top_levels_never_merge(self):
        a = Particle(id="a", position=(0, 0, 0), level=2)
        b = Particle(id="b", position=(0.05, 0, 0), level=2)
        # level must stay below max_level - 1
        assert len(check_holarchic_emergence([a, b], 0.7, 3)) == 2
        assert len(check_holarchic_emergence([a, b], 0.7, 4)) == 1

    def test_first_found_pair_wins(self):
        """A particle takes part in at most one merge per pass."""
        particles = [
            Particle(id="a", position=(0.0, 0, 0)),
            Particle(id="b", position=(0.1, 0, 0)),
            Particle(id="c", position=(0.2, 0, 0)),
        ]
        result = check_holarchic_emergence(particles, 0.7, 3, ids=IdSequence("p"))
        assert [p.id for p in result] == ["c", "p_1"]
        assert result[1].mass == pytest.approx(2.0)
        np.testing.assert_allclose(result[1].position, [0.05, 0.0, 0.0])

    def test_output_order_and_deterministic_ids(self):
        particles = [
            Particle(id="a", position=(0.0, 0, 0)),
            Particle(id="lonely", position=(5.0, 0, 0)),
            Particle(id="b", position=(0.1, 0, 0)),
            Particle(id="c", position=(-5.0, 0, 0)),
            Particle(id="d", position=(-5.1, 0, 0)),
        ]
        ids = IdSequence("p", start=10)
        result = check_holarchic_emergence(particles, 0.7, 3, ids=ids)
        assert [p.id for p in result] == ["lonely", "p_10", "p_11"]

    def test_total_mass_is_conserved_over_a_pass(self):
        rng = np.random.default_rng(3)
        particles = [
            Particle(id=f"x{i}", position=rng.random(3), mass=1.0 + rng.random())
            for i in range(12)
        ]
        result = check_holarchic_emergence(particles, 0.7, 3)
        assert sum(p.mass for p in result) == pytest.approx(sum(p.mass for p in particles))
        assert len(result) < len(particles)

    def test_merge_particles_color_and_level(self):
        a = Particle(id="a", position=(0, 0, 0), level=1)
        b = Particle(id="b", position=(0, 0, 0), level=1)
        merged = merge_particles(a, b, "m")
        assert merged.id == "m"
        assert merged.level == 2
        assert merged.color == HOLARCHY_COLORS[2]


class TestHolarchyParams:

    def test_velocity_threshold_defaults_to_distance_threshold(self):
        assert HolarchyParams(emergence_threshold=0.4).velocity_threshold == 0.4
        assert HolarchyParams(emergence_threshold=0.4,
                              emergence_velocity_threshold=2.0).velocity_threshold == 2.0


class TestMergeIds:

    def test_default_ids_skip_live_population(self):
        """Merge products never take an id that a survivor still holds."""
        particles = [
            Particle(id="p_1", position=(0.0, 0, 0)),
            Particle(id="p_2", position=(5.0, 0, 0)),
            Particle(id="p_3", position=(-5.0, 0, 0)),
            Particle(id="p_4", position=(-5.05, 0, 0)),
        ]
        result = check_holarchic_emergence(particles, 0.7, 3)
        ids = [p.id for p in result]
        assert ids == ["p_1", "p_2", "p_5"]
        assert len(set(ids)) == len(ids)
        assert sum(p.mass for p in result) == pytest.approx(4.0)

    def test_supplied_sequence_is_advanced_past_population(self):
        particles = [
            Particle(id="p_7", position=(0.0, 0, 0)),
            Particle(id="p_8", position=(0.05, 0, 0)),
        ]
        ids = IdSequence("p")
        result = check_holarchic_emergence(particles, 0.7, 3, ids=ids)
        assert [p.id for p in result] == ["p_9"]
        assert ids.next() == "p_10"

    def test_shared_id_does_not_drop_untouched_particle(self):
        """Survivors are tracked by position in the input, not by id."""
        a = Particle(id="p_1", position=(0.0, 0, 0))
        c = Particle(id="p_2", position=(0.05, 0, 0))
        b = Particle(id="p_1", position=(1.0, 0, 0))
        result = check_holarchic_emergence([a, c, b], 0.7, 3)
        assert b in result
        assert sum(p.mass for p in result) == pytest.approx(3.0)
