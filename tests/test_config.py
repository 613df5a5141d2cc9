import pytest

from holarchy.config import Config


class TestConfig:
    """Flat-dict round trips over the config sections."""

    def test_to_dict_has_section_keys(self):
        data = Config.to_dict()
        assert data["physics.SPRING_CONSTANT"] == 0.5
        assert data["holarchy.EMERGENCE_THRESHOLD"] == 0.7
        assert data["memory.DECAY_RATE"] == 0.01
        assert data["core.MAX_DELTA_TIME"] == 0.05
        assert all("." in key for key in data)

    def test_from_dict_converts_types(self):
        Config.from_dict({
            "holarchy.DEPTH": "4",
            "physics.DAMPING_FACTOR": "0",
            "core.DEBUG": "yes",
        }, apply_env_overrides=False)
        assert Config.holarchy.DEPTH == 4
        assert Config.physics.DAMPING_FACTOR == 0.0
        assert Config.core.DEBUG is True

    def test_from_dict_ignores_unknown_keys(self):
        before = Config.to_dict()
        Config.from_dict({"nope.FIELD": 1, "physics.NOT_A_FIELD": 2, "flat": 3})
        assert Config.to_dict() == before

    def test_optional_velocity_threshold(self):
        Config.from_dict({"holarchy.EMERGENCE_VELOCITY_THRESHOLD": "1.5"}, apply_env_overrides=False)
        assert Config.holarchy.EMERGENCE_VELOCITY_THRESHOLD == 1.5
        Config.from_dict({"holarchy.EMERGENCE_VELOCITY_THRESHOLD": None}, apply_env_overrides=False)
        assert Config.holarchy.EMERGENCE_VELOCITY_THRESHOLD is None

    def test_env_overrides_take_precedence(self, monkeypatch):
        monkeypatch.setenv("HOLARCHY_SPRING_CONSTANT", "2.0")
        Config.from_dict({"physics.SPRING_CONSTANT": 9.0})
        assert Config.physics.SPRING_CONSTANT == 0.5
        Config.from_dict({"physics.SPRING_CONSTANT": 9.0}, apply_env_overrides=False)
        assert Config.physics.SPRING_CONSTANT == 9.0

    def test_diff(self):
        other = Config.to_dict()
        other["memory.DECAY_RATE"] = 0.5
        assert Config.diff(other) == {"memory.DECAY_RATE": (0.01, 0.5)}
