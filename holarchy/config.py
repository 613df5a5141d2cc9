import os
from dataclasses import dataclass, fields
from typing import Optional, Dict, Any


def _env_float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


@dataclass
class CoreConfig:
    SEED: int = int(os.getenv("HOLARCHY_SEED", "13"))
    DEBUG: bool = os.getenv("HOLARCHY_DEBUG", "0") == "1"
    MAX_DELTA_TIME: float = 0.05  # upper clamp on a single frame delta

@dataclass
class PhysicsConfig:
    # Hamiltonian coefficients
    SPRING_CONSTANT: float = _env_float("HOLARCHY_SPRING_CONSTANT", 0.5)
    DAMPING_FACTOR: float = _env_float("HOLARCHY_DAMPING_FACTOR", 0.02)
    GRAVITATIONAL_CONSTANT: float = _env_float("HOLARCHY_GRAVITATIONAL_CONSTANT", 0.1)
    COUPLING_STRENGTH: float = _env_float("HOLARCHY_COUPLING_STRENGTH", 0.3)
    TIME_SCALE: float = _env_float("HOLARCHY_TIME_SCALE", 1.0)

@dataclass
class HolarchyConfig:
    DEPTH: int = int(os.getenv("HOLARCHY_DEPTH", "3"))
    EMERGENCE_THRESHOLD: float = _env_float("HOLARCHY_EMERGENCE_THRESHOLD", 0.7)
    # None -> reuse EMERGENCE_THRESHOLD for the relative-velocity bound
    EMERGENCE_VELOCITY_THRESHOLD: Optional[float] = None
    CONSTRAINT_STRENGTH: float = 0.0  # 0 disables top-down coupling

@dataclass
class MemoryConfig:
    DECAY_RATE: float = _env_float("HOLARCHY_DECAY_RATE", 0.01)
    SYNCHRONIZATION_STRENGTH: float = 0.5
    ACTIVATION_THRESHOLD: float = 0.5

@dataclass
class SpawnConfig:
    SPREAD: float = 5.0
    MOMENTUM_RANGE: float = 2.0
    MIN_MASS: float = 1.0
    MASS_RANGE: float = 2.0
    MAX_SPAWN_LEVELS: int = 5


_SECTIONS = ["core", "physics", "holarchy", "memory", "spawn"]


class Config:
    """Centralized configuration defaults for the simulation core."""
    core = CoreConfig()
    physics = PhysicsConfig()
    holarchy = HolarchyConfig()
    memory = MemoryConfig()
    spawn = SpawnConfig()

    _loaded_from_dict: bool = False

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Serialize all config sections to a flat dictionary."""
        result = {}
        for section_name in _SECTIONS:
            section = getattr(cls, section_name)
            for f in fields(section):
                key = f"{section_name}.{f.name}"
                result[key] = getattr(section, f.name)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any], apply_env_overrides: bool = True):
        """
        Update config from a flat dictionary.
        If apply_env_overrides is True, environment variables take precedence.
        """
        for key, value in data.items():
            if "." not in key:
                continue
            section_name, field_name = key.split(".", 1)
            if section_name not in _SECTIONS:
                continue
            section = getattr(cls, section_name)
            if not hasattr(section, field_name):
                continue

            env_key = f"HOLARCHY_{field_name}"
            if apply_env_overrides and env_key in os.environ:
                continue  # env var wins

            current_value = getattr(section, field_name)
            if value is None:
                pass
            elif isinstance(current_value, bool):
                value = str(value).lower() in ("1", "true", "yes")
            elif isinstance(current_value, int):
                value = int(value)
            elif isinstance(current_value, float) or current_value is None:
                value = float(value)

            setattr(section, field_name, value)

        cls._loaded_from_dict = True

    @classmethod
    def diff(cls, other_dict: Dict[str, Any]) -> Dict[str, tuple]:
        """
        Compare current config with another dict.
        Returns dict of {key: (current_value, other_value)} for differences.
        """
        current = cls.to_dict()
        differences = {}
        all_keys = set(current.keys()) | set(other_dict.keys())
        for key in all_keys:
            curr_val = current.get(key)
            other_val = other_dict.get(key)
            if curr_val != other_val:
                differences[key] = (curr_val, other_val)
        return differences


SEED = Config.core.SEED
