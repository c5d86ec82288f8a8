"""Cache configuration.

A cache is described by three integers that never change for its lifetime:

- block_count: total number of slots in the cache
- bytes_per_block: size of one block (the unit fetched from memory)
- associativity: slots per set. 1 means direct mapped, block_count means
  fully associative, anything in between is set associative.

Configurations are validated when they are built so a bad combination fails
at construction instead of producing odd hit/miss numbers later.
"""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)


class CacheConfigError(ValueError):
    """Raised for a cache configuration that cannot be simulated."""


class CacheMode(Enum):
    DIRECT_MAPPED = "direct-mapped"
    FULLY_ASSOCIATIVE = "fully-associative"
    SET_ASSOCIATIVE = "set-associative"


_FIELDS = ("block_count", "bytes_per_block", "associativity")


@dataclass(frozen=True)
class CacheConfig:
    block_count: int
    bytes_per_block: int
    associativity: int = 1

    def __post_init__(self):
        for name in _FIELDS:
            value = getattr(self, name)
            # bool is an int subclass, but True blocks make no sense
            if isinstance(value, bool) or not isinstance(value, int):
                raise CacheConfigError(f"{name} must be an int, got {type(value).__name__}")
        if self.block_count < 1:
            raise CacheConfigError("block_count must be >= 1")
        if self.bytes_per_block < 1:
            raise CacheConfigError("bytes_per_block must be >= 1")
        if not 1 <= self.associativity <= self.block_count:
            raise CacheConfigError(
                f"associativity must be in [1, {self.block_count}], got {self.associativity}"
            )
        if self.block_count % self.associativity != 0:
            raise CacheConfigError(
                f"associativity {self.associativity} does not divide block_count {self.block_count}"
            )

    @property
    def mode(self) -> CacheMode:
        # direct mapped wins for a single-block cache (associativity == block_count == 1)
        if self.associativity == 1:
            return CacheMode.DIRECT_MAPPED
        if self.associativity == self.block_count:
            return CacheMode.FULLY_ASSOCIATIVE
        return CacheMode.SET_ASSOCIATIVE

    @property
    def num_sets(self) -> int:
        return self.block_count // self.associativity

    @property
    def capacity_bytes(self) -> int:
        return self.block_count * self.bytes_per_block

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "CacheConfig":
        """Build a config from a plain mapping such as a parsed JSON object."""
        unknown = sorted(set(values) - set(_FIELDS))
        if unknown:
            raise CacheConfigError(f"unknown cache config keys: {', '.join(unknown)}")
        missing = [k for k in ("block_count", "bytes_per_block") if k not in values]
        if missing:
            raise CacheConfigError(f"missing cache config keys: {', '.join(missing)}")
        return cls(**dict(values))


def load_config(path: str) -> CacheConfig:
    """Read a JSON config file.

    The keys can sit at the top level or under a "cache" object, e.g.
    {"cache": {"block_count": 8, "bytes_per_block": 4, "associativity": 2}}
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise CacheConfigError(f"{path}: expected a JSON object")
    section = raw.get("cache", raw)
    if not isinstance(section, dict):
        raise CacheConfigError(f"{path}: 'cache' must be a JSON object")
    config = CacheConfig.from_dict(section)
    LOGGER.info("loaded cache config from %s: %s", path, config)
    return config
