"""Core package shim.

Exposes the cache, its configuration and the memory model at
`cachesim.core` so callers can write `from cachesim.core import Cache`.
"""
from .cache import AccessResult, Cache, CacheSlot
from .config import CacheConfig, CacheConfigError, CacheMode, load_config
from .memory import RAM, Memory

__all__ = [
    "AccessResult",
    "Cache",
    "CacheConfig",
    "CacheConfigError",
    "CacheMode",
    "CacheSlot",
    "Memory",
    "RAM",
    "load_config",
]
