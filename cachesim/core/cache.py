"""Core cache implementation

This file provides the read-only block cache model used by the simulator.
Behavior:
- The cache has `block_count` slots, each holding one block of
  `bytes_per_block` bytes copied from the backing memory.
- Address decomposition depends on the mode:
    offset = address % bytes_per_block
    direct-mapped / set-associative:
        index = (address // bytes_per_block) % block_count
        tag = address // (bytes_per_block * block_count)
    fully-associative:
        index = 0 (every slot is searched)
        tag = address // bytes_per_block
- Set-associative placement uses the same single slot as direct-mapped; the
  ways of a set are not searched.
- Fully-associative misses fill the first invalid slot, and once every slot is
  valid they always replace the last slot. There is no recency tracking.
- access() returns an AccessResult; load() returns just the byte.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from cachesim.core.config import CacheConfig, CacheMode
from cachesim.core.memory import Memory
from cachesim.data.stats_export import Statistics

LOGGER = logging.getLogger(__name__)


@dataclass
class CacheSlot:
    """container for one cache slot.

    Fields:
    - tag: the tag stored in the slot (None until the first fill)
    - valid: whether the slot currently holds a block
    - data: the cached copy of the block (bytes_per_block bytes)
    """

    tag: Optional[int] = None
    valid: bool = False
    data: bytes = b""


@dataclass
class AccessResult:
    address: int
    value: int
    hit: bool
    slot: int
    tag: int
    offset: int
    # tag of the block that was replaced, if the fill overwrote a valid slot
    evicted_tag: Optional[int] = None


class Cache:
    """Read-only cache in front of a `Memory`.

    Not thread safe: callers sharing a cache between threads must hold their
    own lock around each load().
    """

    def __init__(
        self,
        memory: Memory,
        block_count: int,
        bytes_per_block: int,
        associativity: int = 1,
        stats: Optional[Statistics] = None,
    ):
        self.config = CacheConfig(block_count, bytes_per_block, associativity)
        self.memory = memory
        self.stats = stats if stats is not None else Statistics()
        self._slots = [CacheSlot(data=bytes(bytes_per_block)) for _ in range(block_count)]
        LOGGER.info(
            "cache created: %s, %d blocks x %d bytes, associativity %d",
            self.mode.value, block_count, bytes_per_block, associativity,
        )

    @classmethod
    def from_config(cls, memory: Memory, config: CacheConfig, stats: Optional[Statistics] = None) -> "Cache":
        return cls(memory, config.block_count, config.bytes_per_block, config.associativity, stats=stats)

    @property
    def block_count(self) -> int:
        return self.config.block_count

    @property
    def bytes_per_block(self) -> int:
        return self.config.bytes_per_block

    @property
    def associativity(self) -> int:
        return self.config.associativity

    @property
    def mode(self) -> CacheMode:
        return self.config.mode

    @property
    def slots(self) -> Tuple[CacheSlot, ...]:
        """Snapshot of every slot; changing it does not touch the cache."""
        return tuple(replace(s) for s in self._slots)

    @property
    def occupancy(self) -> int:
        return sum(1 for s in self._slots if s.valid)

    @staticmethod
    def _check_address(address: int) -> None:
        if isinstance(address, bool) or not isinstance(address, int):
            raise TypeError(f"address must be int, got {type(address).__name__}")
        if address < 0:
            raise ValueError(f"address must be non-negative, got {address}")

    def offset(self, address: int) -> int:
        self._check_address(address)
        return address % self.bytes_per_block

    def block_address(self, address: int) -> int:
        return address - self.offset(address)

    def index(self, address: int) -> int:
        self._check_address(address)
        if self.mode is CacheMode.FULLY_ASSOCIATIVE:
            return 0
        return (address // self.bytes_per_block) % self.block_count

    def tag(self, address: int) -> int:
        self._check_address(address)
        if self.mode is CacheMode.FULLY_ASSOCIATIVE:
            return address // self.bytes_per_block
        return address // (self.bytes_per_block * self.block_count)

    def _find(self, tag: int, index: int) -> Optional[int]:
        if self.mode is CacheMode.FULLY_ASSOCIATIVE:
            for i, slot in enumerate(self._slots):
                if slot.valid and slot.tag == tag:
                    return i
            return None
        slot = self._slots[index]
        if slot.valid and slot.tag == tag:
            return index
        return None

    def _victim(self, index: int) -> int:
        if self.mode is not CacheMode.FULLY_ASSOCIATIVE:
            return index
        for i, slot in enumerate(self._slots):
            if not slot.valid:
                return i
        # full: always the last slot
        return self.block_count - 1

    def probe(self, address: int) -> Optional[int]:
        """Return the slot that would hit for `address`, or None.

        Never reads memory and never changes the cache.
        """
        return self._find(self.tag(address), self.index(address))

    def access(self, address: int) -> AccessResult:
        """Look up `address`, filling a slot from memory on a miss."""
        tag = self.tag(address)
        index = self.index(address)
        offset = self.offset(address)

        hit_slot = self._find(tag, index)
        if hit_slot is not None:
            value = self._slots[hit_slot].data[offset]
            LOGGER.debug("hit address=%d slot=%d tag=%d offset=%d", address, hit_slot, tag, offset)
            self.stats.record_access(True)
            return AccessResult(address, value, True, hit_slot, tag, offset)

        victim_index = self._victim(index)
        base = address - offset
        # memory errors propagate as-is and leave the cache untouched
        block = bytes(self.memory.read(base, self.bytes_per_block))
        if len(block) != self.bytes_per_block:
            raise ValueError(
                f"memory returned {len(block)} bytes for block at {base}, expected {self.bytes_per_block}"
            )

        victim = self._slots[victim_index]
        evicted_tag = victim.tag if victim.valid else None
        victim.data = block
        victim.valid = True
        victim.tag = tag

        if evicted_tag is None:
            LOGGER.debug("miss address=%d slot=%d tag=%d offset=%d", address, victim_index, tag, offset)
        else:
            LOGGER.debug(
                "miss address=%d slot=%d tag=%d offset=%d evicted tag=%d",
                address, victim_index, tag, offset, evicted_tag,
            )
        self.stats.record_access(False, evicted=evicted_tag is not None)
        return AccessResult(address, block[offset], False, victim_index, tag, offset, evicted_tag)

    def load(self, address: int) -> int:
        """Return the byte stored at `address`."""
        return self.access(address).value

    def resident_blocks(self) -> Dict[int, int]:
        """Map each valid slot to the memory address of the block it holds."""
        blocks = {}
        for i, slot in enumerate(self._slots):
            if not slot.valid:
                continue
            if self.mode is CacheMode.FULLY_ASSOCIATIVE:
                blocks[i] = slot.tag * self.bytes_per_block
            else:
                blocks[i] = (slot.tag * self.block_count + i) * self.bytes_per_block
        return blocks
