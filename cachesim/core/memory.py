"""Backing memory for the cache.

`Memory` is the read contract the cache relies on: read(address, length)
returns exactly `length` bytes starting at `address`, or raises.

`RAM` is a simple byte-addressable implementation of it.

Parameters:
- RAM(size_bytes)
- read(address, length=1) -> bytes
- write(address, value) -> stores one byte at address
- reset() -> clears memory
"""
import logging
from abc import ABC, abstractmethod

LOGGER = logging.getLogger(__name__)


class Memory(ABC):
    @abstractmethod
    def read(self, address: int, length: int) -> bytes:
        """Return `length` bytes starting at `address`."""


class RAM(Memory):
    def __init__(self, size_bytes: int = 1024):
        if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
            raise TypeError(f"size_bytes must be int, got {type(size_bytes).__name__}")
        if size_bytes < 1:
            raise ValueError("size_bytes must be >= 1")
        self.size = size_bytes
        self.storage = bytearray(size_bytes)
        # number of read() calls, handy for checking hits never touch memory
        self.reads = 0

    @classmethod
    def from_bytes(cls, data) -> "RAM":
        ram = cls(len(data))
        ram.storage[:] = bytes(data)
        return ram

    def _check_range(self, address: int, length: int = 1) -> None:
        # Out-of-range accesses raise rather than clamp so a bad address
        # surfaces to whoever issued it.
        if isinstance(address, bool) or not isinstance(address, int):
            raise TypeError(f"address must be int, got {type(address).__name__}")
        if address < 0 or address + length > self.size:
            LOGGER.debug("out of range access: address=%d length=%d size=%d", address, length, self.size)
            raise IndexError(f"address range [{address}, {address + length}) out of range [0, {self.size})")

    def read(self, address: int, length: int = 1) -> bytes:
        """Read `length` bytes starting at `address`."""
        if length < 1:
            raise ValueError("length must be >= 1")
        self._check_range(address, length)
        self.reads += 1
        return bytes(self.storage[address:address + length])

    def write(self, address: int, value: int = 0):
        """Store one byte at `address`."""
        self._check_range(address)
        if not 0 <= int(value) <= 0xFF:
            raise ValueError(f"value {value} does not fit in a byte")
        self.storage[address] = int(value)

    def reset(self):
        self.storage = bytearray(self.size)
        self.reads = 0
