"""Core cache implementation

This file provides the set-associative cache model used by the trace replayer.
Behavior:
- Cache is composed of 2^s sets; each set has `associativity` lines.
  set_index = (address >> block_bits) % num_sets
  tag = address >> (block_bits + index_bits)
- Lines live in one flat list, set `i` owns lines[i*E : (i+1)*E].
- Replacement is true LRU: every hit or fill stamps the line with a
  per-cache counter, the victim is the line with the smallest stamp.
- Access returns an Outcome (HIT, MISS or MISS_EVICT).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


DEFAULT_ADDRESS_WIDTH = 64


class ConfigurationError(ValueError):
    """Raised when the cache geometry or the command line is unusable."""


class Outcome(Enum):
    HIT = "hit"
    MISS = "miss"
    MISS_EVICT = "miss eviction"

    @property
    def is_hit(self) -> bool:
        return self is Outcome.HIT

    @property
    def evicted(self) -> bool:
        return self is Outcome.MISS_EVICT


@dataclass(frozen=True)
class CacheGeometry:
    """Shape of the cache.

    Fields:
    - index_bits (s): number of set index bits, num_sets = 2^s
    - associativity (E): lines per set
    - block_bits (b): number of block offset bits, block_size = 2^b
    - address_width: width of the address bit-vector
    """

    index_bits: int
    associativity: int
    block_bits: int
    address_width: int = DEFAULT_ADDRESS_WIDTH

    def __post_init__(self):
        if self.index_bits < 0:
            raise ConfigurationError("index bits must be >= 0")
        if self.associativity < 1:
            raise ConfigurationError("associativity must be >= 1")
        if self.block_bits < 0:
            raise ConfigurationError("block bits must be >= 0")
        if self.index_bits + self.block_bits > self.address_width:
            raise ConfigurationError(
                f"index bits + block bits ({self.index_bits + self.block_bits}) "
                f"exceed the {self.address_width}-bit address width"
            )

    @property
    def num_sets(self) -> int:
        return 1 << self.index_bits

    @property
    def block_size(self) -> int:
        return 1 << self.block_bits

    @property
    def num_lines(self) -> int:
        return self.num_sets * self.associativity


@dataclass
class Line:
    """container for a cache line.

    tag and last_used mean nothing while valid is False.
    """

    valid: bool = False
    tag: int = 0
    last_used: int = 0


class Cache:
    """Set-associative cache with LRU replacement."""

    def __init__(self, geometry: CacheGeometry):
        self.geometry = geometry
        self.num_sets = geometry.num_sets
        self.associativity = geometry.associativity
        self._address_mask = (1 << geometry.address_width) - 1
        self.lines: List[Line] = [Line() for _ in range(geometry.num_lines)]
        # stamps start at 1 so any used line is newer than an empty one
        self.clock = 1

    def decode(self, address: int) -> Tuple[int, int, int]:
        """Decode address into (set_index, tag, block_offset)."""
        g = self.geometry
        address &= self._address_mask
        block_offset = address & (g.block_size - 1)
        set_index = (address >> g.block_bits) & (self.num_sets - 1)
        tag = address >> (g.block_bits + g.index_bits)
        return set_index, tag, block_offset

    def lines_in_set(self, set_index: int) -> List[Line]:
        start = set_index * self.associativity
        return self.lines[start:start + self.associativity]

    def _tick(self) -> int:
        stamp = self.clock
        self.clock += 1
        return stamp

    def access(self, address: int) -> Outcome:
        """Look up `address`, filling or replacing a line on a miss."""
        set_index, tag, _ = self.decode(address)
        start = set_index * self.associativity
        end = start + self.associativity
        lines = self.lines

        for i in range(start, end):
            line = lines[i]
            if line.valid and line.tag == tag:
                line.last_used = self._tick()
                return Outcome.HIT

        # victim: smallest stamp, first one wins on ties
        victim = lines[start]
        for i in range(start + 1, end):
            if lines[i].last_used < victim.last_used:
                victim = lines[i]

        outcome = Outcome.MISS_EVICT if victim.valid else Outcome.MISS
        victim.valid = True
        victim.tag = tag
        victim.last_used = self._tick()
        return outcome

    def reset(self):
        """Invalidate every line and rewind the LRU clock."""
        for line in self.lines:
            line.valid = False
            line.tag = 0
            line.last_used = 0
        self.clock = 1
